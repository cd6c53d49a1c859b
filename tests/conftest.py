from __future__ import annotations

from pathlib import Path
from typing import Any, Callable

import pytest

from ly_feature_tools.parallel.config import ParallelConfiguration
from ly_feature_tools.parallel.gherkin import BehaveDocumentParser, GherkinDocument

LOGIN_FEATURE = """\
@feature_tag
Feature: Login
  Users log in.

  Background:
    Given the login page

  @smoke
  Scenario: Valid login
    When I log in as "admin"
    Then I see the dashboard

  @regression
  Scenario Outline: Login with <user>
    When I log in as "<user>"
    Then I see "<message>"

    Examples:
      | user  | message     |
      | alice | Hello alice |
      | bob   | Hello bob   |
      | carol | Hello carol |
"""

RUNNER_TEMPLATE = """\
# [PARALLEL:RUNNER] for [PARALLEL:CUSTOM:team]
FEATURES = [[PARALLEL:FEATURE]]
"""


@pytest.fixture
def login_document() -> GherkinDocument:
    return BehaveDocumentParser().parse(LOGIN_FEATURE, "features/login.feature")


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """A project with a login feature and a runner template."""
    (tmp_path / "features").mkdir()
    (tmp_path / "features" / "login.feature").write_text(LOGIN_FEATURE)
    (tmp_path / "runner_template.py").write_text(RUNNER_TEMPLATE)
    return tmp_path


@pytest.fixture
def make_config(project: Path) -> Callable[..., ParallelConfiguration]:
    def _make_config(**settings: Any) -> ParallelConfiguration:
        defaults: dict[str, Any] = {
            "source_features": [(project / "features").as_posix()],
            "generated_feature_directory": (project / "generated" / "features").as_posix(),
            "generated_runner_directory": (project / "generated" / "runners").as_posix(),
            "source_runner_template_file": (project / "runner_template.py").as_posix(),
        }
        defaults.update(settings)
        return ParallelConfiguration.from_mapping(defaults)

    return _make_config
