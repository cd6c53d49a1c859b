from __future__ import annotations

import uuid
from pathlib import Path
from typing import Sequence

from .model import FeatureRunner

__all__ = ["INTEGRATION_TEST_POSTFIX", "MULTI_RUNNER_PREFIX", "RunnerDistributor"]

INTEGRATION_TEST_POSTFIX = "_IT"
MULTI_RUNNER_PREFIX = "MultiRunner_"


class RunnerDistributor:
    """Distribute generated features over a number of runners."""

    def __init__(self, template_path: Path):
        self.template_path = template_path

    def distribute(
        self, feature_names: Sequence[str], desired_number_of_runners: int = 0
    ) -> list[FeatureRunner]:
        """
        Assign features to runners round-robin.

        If ``desired_number_of_runners`` is 0 every feature gets its own runner. Runners that would
        not receive any feature are not created.
        """
        target = desired_number_of_runners if desired_number_of_runners > 0 else len(feature_names)
        groups: list[list[str]] = [[] for _ in range(target)]
        for index, feature_name in enumerate(feature_names):
            groups[index % target].append(feature_name)
        return [self._runner(group) for group in groups if group]

    def _runner(self, feature_names: Sequence[str]) -> FeatureRunner:
        # A runner for a single feature is named after it.
        if len(feature_names) == 1:
            name = feature_names[0]
        else:
            token = str(uuid.uuid4()).replace("-", "_")
            name = f"{MULTI_RUNNER_PREFIX}{token}{INTEGRATION_TEST_POSTFIX}"
        return FeatureRunner(
            template_path=self.template_path, name=name, feature_names=tuple(feature_names)
        )
