"""Fixtures for the parallel command."""
from __future__ import annotations

from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Iterable

from behave import fixture, use_fixture
from behave.model import Scenario

from features.steps.parallel_env import ParallelContext, ParallelEnvironment


@fixture
def parallel_environment(context: ParallelContext) -> Iterable[ParallelEnvironment]:
    with TemporaryDirectory() as tmp_dir:
        parallel = ParallelEnvironment(_path=Path(tmp_dir), verbose=False, project_files={})
        context.parallel = parallel
        context.result = None
        yield parallel


def before_scenario(context: ParallelContext, _scenario: Scenario):
    use_fixture(parallel_environment, context)
