from pathlib import Path

from behave import given, then, when

from features.steps.parallel_env import ParallelContext

here = Path(__file__).parent


@given("a new project")
def step_new_project(context: ParallelContext):
    for rel_path in ["pyproject.toml", "runner_template.py"]:
        context.parallel.project_files[rel_path] = (here / "data" / rel_path).read_text()


@given("there is no project file")
def step_no_project(_context: ParallelContext):
    pass


@given('the feature file "{rel_path}"')
def step_feature_file(context: ParallelContext, rel_path: str):
    assert context.text is not None
    context.parallel.project_files[rel_path] = context.text + "\n"


@when('I run parallel with "{args}"')
def step_run_parallel(context: ParallelContext, args: str):
    context.result = context.parallel.run(*args.split())


@when("I run parallel with no arguments")
def step_run_parallel_no_args(context: ParallelContext):
    context.result = context.parallel.run()


@then("the exit code is {exit_code}")
def step_exit_code(context: ParallelContext, exit_code: str):
    assert context.result
    assert context.result.exit_code == int(exit_code), context.result.output


@then('the output contains "{message}"')
def step_output_contains_message(context: ParallelContext, message: str):
    assert context.result
    assert message in context.result.output, context.result.output


@then("the output contains the text")
def step_output_contains_text(context: ParallelContext):
    assert context.result
    assert context.text
    assert context.text.strip() in context.result.output, context.result.output


@then("{count:d} {kind} files are generated")
def step_files_generated(context: ParallelContext, count: int, kind: str):
    directory = "features" if kind == "feature" else "runners"
    generated = context.parallel.generated(directory)
    assert len(generated) == count, [path.name for path in generated]


@then("the generated features are")
def step_generated_features(context: ParallelContext):
    expected = [row["name"] for row in context.table]
    actual = [path.stem for path in context.parallel.generated("features")]
    assert actual == expected, actual


@then('the generated {kind} "{name}" contains "{text}"')
def step_generated_contains(context: ParallelContext, kind: str, name: str, text: str):
    directory = "features" if kind == "feature" else "runners"
    path = context.parallel.project_dir / "generated" / directory / name
    assert text in path.read_text(), path.read_text()


@then('every generated runner contains "{text}"')
def step_runners_contain(context: ParallelContext, text: str):
    runners = context.parallel.generated("runners")
    assert runners
    for path in runners:
        assert text in path.read_text(), path.read_text()
