from pathlib import Path

import pytest

from ly_feature_tools.parallel.exceptions import MissingFileError
from ly_feature_tools.parallel.fileio import FileIO
from ly_feature_tools.parallel.filter import ScenarioFilter
from ly_feature_tools.parallel.gherkin import BehaveDocumentParser, DataTable, Step
from ly_feature_tools.parallel.model import FeatureRunner, FilterSpec, SingleScenario
from ly_feature_tools.parallel.render import FeatureFileContentRenderer, RunnerFileContentRenderer

SOURCE = Path("features/login.feature")


@pytest.fixture
def scenarios(login_document):
    return ScenarioFilter(FilterSpec()).filter(login_document, SOURCE)


def test_render_single_scenario(scenarios):
    assert FeatureFileContentRenderer().render(scenarios[0]) == (
        "@feature_tag\n"
        "Feature: Login\n"
        "  Users log in.\n"
        "\n"
        "  Background:\n"
        "    Given the login page\n"
        "\n"
        "  @smoke\n"
        "  Scenario: Valid login\n"
        '    When I log in as "admin"\n'
        "    Then I see the dashboard\n"
        "\n"
        "# Generated by ly-feature-tools from features/login.feature\n"
    )


def test_render_outline_scenario(scenarios):
    content = FeatureFileContentRenderer().render(scenarios[2])
    assert "  @regression\n  Scenario: Login with bob\n" in content
    assert '    When I log in as "bob"\n    Then I see "Hello bob"\n' in content
    assert "<user>" not in content
    assert "Examples" not in content


def test_rendered_feature_can_be_parsed(scenarios):
    content = FeatureFileContentRenderer().render_feature(scenarios)
    document = BehaveDocumentParser().parse(content, "generated.feature")
    assert document.feature is not None
    assert [child.name for child in document.feature.children] == [
        s.scenario_name for s in scenarios
    ]
    assert document.feature.tags == ("@feature_tag",)


def test_render_feature_keeps_order(scenarios):
    content = FeatureFileContentRenderer().render_feature(scenarios)
    positions = [content.index(f"Scenario: {s.scenario_name}\n") for s in scenarios]
    assert positions == sorted(positions)
    assert content.count("Background:") == 1


def test_render_feature_without_scenarios():
    with pytest.raises(ValueError):
        FeatureFileContentRenderer().render_feature([])


def test_render_step_arguments():
    scenario = SingleScenario(
        feature_file_path=Path("orders.feature"),
        feature_keyword="Funktionalität",
        feature_name="Bestellung",
        feature_language="de",
        scenario_keyword="Szenario",
        scenario_name="Tabelle",
        line=3,
        steps=(
            Step(
                keyword="Angenommen",
                text="die Artikel",
                line=4,
                table=DataTable(headings=("name", "anzahl"), rows=(("Buch", "12"),)),
            ),
            Step(keyword="Und", text="der Text", line=7, doc_string="Zeile 1\n\nZeile 3"),
        ),
    )
    assert FeatureFileContentRenderer().render(scenario) == (
        "# language: de\n"
        "Funktionalität: Bestellung\n"
        "\n"
        "  Szenario: Tabelle\n"
        "    Angenommen die Artikel\n"
        "      | name | anzahl |\n"
        "      | Buch | 12     |\n"
        "    Und der Text\n"
        '      """\n'
        "      Zeile 1\n"
        "\n"
        "      Zeile 3\n"
        '      """\n'
        "\n"
        "# Generated by ly-feature-tools from orders.feature\n"
    )


def test_rendered_step_arguments_can_be_parsed():
    """Pipes in cells and doc string fences in the text survive rendering."""
    text = """\
Feature: Escaping

  Scenario: Arguments
    Given the values
      | value  |
      | a \\| b |
    And the text
      '''
      before
      \"\"\"
      after
      '''
"""
    parser = BehaveDocumentParser()
    source = parser.parse(text, "escaping.feature")
    (scenario,) = ScenarioFilter(FilterSpec()).filter(source, Path("escaping.feature"))
    assert scenario.steps[0].table == DataTable(headings=("value",), rows=(("a | b",),))

    content = FeatureFileContentRenderer().render(scenario)
    assert "| a \\| b |" in content
    document = parser.parse(content, "generated.feature")
    assert document.feature is not None
    table_step, text_step = document.feature.children[0].steps
    assert table_step.table == scenario.steps[0].table
    assert text_step.doc_string == 'before\n"""\nafter'


def test_render_runner(tmp_path):
    template = tmp_path / "runner_template.py"
    template.write_text(
        "# [PARALLEL:RUNNER] by [PARALLEL:CUSTOM:team] [PARALLEL:CUSTOM:unknown]\n"
        "FEATURES = [[PARALLEL:FEATURE]]\n"
    )
    renderer = RunnerFileContentRenderer(
        FileIO(), Path("generated/features"), custom_placeholders={"team": "qa"}
    )
    runner = FeatureRunner(
        template_path=template, name="MultiRunner_x_IT", feature_names=("a", "b")
    )
    assert renderer.render(runner) == (
        "# MultiRunner_x_IT by qa [PARALLEL:CUSTOM:unknown]\n"
        'FEATURES = ["generated/features/a.feature", "generated/features/b.feature"]\n'
    )


def test_render_runner_without_template(tmp_path):
    renderer = RunnerFileContentRenderer(FileIO(), Path("generated/features"))
    runner = FeatureRunner(template_path=tmp_path / "missing.py", name="a", feature_names=("a",))
    with pytest.raises(MissingFileError):
        renderer.render(runner)
