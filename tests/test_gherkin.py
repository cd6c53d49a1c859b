import pytest

from ly_feature_tools.parallel.exceptions import FeatureFileParseError
from ly_feature_tools.parallel.gherkin import BehaveDocumentParser, Scenario, ScenarioOutline


def test_parse_feature(login_document):
    """Test that behave's model is converted into the plain document tree."""
    feature = login_document.feature
    assert feature is not None
    assert feature.name == "Login"
    assert feature.line == 2
    assert feature.tags == ("@feature_tag",)
    assert feature.description == ("Users log in.",)
    assert feature.background is not None
    assert [step.text for step in feature.background.steps] == ["the login page"]

    scenario, outline = feature.children
    assert type(scenario) is Scenario
    assert scenario.line == 9
    assert scenario.tags == ("@smoke",)
    assert [(step.keyword, step.text) for step in scenario.steps] == [
        ("When", 'I log in as "admin"'),
        ("Then", "I see the dashboard"),
    ]

    assert isinstance(outline, ScenarioOutline)
    assert outline.line == 14
    assert outline.name == "Login with <user>"
    (examples,) = outline.examples
    assert examples.headings == ("user", "message")
    assert [row.line for row in examples.rows] == [20, 21, 22]
    assert examples.values(examples.rows[1]) == {"user": "bob", "message": "Hello bob"}


def test_parse_step_arguments():
    text = '''\
Feature: Arguments

  Scenario: Table and text
    Given the users
      | name  | role  |
      | alice | admin |
    And the message
      """
      Hello
      """
'''
    document = BehaveDocumentParser().parse(text, "arguments.feature")
    assert document.feature is not None
    table_step, text_step = document.feature.children[0].steps
    assert table_step.table is not None
    assert table_step.table.headings == ("name", "role")
    assert table_step.table.rows == (("alice", "admin"),)
    assert text_step.doc_string == "Hello"


def test_parse_empty_document():
    document = BehaveDocumentParser().parse("", "empty.feature")
    assert document.feature is None
    assert document.source_label == "empty.feature"


def test_parse_error():
    with pytest.raises(FeatureFileParseError) as exc_info:
        BehaveDocumentParser().parse("This is not gherkin\n", "broken/bad.feature")
    assert exc_info.value.path == "broken/bad.feature"
    assert "broken/bad.feature" in str(exc_info.value)


def test_parse_rules():
    """Scenarios of rules follow the feature's own scenarios with the rule tags."""
    text = """\
Feature: Rules

  Scenario: top
    Given a step

  @billing
  Rule: inner

    Background:
      Given an account

    @slow
    Scenario: in rule
      When I pay
"""
    document = BehaveDocumentParser().parse(text, "rules.feature")
    assert document.feature is not None
    top, in_rule = document.feature.children
    assert top.name == "top"
    assert top.tags == ()
    assert in_rule.name == "in rule"
    assert in_rule.line == 13
    assert in_rule.tags == ("@billing", "@slow")
    assert [step.text for step in in_rule.steps] == ["an account", "I pay"]
