"""Functional tests for conditional visibility and step counting.

Covers:
- Exact, case-sensitive equality between parent answer and expected value
- Visible question lists and step totals as answers change
- 1-based step numbers across sections with hidden questions
"""

from __future__ import annotations

from formpath.logic.visibility_rules import (
    current_step_number,
    is_answer_blank,
    is_condition_met,
    total_steps,
    visible_questions,
)
from formpath.models.schema import Condition


def _ids(questions):
    return [q.id for q in questions]


def test_condition_absent_always_holds():
    assert is_condition_met(None, {}) is True


def test_condition_requires_exact_case_sensitive_match():
    cond = Condition(field_id="q1", expected_value="yes")
    assert is_condition_met(cond, {"q1": "yes"}) is True
    assert is_condition_met(cond, {"q1": "Yes"}) is False
    assert is_condition_met(cond, {"q1": "yes "}) is False
    assert is_condition_met(cond, {"q1": "no"}) is False


def test_condition_with_missing_parent_answer_is_hidden():
    cond = Condition(field_id="q1", expected_value="")
    assert is_condition_met(cond, {}) is False
    assert is_condition_met(cond, {"q1": ""}) is True


def test_scenario_visible_questions_follow_gating_answer(scenario_schema):
    section = scenario_schema.sections[0]

    assert _ids(visible_questions(section, {})) == ["q1"]
    assert total_steps(scenario_schema, {}) == 1

    assert _ids(visible_questions(section, {"q1": "no"})) == ["q1"]
    assert total_steps(scenario_schema, {"q1": "no"}) == 1

    assert _ids(visible_questions(section, {"q1": "yes"})) == ["q1", "q2"]
    assert total_steps(scenario_schema, {"q1": "yes"}) == 2


def test_total_steps_changes_by_number_of_gated_questions(three_entry):
    schema = three_entry.schema
    base = {"name": "Ana", "married": "no"}
    gated = dict(base, married="yes")
    assert total_steps(schema, gated) - total_steps(schema, base) == 1


def test_hidden_answers_do_not_count_even_when_present(three_entry):
    schema = three_entry.schema
    # spouse_name keeps its value but is hidden once married flips to "no"
    answers = {"married": "no", "spouse_name": "Bo"}
    assert total_steps(schema, answers) == 4


def test_step_number_skips_hidden_sections(three_entry):
    schema = three_entry.schema
    answers = {"married": "no"}
    # section 2 is empty so the first question of section 3 is step 3
    assert current_step_number(schema, 2, 0, answers) == 3
    assert current_step_number(schema, 2, 0, {"married": "yes"}) == 4
    assert current_step_number(schema, 0, 1, answers) == 2


def test_blank_answers():
    assert is_answer_blank(None)
    assert is_answer_blank("")
    assert is_answer_blank("   \t")
    assert not is_answer_blank(" x ")
