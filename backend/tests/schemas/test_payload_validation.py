"""Payload validation — boundary checks before requests reach the core.

Invariants:
    - Rule weights and thresholds are strict numbers
    - Schedules must carry a timezone offset
    - Session end cannot precede its start
    - Insight theme and rationale travel together
"""

from uuid import uuid4

import pytest
from pydantic import ValidationError

from whiteloop.core.criteria import parse_criteria
from whiteloop.schemas.applications import ScheduleRequest
from whiteloop.schemas.artifacts import InsightGenerate, SessionCompleted
from whiteloop.schemas.catalog import ProjectCreate
from whiteloop.schemas.screening import CriteriaPayload, RulePayload


def test_rule_weight_rejects_bool_and_strings():
    with pytest.raises(ValidationError):
        RulePayload(field="x", op="eq", weight=True)
    with pytest.raises(ValidationError):
        RulePayload(field="x", op="eq", weight="2")


def test_rule_target_accepts_flat_lists_only():
    assert RulePayload(field="x", op="in", target=["a", 1, None]).target == ["a", 1, None]
    with pytest.raises(ValidationError):
        RulePayload(field="x", op="in", target=[["a"]])


def test_unknown_operator_rejected():
    with pytest.raises(ValidationError):
        RulePayload(field="x", op="like")


def test_criteria_dump_is_parseable_by_core():
    payload = CriteriaPayload(threshold=2, rules=[
        {"field": "languages", "op": "includesAny", "target": ["en"], "weight": 2, "must": True},
    ])
    criteria = parse_criteria(payload.model_dump(mode="json"))
    assert criteria.rules[0].target == ("en",)
    assert criteria.rules[0].must is True


def test_schedule_requires_offset():
    with pytest.raises(ValidationError):
        ScheduleRequest(scheduled_at="2026-11-02T15:00:00")
    assert ScheduleRequest(scheduled_at="2026-11-02T15:00:00-03:00").scheduled_at.utcoffset()


def test_session_end_before_start_rejected():
    with pytest.raises(ValidationError):
        SessionCompleted(
            match_id=uuid4(),
            started_at="2026-11-02T15:00:00Z",
            ended_at="2026-11-02T14:59:00Z",
        )


def test_insight_theme_needs_rationale():
    ids = {"study_id": uuid4(), "participant_id": uuid4(), "session_id": uuid4()}
    with pytest.raises(ValidationError):
        InsightGenerate(**ids, theme="t")
    assert InsightGenerate(**ids).theme is None


def test_project_title_is_stripped():
    project = ProjectCreate(
        title="  Checkout  ", description="Long enough text", domain="ecom",
        budget_cents=0,
    )
    assert project.title == "Checkout"
