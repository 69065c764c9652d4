"""Domain Types — verifies rich type definitions and enum values.

Tests:
    - NewType wrappers exist and are callable
    - Enums have expected members and serialize to their stored string
    - RuleOp values match the operator names stored in screener criteria
"""

from uuid import uuid4

from whiteloop.core.domain_types import (
    UserId, ProjectId, StudyId, ApplicationId, MatchId, SessionId,
    ApplicationStatus, MatchStatus, Decision, RuleOp, Role,
)


def test_identity_types_wrap_uuid():
    uid = uuid4()
    assert UserId(uid) == uid
    assert StudyId(uid) == uid
    assert ApplicationId(uid) == uid
    assert MatchId(uid) == uid
    assert ProjectId(uid) == uid
    assert SessionId(uid) == uid


def test_application_status_has_four_states():
    assert {s.value for s in ApplicationStatus} == {
        "pending", "approved", "rejected", "waitlist",
    }


def test_match_status_has_two_states():
    assert {s.value for s in MatchStatus} == {"awaiting_schedule", "scheduled"}


def test_decision_values():
    assert {d.value for d in Decision} == {"approve", "manual", "reject"}


def test_rule_op_uses_stored_operator_names():
    assert RuleOp("includesAny") is RuleOp.INCLUDES_ANY
    assert {op.value for op in RuleOp} == {
        "in", "includesAny", "includes", "gte", "lte", "eq", "neq",
    }


def test_str_enums_compare_equal_to_column_values():
    assert ApplicationStatus.PENDING == "pending"
    assert Role.SERVICE.value == "service"
