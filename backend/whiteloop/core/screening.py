"""Criteria Evaluator — scores a participant's profile and answers against screening rules.

Invariants:
    - All functions are PURE: no IO, no async, no DB, no side effects
    - Weights accumulate in rule order for every passing rule, must or not
    - The first failing must-rule returns (0, reject) immediately; weight already
      accumulated is discarded and later rules are never evaluated
    - score >= threshold approves (equality approves), otherwise manual review
    - A missing path segment resolves to ABSENT, which compares like any other
      value: eq is false, neq is true, numeric comparisons fail

Design Decisions:
    - ABSENT sentinel distinct from None: JSON null is a real value (coerces
      to 0), a missing field is not (coerces to NaN)
    - Strict equality never equates booleans with numbers (True != 1)
    - eq/neq compare lists structurally: ["a"] eq ["a"] holds, unlike a
      reference comparison that would fail for any list target
    - A list segment accepts an ASCII index or "length"; strings have no
      segments, so "name.length" is ABSENT
    - Operator dispatch is an explicit dict: adding a RuleOp without a
      comparator fails loudly in tests instead of silently scoring false
"""

import math
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from whiteloop.core.criteria import Criteria, Rule
from whiteloop.core.domain_types import Decision, RuleOp


class _Absent:
    """Marker for a path that did not resolve."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()

_DECIMAL = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


@dataclass(frozen=True)
class ScreeningResult:
    score: float
    decision: Decision


# ─── Value resolution ────────────────────────────────────────────

def resolve_value(rule: Rule, profile: Any, answers: Any) -> Any:
    """Walk the rule's dot-path through answers or profile."""
    current = answers if rule.reads_answers else profile
    for part in rule.path:
        if isinstance(current, Mapping):
            current = current.get(part, ABSENT)
        elif isinstance(current, (list, tuple)):
            if part == "length":
                current = len(current)
            elif part.isascii() and part.isdecimal():
                idx = int(part)
                current = current[idx] if idx < len(current) else ABSENT
            else:
                return ABSENT
        else:
            return ABSENT
    return current


# ─── Comparison primitives ───────────────────────────────────────

def _is_collection(value: Any) -> bool:
    return isinstance(value, (list, tuple))


def to_number(value: Any) -> float:
    """Numeric coercion: null -> 0, bool -> 0/1, '' -> 0, unparseable -> NaN."""
    if value is ABSENT:
        return math.nan
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return 0.0
        if _DECIMAL.fullmatch(text):
            return float(text)
        if text.lstrip("+-") == "Infinity":
            return -math.inf if text.startswith("-") else math.inf
    return math.nan


def strictly_equal(left: Any, right: Any) -> bool:
    """Equality without cross-type coercion."""
    if left is ABSENT or right is ABSENT:
        return left is right
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left == right
    if _is_collection(left) and _is_collection(right):
        return len(left) == len(right) and all(
            strictly_equal(a, b) for a, b in zip(left, right)
        )
    if type(left) is not type(right) and not (
        isinstance(left, (int, float)) and isinstance(right, (int, float))
    ):
        return False
    return left == right


def _contains(collection: Any, item: Any) -> bool:
    return any(strictly_equal(member, item) for member in collection)


def _op_in(value: Any, target: Any) -> bool:
    return _is_collection(target) and _contains(target, value)


def _op_includes_any(value: Any, target: Any) -> bool:
    return (
        _is_collection(value)
        and _is_collection(target)
        and any(_contains(target, v) for v in value)
    )


def _op_includes(value: Any, target: Any) -> bool:
    return _is_collection(value) and _contains(value, target)


def _op_gte(value: Any, target: Any) -> bool:
    return to_number(value) >= to_number(target)


def _op_lte(value: Any, target: Any) -> bool:
    return to_number(value) <= to_number(target)


def _op_eq(value: Any, target: Any) -> bool:
    return strictly_equal(value, target)


def _op_neq(value: Any, target: Any) -> bool:
    return not strictly_equal(value, target)


OPERATORS: dict[RuleOp, Callable[[Any, Any], bool]] = {
    RuleOp.IN: _op_in,
    RuleOp.INCLUDES_ANY: _op_includes_any,
    RuleOp.INCLUDES: _op_includes,
    RuleOp.GTE: _op_gte,
    RuleOp.LTE: _op_lte,
    RuleOp.EQ: _op_eq,
    RuleOp.NEQ: _op_neq,
}


def evaluate_rule(rule: Rule, profile: Any, answers: Any) -> bool:
    """True when the rule's comparison holds for this applicant."""
    value = resolve_value(rule, profile, answers)
    return OPERATORS[rule.op](value, rule.target)


# ─── Scoring ─────────────────────────────────────────────────────

def score_applicant(
    criteria: Criteria, profile: Any, answers: Any,
) -> ScreeningResult:
    """Score one applicant. First failing must-rule rejects with score 0."""
    score = 0
    for rule in criteria.rules:
        passed = evaluate_rule(rule, profile, answers)
        if passed:
            score += rule.weight
        elif rule.must:
            return ScreeningResult(score=0, decision=Decision.REJECT)
    decision = (
        Decision.APPROVE if score >= criteria.threshold else Decision.MANUAL
    )
    return ScreeningResult(score=score, decision=decision)


def persisted_score(result: ScreeningResult) -> int:
    """Applications store a non-negative integer score."""
    return max(0, int(round(result.score)))
