"""Screening Criteria — immutable rule set owned by a study's screener.

Invariants:
    - Criteria and Rule are frozen: evaluation never mutates them, so one
      instance is safely shared by concurrent evaluations
    - Rule.target is a tagged value: str | int | float | bool | None | list of those
    - Rule.weight is numeric (bool rejected even though bool subclasses int)
    - parse_criteria() either returns a fully valid Criteria or raises
      InputValidationError naming the offending field

Design Decisions:
    - Frozen dataclasses over pydantic in core: core stays free of boundary
      concerns; the API layer validates with pydantic and stores plain JSON,
      which is parsed again here because stored JSON may predate validation
    - Rules kept as a tuple: order is significant (weights accumulate in rule
      order and the first failing must-rule short-circuits)
"""

from dataclasses import dataclass
from typing import Any, Union

from whiteloop.core.domain_types import RuleOp
from whiteloop.core.errors import InputValidationError

ANSWERS_PREFIX = "answers."

Scalar = Union[str, int, float, bool, None]
TargetValue = Union[Scalar, tuple[Scalar, ...]]


@dataclass(frozen=True)
class Rule:
    """One weighted, optionally mandatory comparison."""
    field: str
    op: RuleOp
    target: TargetValue
    weight: float
    must: bool = False

    @property
    def reads_answers(self) -> bool:
        return self.field.startswith(ANSWERS_PREFIX)

    @property
    def path(self) -> list[str]:
        """Dot-path segments relative to the selected source."""
        key_path = self.field[len(ANSWERS_PREFIX):] if self.reads_answers else self.field
        return [p for p in key_path.split(".") if p]


@dataclass(frozen=True)
class Criteria:
    """Pass/fail threshold plus ordered weighted rules."""
    threshold: float
    rules: tuple[Rule, ...] = ()


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_scalar(value: Any) -> bool:
    return value is None or isinstance(value, (str, int, float, bool))


def _parse_target(raw: Any, index: int) -> TargetValue:
    if _is_scalar(raw):
        return raw
    if isinstance(raw, (list, tuple)):
        if not all(_is_scalar(item) for item in raw):
            raise InputValidationError(
                f"rules[{index}].target lists may only hold scalars",
                field=f"rules.{index}.target",
            )
        return tuple(raw)
    raise InputValidationError(
        f"rules[{index}].target must be a scalar or a list of scalars",
        field=f"rules.{index}.target",
    )


def parse_rule(raw: Any, index: int = 0) -> Rule:
    """Build a Rule from its JSON shape."""
    if not isinstance(raw, dict):
        raise InputValidationError(
            f"rules[{index}] must be an object", field=f"rules.{index}",
        )
    field = raw.get("field")
    if not isinstance(field, str) or not field.strip():
        raise InputValidationError(
            f"rules[{index}].field must be a non-empty string",
            field=f"rules.{index}.field",
        )
    try:
        op = RuleOp(raw.get("op"))
    except ValueError:
        raise InputValidationError(
            f"rules[{index}].op '{raw.get('op')}' is not a known operator",
            field=f"rules.{index}.op",
        )
    weight = raw.get("weight", 0)
    if not _is_number(weight):
        raise InputValidationError(
            f"rules[{index}].weight must be a number",
            field=f"rules.{index}.weight",
        )
    must = raw.get("must", False)
    if must is None:
        must = False
    if not isinstance(must, bool):
        raise InputValidationError(
            f"rules[{index}].must must be a boolean",
            field=f"rules.{index}.must",
        )
    return Rule(
        field=field,
        op=op,
        target=_parse_target(raw.get("target"), index),
        weight=weight,
        must=must,
    )


def parse_criteria(raw: Any) -> Criteria:
    """Build Criteria from stored JSON. Raises InputValidationError when malformed."""
    if not isinstance(raw, dict):
        raise InputValidationError("criteria must be an object", field="criteria")
    threshold = raw.get("threshold")
    if not _is_number(threshold):
        raise InputValidationError(
            "criteria.threshold must be a number", field="threshold",
        )
    rules = raw.get("rules", [])
    if not isinstance(rules, list):
        raise InputValidationError("criteria.rules must be a list", field="rules")
    return Criteria(
        threshold=threshold,
        rules=tuple(parse_rule(r, i) for i, r in enumerate(rules)),
    )


def criteria_to_dict(criteria: Criteria) -> dict:
    """Inverse of parse_criteria — JSON-ready shape for storage."""
    return {
        "threshold": criteria.threshold,
        "rules": [
            {
                "field": r.field,
                "op": r.op.value,
                "target": list(r.target) if isinstance(r.target, tuple) else r.target,
                "weight": r.weight,
                "must": r.must,
            }
            for r in criteria.rules
        ],
    }
