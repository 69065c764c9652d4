"""Screening Schemas — boundary validation for screener criteria.

Invariants:
    - weight and threshold are strict numbers (true/"3" rejected)
    - target is a scalar or a flat list of scalars
    - model_dump() of CriteriaPayload is accepted by core.criteria.parse_criteria
"""

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr

from whiteloop.core.domain_types import Decision, RuleOp

ScalarTarget = StrictStr | StrictInt | StrictFloat | StrictBool | None


class RulePayload(BaseModel):
    field: str = Field(min_length=1, max_length=255)
    op: RuleOp
    target: ScalarTarget | list[ScalarTarget] = None
    weight: StrictInt | StrictFloat = 0
    must: bool = False


class CriteriaPayload(BaseModel):
    threshold: StrictInt | StrictFloat
    rules: list[RulePayload] = Field(default_factory=list, max_length=100)


class ScreenerPayload(BaseModel):
    criteria: CriteriaPayload | None = None
    questions: list[dict] | None = None
    auto_approve: bool = False


class ScreeningResponse(BaseModel):
    score: float
    decision: Decision
