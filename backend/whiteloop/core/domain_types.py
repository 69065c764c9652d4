"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - Identity types wrap UUIDs — never use bare UUID in domain logic
    - All valid states encoded as Enums — no raw string matching
    - ApplicationStatus terminal states: approved, rejected, waitlist

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON and store in String columns without converters
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
ProjectId = NewType("ProjectId", UUID)
StudyId = NewType("StudyId", UUID)
ApplicationId = NewType("ApplicationId", UUID)
MatchId = NewType("MatchId", UUID)
SessionId = NewType("SessionId", UUID)


# ─── Enums ───────────────────────────────────────────────────────

class Role(str, Enum):
    """Caller roles recognised by the role gate."""
    PARTICIPANT = "participant"
    RESEARCHER = "researcher"
    ADMIN = "admin"
    SERVICE = "service"  # webhooks and background workers


class ApplicationStatus(str, Enum):
    """Application lifecycle — maps to applications.status column."""
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    WAITLIST = "waitlist"


class MatchStatus(str, Enum):
    """Match scheduling states. SCHEDULED iff scheduled_at is set."""
    AWAITING_SCHEDULE = "awaiting_schedule"
    SCHEDULED = "scheduled"


class Decision(str, Enum):
    """Screening outcome produced by the criteria evaluator."""
    APPROVE = "approve"
    MANUAL = "manual"
    REJECT = "reject"


class RuleOp(str, Enum):
    """Comparison operators available to screening rules."""
    IN = "in"
    INCLUDES_ANY = "includesAny"
    INCLUDES = "includes"
    GTE = "gte"
    LTE = "lte"
    EQ = "eq"
    NEQ = "neq"


class StudyStatus(str, Enum):
    RECRUITING = "recruiting"
    SCHEDULED = "scheduled"
    COMPLETED = "completed"


class ProjectStatus(str, Enum):
    DRAFT = "draft"
    PUBLISHED = "published"


class Sentiment(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"
    MIXED = "mixed"
