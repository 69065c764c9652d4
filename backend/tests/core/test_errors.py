"""Error Hierarchy — verifies codes, statuses and the response envelope."""

from whiteloop.core.errors import (
    ConflictError, DuplicateApplicationError, DuplicateTranscriptError,
    ErrorContext, MatchNotScheduledError, ResourceNotFoundError,
    UnauthorizedError,
)


def test_duplicates_are_conflicts():
    err = DuplicateApplicationError("s1", "p1")
    assert isinstance(err, ConflictError)
    assert err.http_status == 409
    assert err.code == "DUPLICATE_APPLICATION"


def test_not_found_message_names_resource():
    err = ResourceNotFoundError("Study", "abc")
    assert err.http_status == 404
    assert err.message == "Study 'abc' not found"


def test_to_response_carries_context_ids():
    err = DuplicateTranscriptError("sess-1", ErrorContext(session_id="sess-1"))
    body = err.to_response()["error"]
    assert body["code"] == "DUPLICATE_TRANSCRIPT"
    assert body["category"] == "conflict"
    assert body["context"]["session_id"] == "sess-1"


def test_match_not_scheduled_is_business_rule():
    err = MatchNotScheduledError("m1")
    assert err.http_status == 409
    assert err.category.value == "business_rule"


def test_unauthorized_is_401():
    assert UnauthorizedError().http_status == 401
