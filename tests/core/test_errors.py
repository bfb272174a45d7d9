"""
Tests for bookbrainz_data/core/errors.py - Error hierarchy.
"""
from sqlalchemy.exc import IntegrityError, NoResultFound

from bookbrainz_data.core.errors import (
    BookBrainzError,
    ConstraintViolationError,
    ErrorContext,
    ErrorSeverity,
    InvalidUpdateError,
    NotFoundError,
    classify_error,
)


class TestBookBrainzError:
    """Tests for the base error."""

    def test_str_is_message(self):
        error = InvalidUpdateError("EditionGroupBbid required in Edition update")

        assert str(error) == "EditionGroupBbid required in Edition update"
        assert isinstance(error, BookBrainzError)

    def test_error_codes(self):
        assert NotFoundError("x").error_code == "NOT_FOUND"
        assert InvalidUpdateError("x").error_code == "INVALID_UPDATE"
        assert ConstraintViolationError("x").error_code == "CONSTRAINT_VIOLATION"

    def test_default_severity(self):
        assert NotFoundError("x").severity == ErrorSeverity.WARNING
        assert ConstraintViolationError("x").severity == ErrorSeverity.ERROR

    def test_to_dict(self):
        context = ErrorContext(operation="update", component="edition_store", bbid="b")
        error = NotFoundError("missing", context=context, resource_type="edition", resource_id="b")

        data = error.to_dict()

        assert data["error_code"] == "NOT_FOUND"
        assert data["message"] == "missing"
        assert data["context"]["bbid"] == "b"
        assert data["cause"] is None

    def test_with_context_without_existing_context(self):
        error = NotFoundError("missing").with_context(bbid="b")

        assert error.context.metadata == {"bbid": "b"}


class TestClassifyError:
    """Tests for mapping store exceptions."""

    def test_passes_through_own_errors(self):
        error = NotFoundError("missing")

        assert classify_error(error) is error

    def test_integrity_error(self):
        original = IntegrityError("INSERT INTO entity ...", {}, Exception("UNIQUE constraint failed: entity.bbid"))

        error = classify_error(original)

        assert isinstance(error, ConstraintViolationError)
        assert error.message == "UNIQUE constraint failed: entity.bbid"
        assert error.statement == "INSERT INTO entity ..."
        assert error.cause is original

    def test_no_result_found(self):
        error = classify_error(NoResultFound("No row was found"))

        assert isinstance(error, NotFoundError)

    def test_unknown_error(self):
        error = classify_error(RuntimeError("boom"))

        assert type(error) is BookBrainzError
        assert error.message == "boom"


class TestErrorContext:
    """Tests for context captured from the current span."""

    def test_no_stack_trace_outside_exception_handling(self):
        context = ErrorContext.from_current_span(operation="update", component="edition_store", bbid="b")

        assert context.stack_trace is None
        assert context.bbid == "b"

    def test_stack_trace_inside_exception_handling(self):
        try:
            raise RuntimeError("flush failed")
        except RuntimeError:
            context = ErrorContext.from_current_span(operation="update", component="edition_store")

        assert "RuntimeError: flush failed" in context.stack_trace

    def test_rejected_update_has_no_stack_trace(self):
        from bookbrainz_data.db.commands import UpdateEditionCommand
        from bookbrainz_data.db.linker import EditionGroupLinker

        try:
            EditionGroupLinker().check_update(UpdateEditionCommand(bbid="b", edition_group_bbid=None))
        except InvalidUpdateError as error:
            context = error.context

        assert context.component == "edition_group_linker"
        assert context.bbid == "b"
        assert context.stack_trace is None
