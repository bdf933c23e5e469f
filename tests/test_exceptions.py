"""Tests for the exception hierarchy."""

from __future__ import annotations

from tree_data_provider.exceptions import (
    IdAllocationError,
    InvalidQueryError,
    NotFoundError,
    OperatorNotFoundError,
    RecordNotFoundError,
    ResourceNotFoundError,
    StoreError,
    StoreUnavailableError,
    TreeProviderError,
    UnsupportedOperationError,
)


class TestHierarchy:
    def test_everything_derives_from_root(self) -> None:
        for exc_type in (
            NotFoundError,
            InvalidQueryError,
            StoreError,
            UnsupportedOperationError,
        ):
            assert issubclass(exc_type, TreeProviderError)
        assert issubclass(ResourceNotFoundError, NotFoundError)
        assert issubclass(RecordNotFoundError, NotFoundError)
        assert issubclass(OperatorNotFoundError, InvalidQueryError)
        assert issubclass(StoreUnavailableError, StoreError)
        assert issubclass(IdAllocationError, StoreError)


class TestToDict:
    def test_default(self) -> None:
        assert UnsupportedOperationError("nope").to_dict() == {
            "error": "UnsupportedOperationError",
            "message": "nope",
        }

    def test_not_found(self) -> None:
        assert ResourceNotFoundError("posts").to_dict() == {
            "error": "RESOURCE_NOT_FOUND",
            "resource": "posts",
        }
        assert RecordNotFoundError("posts", 3).to_dict() == {
            "error": "RECORD_NOT_FOUND",
            "resource": "posts",
            "id": 3,
        }

    def test_invalid_query(self) -> None:
        exc = InvalidQueryError("bad", path="sort[0]")
        assert exc.to_dict() == {
            "error": "INVALID_QUERY",
            "message": "bad",
            "path": "sort[0]",
        }


class TestOperatorNotFoundError:
    def test_suggestions(self) -> None:
        exc = OperatorNotFoundError("gtee", ["gt", "gte", "lt"])
        assert "gte" in exc.suggestions
        assert "Did you mean" in str(exc)
        assert exc.to_dict()["valid_operators"] == ["gt", "gte", "lt"]

    def test_no_suggestions(self) -> None:
        exc = OperatorNotFoundError("zzzz", ["eq"])
        assert exc.suggestions == []
        assert "Did you mean" not in str(exc)


class TestIdAllocationError:
    def test_message(self) -> None:
        assert "posts" in str(IdAllocationError("posts"))
        assert str(IdAllocationError("posts", "boom")).endswith("boom")
