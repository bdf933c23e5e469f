"""
Exception hierarchy for the tree data provider.

All exceptions inherit from ``TreeProviderError`` and provide ``to_dict()``
for API-friendly error responses.  The query engine itself raises none of
them: empty results and unknown fields are valid outcomes, failures come from
the store, the id allocator and input parsing.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class TreeProviderError(Exception):
    """Root exception for the tree data provider."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class NotFoundError(TreeProviderError):
    """Raised when a resource or record does not exist in the store."""


class ResourceNotFoundError(NotFoundError):
    """The resource path holds no data at all."""

    def __init__(self, resource: str) -> None:
        self.resource = resource
        super().__init__(f"Resource {resource!r} not found")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "RESOURCE_NOT_FOUND",
            "resource": self.resource,
        }


class RecordNotFoundError(NotFoundError):
    """A single record cannot be found by id."""

    def __init__(self, resource: str, record_id: object) -> None:
        self.resource = resource
        self.record_id = record_id
        super().__init__(f"{resource} with id={record_id!r} not found")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "RECORD_NOT_FOUND",
            "resource": self.resource,
            "id": self.record_id,
        }


class InvalidQueryError(TreeProviderError):
    """Framework query input could not be parsed."""

    def __init__(self, message: str, path: str | None = None) -> None:
        self.message = message
        self.path = path
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "INVALID_QUERY",
            "message": self.message,
            "path": self.path,
        }


class OperatorNotFoundError(InvalidQueryError):
    """
    Unknown filter operator, reported only by strict validation.

    Provides fuzzy-matched suggestions for likely intended operators.
    """

    def __init__(
        self,
        operator: str,
        valid_operators: list[str],
        path: str | None = None,
    ) -> None:
        self.operator = operator
        self.valid_operators = valid_operators
        self.suggestions = get_close_matches(operator, valid_operators, n=3, cutoff=0.6)

        message = f"Unknown operator: '{operator}'."
        if self.suggestions:
            message += f" Did you mean: {', '.join(self.suggestions)}?"
        message += f" Valid operators: {', '.join(sorted(valid_operators))}"
        super().__init__(message, path=path)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "OPERATOR_NOT_FOUND",
            "operator": self.operator,
            "path": self.path,
            "suggestions": self.suggestions,
            "valid_operators": sorted(self.valid_operators),
        }


class StoreError(TreeProviderError):
    """Base class for failures of the underlying tree store."""


class StoreUnavailableError(StoreError):
    """The store could not be reached or rejected the operation."""


class IdAllocationError(StoreError):
    """The id allocation strategy failed to produce an identifier."""

    def __init__(self, resource: str, reason: str | None = None) -> None:
        self.resource = resource
        self.reason = reason
        msg = f"Could not allocate an id for {resource!r}"
        if reason:
            msg += f" - {reason}"
        super().__init__(msg)


class UnsupportedOperationError(TreeProviderError):
    """The provider does not implement the requested operation."""
