"""
Filter clauses as sent by the data-access framework.

A clause is either a :class:`ComparisonFilter` (``field`` / ``operator`` /
``value``) or a :class:`CompositeFilter` whose ``value`` is a list of child
clauses joined with OR.  Top-level clauses are implicitly ANDed by the query
engine, so there is no AND composite.

The comparison ``operator`` is a free string rather than a
:class:`FilterOperator` so that operators this package does not implement
still parse; the evaluator treats them as "no filtering".
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Tag,
    TypeAdapter,
    field_validator,
)
from pydantic import ValidationError as PydanticValidationError

from .exceptions import InvalidQueryError, OperatorNotFoundError
from .operators import COMPARISON_OPERATORS, FilterOperator

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from .evaluator import MemoryOperatorRegistry


def _operator_name(value: Any) -> Any:
    return getattr(value, "value", value)


class ComparisonFilter(BaseModel):
    """Single ``field operator value`` predicate."""

    model_config = ConfigDict(frozen=True)

    field: str
    operator: str
    value: Any = None

    @field_validator("operator", mode="before")
    @classmethod
    def _normalise_operator(cls, v: Any) -> Any:
        return _operator_name(v)

    def to_dict(self) -> dict[str, Any]:
        return {"field": self.field, "operator": self.operator, "value": self.value}


class CompositeFilter(BaseModel):
    """OR of child clauses, each resolved against the same candidate set."""

    model_config = ConfigDict(frozen=True)

    operator: Literal["or"] = "or"
    value: list[FilterClause]

    @field_validator("operator", mode="before")
    @classmethod
    def _normalise_operator(cls, v: Any) -> Any:
        v = _operator_name(v)
        return v.lower() if isinstance(v, str) else v

    def to_dict(self) -> dict[str, Any]:
        return {
            "operator": self.operator,
            "value": [clause.to_dict() for clause in self.value],
        }


def _clause_tag(value: Any) -> str:
    op = value.get("operator") if isinstance(value, dict) else getattr(
        value, "operator", None
    )
    op = _operator_name(op)
    if isinstance(op, str) and op.lower() == FilterOperator.OR.value:
        return "or"
    return "comparison"


FilterClause = Annotated[
    Union[
        Annotated[CompositeFilter, Tag("or")],
        Annotated[ComparisonFilter, Tag("comparison")],
    ],
    Discriminator(_clause_tag),
]

CompositeFilter.model_rebuild()

_clause_adapter: TypeAdapter[Any] = TypeAdapter(FilterClause)
_clause_list_adapter: TypeAdapter[list[Any]] = TypeAdapter(list[FilterClause])


def _loc_to_path(loc: tuple[int | str, ...]) -> str:
    path = "<root>"
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        elif part not in ("or", "comparison"):
            path += f".{part}"
    return path


def _as_invalid_query(exc: PydanticValidationError) -> InvalidQueryError:
    first = exc.errors()[0]
    return InvalidQueryError(
        f"Invalid filter: {first['msg']}",
        path=_loc_to_path(tuple(first["loc"])),
    )


class FilterFactory:
    """
    Build filter clauses from framework dictionaries / JSON.

    Supports:
    - ``from_dict(data)`` - parse one clause (possibly an OR tree)
    - ``from_list(data)`` - parse the top-level clause list
    - ``from_json(text)`` - parse a JSON array or object
    - ``validate(data)``  - collect problems without raising

    Parsing is permissive by default: unknown operators are kept and ignored
    at evaluation time.  Pass ``strict=True`` to reject them instead.
    """

    @staticmethod
    def from_dict(
        data: Any,
        *,
        strict: bool = False,
        registry: MemoryOperatorRegistry | None = None,
        allowed_fields: Sequence[str] | None = None,
    ) -> ComparisonFilter | CompositeFilter:
        try:
            clause = _clause_adapter.validate_python(data)
        except PydanticValidationError as exc:
            raise _as_invalid_query(exc) from exc
        FilterFactory._check(
            [clause],
            strict=strict,
            registry=registry,
            allowed_fields=allowed_fields,
            path="<root>",
        )
        return clause  # type: ignore[no-any-return]

    @staticmethod
    def from_list(
        data: Iterable[Any] | None,
        *,
        strict: bool = False,
        registry: MemoryOperatorRegistry | None = None,
        allowed_fields: Sequence[str] | None = None,
    ) -> list[ComparisonFilter | CompositeFilter]:
        if data is None:
            return []
        if isinstance(data, dict | str | bytes):
            raise InvalidQueryError("Filters must be a list of clauses", path="<root>")
        try:
            clauses = _clause_list_adapter.validate_python(list(data))
        except PydanticValidationError as exc:
            raise _as_invalid_query(exc) from exc
        FilterFactory._check(
            clauses,
            strict=strict,
            registry=registry,
            allowed_fields=allowed_fields,
            path="<root>",
        )
        return clauses

    @staticmethod
    def from_json(
        text: str,
        *,
        strict: bool = False,
        registry: MemoryOperatorRegistry | None = None,
        allowed_fields: Sequence[str] | None = None,
    ) -> list[ComparisonFilter | CompositeFilter]:
        """Parse a JSON array of clauses (a single object is wrapped)."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise InvalidQueryError(f"Invalid JSON: {exc}", path="<root>") from exc
        if isinstance(data, dict):
            data = [data]
        return FilterFactory.from_list(
            data, strict=strict, registry=registry, allowed_fields=allowed_fields
        )

    @staticmethod
    def validate(
        data: Any,
        *,
        registry: MemoryOperatorRegistry | None = None,
        allowed_fields: Sequence[str] | None = None,
    ) -> list[str]:
        """
        Validate a clause list and return a list of error messages.

        Returns an empty list when every clause parses and uses a known
        operator on an allowed field.
        """
        try:
            FilterFactory.from_list(
                data,
                strict=True,
                registry=registry,
                allowed_fields=allowed_fields,
            )
        except InvalidQueryError as exc:
            return [f"{exc.path}: {exc.message}"]
        return []

    # -- internal --------------------------------------------------------------

    @staticmethod
    def _check(
        clauses: Sequence[ComparisonFilter | CompositeFilter],
        *,
        strict: bool,
        registry: MemoryOperatorRegistry | None,
        allowed_fields: Sequence[str] | None,
        path: str,
    ) -> None:
        if not strict and allowed_fields is None:
            return
        known = registry.supported_operators if registry else set(COMPARISON_OPERATORS)
        for idx, clause in enumerate(clauses):
            here = f"{path}[{idx}]"
            if isinstance(clause, CompositeFilter):
                FilterFactory._check(
                    clause.value,
                    strict=strict,
                    registry=registry,
                    allowed_fields=allowed_fields,
                    path=f"{here}.value",
                )
                continue
            if strict and clause.operator.lower() not in known:
                raise OperatorNotFoundError(clause.operator, sorted(known), path=here)
            if allowed_fields is not None and clause.field not in allowed_fields:
                raise InvalidQueryError(
                    f"Field '{clause.field}' is not in the allowed fields list",
                    path=here,
                )
