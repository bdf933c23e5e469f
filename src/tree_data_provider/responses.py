"""Response wrappers returned by the data provider."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class GetListResponse(Generic[T]):
    """One page of records and the size of the full filtered set."""

    data: list[T] = field(default_factory=list)
    total: int = 0


@dataclass(frozen=True)
class GetOneResponse(Generic[T]):
    data: T


@dataclass(frozen=True)
class GetManyResponse(Generic[T]):
    data: list[T] = field(default_factory=list)


@dataclass(frozen=True)
class CreateResponse(Generic[T]):
    """The record as written, including its allocated id."""

    data: T


@dataclass(frozen=True)
class CreateManyResponse(Generic[T]):
    data: list[T] = field(default_factory=list)


@dataclass(frozen=True)
class UpdateResponse(Generic[T]):
    """The record as stored after the partial update."""

    data: T


@dataclass(frozen=True)
class UpdateManyResponse(Generic[T]):
    data: list[T] = field(default_factory=list)


@dataclass(frozen=True)
class DeleteOneResponse(Generic[T]):
    """The removed record, or ``None`` when nothing was stored."""

    data: T | None = None


@dataclass(frozen=True)
class DeleteManyResponse(Generic[T]):
    data: list[T | None] = field(default_factory=list)


