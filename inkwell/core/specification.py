"""Query specification objects.

A specification describes *what* to select (predicate, ordering, paging)
and never *how*: repositories decide whether to push part of it down to
the store (see ``key_filter``) and then call ``evaluate`` for the rest.

Composition:
    approved = CommentSpec(is_approved=True)
    for_post = CommentSpec(post_id=post_id, newest_first=True)
    spec = for_post & approved
"""

from collections.abc import Callable, Hashable, Iterable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar


T = TypeVar("T")


@dataclass(frozen=True)
class OrderBy:
    """Sort key applied after filtering."""

    key: Callable[[Any], Any]
    descending: bool = False


@dataclass(frozen=True)
class Page:
    """1-based page of results."""

    number: int
    size: int

    def __post_init__(self) -> None:
        if self.number < 1:
            msg = f"page number must be >= 1, got {self.number}"
            raise ValueError(msg)
        if self.size < 1:
            msg = f"page size must be >= 1, got {self.size}"
            raise ValueError(msg)

    @property
    def skip(self) -> int:
        return (self.number - 1) * self.size

    @property
    def take(self) -> int:
        return self.size


@dataclass(frozen=True)
class KeyFilter:
    """Restriction of one column to a set of values.

    Lets a repository replace a scan with keyed or indexed reads. The
    predicate still has to hold, so pushing it down is optional.
    """

    column: str
    values: frozenset[Hashable]


class Specification(Generic[T]):
    """Base specification: matches everything, no order, no paging."""

    @property
    def order_by(self) -> OrderBy | None:
        return None

    @property
    def paging(self) -> Page | None:
        return None

    @property
    def key_filter(self) -> KeyFilter | None:
        return None

    def is_satisfied_by(self, entity: T) -> bool:
        return True

    def evaluate(self, items: Iterable[T]) -> list[T]:
        """Apply filter, then ordering, then paging."""
        result = [item for item in items if self.is_satisfied_by(item)]

        order = self.order_by
        if order is not None:
            result.sort(key=order.key, reverse=order.descending)

        page = self.paging
        if page is not None:
            result = result[page.skip : page.skip + page.take]

        return result

    def __and__(self, other: "Specification[T]") -> "AndSpecification[T]":
        return AndSpecification(self, other)


@dataclass(frozen=True)
class AndSpecification(Specification[T]):
    """Both predicates must hold.

    Ordering and paging are taken from the left operand when it has them,
    otherwise from the right one.
    """

    left: Specification[T]
    right: Specification[T]

    @property
    def order_by(self) -> OrderBy | None:
        return self.left.order_by or self.right.order_by

    @property
    def paging(self) -> Page | None:
        return self.left.paging or self.right.paging

    @property
    def key_filter(self) -> KeyFilter | None:
        left, right = self.left.key_filter, self.right.key_filter
        if left is None:
            return right
        if right is None:
            return left
        if left.column == right.column:
            return KeyFilter(left.column, left.values & right.values)
        return left

    def is_satisfied_by(self, entity: T) -> bool:
        return self.left.is_satisfied_by(entity) and self.right.is_satisfied_by(
            entity
        )
