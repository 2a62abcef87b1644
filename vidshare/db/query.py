"""Typed list-query builder and pagination.

A :class:`ListQuery` describes one listing as data: the root model, the joins
it needs, its filter clauses, eager-load options that shape the embedded
projections, and its ordering. :func:`paginate` runs it twice, once as a count
and once as a page of rows, so filters (visibility included) always apply
before paging.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Generic, Literal, TypeVar

from sqlalchemy import Select, and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")
U = TypeVar("U")

SortDirection = Literal["asc", "desc"]

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


@dataclass(frozen=True)
class PageSpec:
    """1-indexed page number and page size."""

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    def __post_init__(self) -> None:
        if self.page < 1:
            raise ValueError("page must be >= 1")
        if not 1 <= self.limit <= MAX_LIMIT:
            raise ValueError(f"limit must be between 1 and {MAX_LIMIT}")

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass(frozen=True)
class SortSpec:
    """A whitelisted sort key resolved against a ``{name: column}`` map."""

    field: str
    direction: SortDirection = "desc"

    def clauses(self, columns: dict[str, Any], tiebreaker: Any | None = None) -> list:
        if self.field not in columns:
            raise KeyError(self.field)
        column = columns[self.field]
        ordered = [column.asc() if self.direction == "asc" else column.desc()]
        if tiebreaker is not None:
            ordered.append(tiebreaker.asc() if self.direction == "asc" else tiebreaker.desc())
        return ordered


@dataclass
class ListQuery(Generic[T]):
    model: type[T]
    joins: list[tuple[Any, Any]] = field(default_factory=list)
    filters: list[Any] = field(default_factory=list)
    options: list[Any] = field(default_factory=list)
    ordering: list[Any] = field(default_factory=list)

    def join(self, target: Any, onclause: Any) -> ListQuery[T]:
        return replace(self, joins=[*self.joins, (target, onclause)])

    def where(self, *clauses: Any) -> ListQuery[T]:
        return replace(self, filters=[*self.filters, *clauses])

    def load(self, *options: Any) -> ListQuery[T]:
        return replace(self, options=[*self.options, *options])

    def order_by(self, *clauses: Any) -> ListQuery[T]:
        return replace(self, ordering=[*self.ordering, *clauses])

    def _apply_joins_and_filters(self, stmt: Select) -> Select:
        for target, onclause in self.joins:
            stmt = stmt.join(target, onclause)
        if self.filters:
            stmt = stmt.where(and_(*self.filters))
        return stmt

    def statement(self) -> Select:
        stmt = self._apply_joins_and_filters(select(self.model))
        if self.options:
            stmt = stmt.options(*self.options)
        if self.ordering:
            stmt = stmt.order_by(*self.ordering)
        return stmt

    def count_statement(self) -> Select:
        return self._apply_joins_and_filters(select(func.count()).select_from(self.model))


@dataclass
class Paginated(Generic[T]):
    docs: list[T]
    total_docs: int
    page: int
    limit: int

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total_docs / self.limit))

    @property
    def has_prev_page(self) -> bool:
        return self.page > 1

    @property
    def has_next_page(self) -> bool:
        return self.page < self.total_pages

    @property
    def paging_counter(self) -> int:
        return (self.page - 1) * self.limit + 1

    def map(self, fn: Callable[[T], U]) -> Paginated[U]:
        return Paginated(
            docs=[fn(doc) for doc in self.docs],
            total_docs=self.total_docs,
            page=self.page,
            limit=self.limit,
        )

    def to_dict(self, dump: Callable[[Any], Any] = lambda doc: doc) -> dict:
        return {
            "docs": [dump(doc) for doc in self.docs],
            "totalDocs": self.total_docs,
            "limit": self.limit,
            "page": self.page,
            "totalPages": self.total_pages,
            "pagingCounter": self.paging_counter,
            "hasPrevPage": self.has_prev_page,
            "hasNextPage": self.has_next_page,
            "prevPage": self.page - 1 if self.has_prev_page else None,
            "nextPage": self.page + 1 if self.has_next_page else None,
        }


async def paginate(db_session: AsyncSession, query: ListQuery[T], page: PageSpec) -> Paginated[T]:
    """Count the filtered set, then fetch one page of it."""
    total = (await db_session.execute(query.count_statement())).scalar() or 0

    result = await db_session.execute(query.statement().offset(page.offset).limit(page.limit))
    docs = list(result.scalars().all())

    return Paginated(docs=docs, total_docs=total, page=page.page, limit=page.limit)
