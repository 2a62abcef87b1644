"""Tests for the list-query builder and pagination."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from vidshare.db.models import Video
from vidshare.db.query import MAX_LIMIT, ListQuery, PageSpec, Paginated, SortSpec, paginate


class TestPageSpec:
    def test_defaults(self):
        spec = PageSpec()
        assert spec.page == 1
        assert spec.limit == 10
        assert spec.offset == 0

    def test_offset(self):
        assert PageSpec(page=3, limit=5).offset == 10

    @pytest.mark.parametrize("page", [0, -1])
    def test_page_below_one_rejected(self, page):
        with pytest.raises(ValueError):
            PageSpec(page=page)

    @pytest.mark.parametrize("limit", [0, MAX_LIMIT + 1])
    def test_limit_out_of_range_rejected(self, limit):
        with pytest.raises(ValueError):
            PageSpec(limit=limit)


class TestSortSpec:
    def test_unknown_field_raises_key_error(self):
        with pytest.raises(KeyError):
            SortSpec("likes").clauses({"views": Video.views})

    def test_desc_with_tiebreaker(self):
        clauses = SortSpec("views", "desc").clauses({"views": Video.views}, tiebreaker=Video.id)
        rendered = [str(clause) for clause in clauses]
        assert rendered == ["videos.views DESC", "videos.id DESC"]

    def test_asc(self):
        clauses = SortSpec("views", "asc").clauses({"views": Video.views})
        assert [str(clause) for clause in clauses] == ["videos.views ASC"]


class TestListQuery:
    def test_builders_return_new_instances(self):
        base = ListQuery(Video)
        filtered = base.where(Video.views > 10)

        assert base.filters == []
        assert len(filtered.filters) == 1

    def test_filters_apply_to_count_statement(self):
        query = ListQuery(Video).where(Video.is_published == True)  # noqa: E712
        sql = str(query.count_statement())

        assert "count(*)" in sql
        assert "videos.is_published" in sql

    def test_statement_includes_ordering(self):
        query = ListQuery(Video).order_by(Video.created_at.desc())
        assert "ORDER BY videos.created_at DESC" in str(query.statement())


class TestPaginated:
    def test_middle_page(self):
        page = Paginated(docs=list(range(5)), total_docs=12, page=2, limit=5)

        assert page.total_pages == 3
        assert page.has_prev_page is True
        assert page.has_next_page is True
        assert page.paging_counter == 6

    def test_empty_result_has_one_page(self):
        page = Paginated(docs=[], total_docs=0, page=1, limit=10)

        assert page.total_pages == 1
        assert page.has_next_page is False
        assert page.has_prev_page is False

    def test_to_dict_keys(self):
        data = Paginated(docs=[1, 2], total_docs=12, page=3, limit=5).to_dict()

        assert data == {
            "docs": [1, 2],
            "totalDocs": 12,
            "limit": 5,
            "page": 3,
            "totalPages": 3,
            "pagingCounter": 11,
            "hasPrevPage": True,
            "hasNextPage": False,
            "prevPage": 2,
            "nextPage": None,
        }

    def test_map_keeps_totals(self):
        page = Paginated(docs=[1, 2], total_docs=7, page=1, limit=2).map(lambda n: n * 10)

        assert page.docs == [10, 20]
        assert page.total_docs == 7


class TestPaginate:
    @pytest.mark.asyncio
    async def test_counts_then_fetches_page(self):
        count_result = MagicMock()
        count_result.scalar.return_value = 12
        rows_result = MagicMock()
        rows_result.scalars.return_value.all.return_value = ["a", "b", "c", "d", "e"]

        session = AsyncMock()
        session.execute = AsyncMock(side_effect=[count_result, rows_result])

        page = await paginate(session, ListQuery(Video), PageSpec(page=2, limit=5))

        assert page.docs == ["a", "b", "c", "d", "e"]
        assert page.total_docs == 12
        assert page.has_next_page is True

        fetch_stmt = session.execute.call_args_list[1].args[0]
        assert fetch_stmt._limit_clause is not None
        assert fetch_stmt._offset_clause is not None

    @pytest.mark.asyncio
    async def test_page_beyond_end_is_empty(self):
        count_result = MagicMock()
        count_result.scalar.return_value = 3
        rows_result = MagicMock()
        rows_result.scalars.return_value.all.return_value = []

        session = AsyncMock()
        session.execute = AsyncMock(side_effect=[count_result, rows_result])

        page = await paginate(session, ListQuery(Video), PageSpec(page=5, limit=10))

        assert page.docs == []
        assert page.total_docs == 3
        assert page.total_pages == 1
        assert page.has_next_page is False
