from __future__ import annotations

import asyncio

from gallery.features.gallery import repo as gallery_repo


class _FakeScalarResult:
    def all(self):
        return []


class _FakeExecuteResult:
    rowcount = 1

    def scalars(self):
        return _FakeScalarResult()

    def scalar_one_or_none(self):
        return None


class _FakeSession:
    def __init__(self):
        self.statements: list[str] = []
        self.last_params: dict[str, object] = {}
        self.commits = 0

    async def execute(self, stmt):
        compiled = stmt.compile(compile_kwargs={"literal_binds": False})
        self.statements.append(str(compiled))
        self.last_params = dict(compiled.params)
        return _FakeExecuteResult()

    async def commit(self):
        self.commits += 1


def test_list_entries_fetches_one_lookahead_row_before_cursor():
    session = _FakeSession()

    rows = asyncio.run(gallery_repo.list_entries(session, limit=60, before_id=120))

    assert rows == []
    sql = session.statements[-1]
    assert "ORDER BY gallery_entries.id DESC" in sql
    assert "gallery_entries.id <" in sql
    assert 61 in session.last_params.values()
    assert 120 in session.last_params.values()


def test_first_page_has_no_cursor_filter():
    session = _FakeSession()

    asyncio.run(gallery_repo.list_entries(session, limit=10))

    assert "WHERE" not in session.statements[-1]


def test_legacy_listing_orders_by_timestamp():
    session = _FakeSession()

    asyncio.run(gallery_repo.list_recent_entries(session, limit=200))

    assert "ORDER BY gallery_entries.timestamp DESC, gallery_entries.id DESC" in session.statements[-1]


def test_delete_commits_and_reports_single_row():
    session = _FakeSession()

    deleted = asyncio.run(gallery_repo.delete_entry(session, entry_id=7))

    assert deleted is True
    assert session.commits == 1
    assert session.statements[-1].startswith("DELETE FROM gallery_entries")
    assert 7 in session.last_params.values()
