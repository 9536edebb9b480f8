from __future__ import annotations

import pytest

from gallery.db.utils import normalize_database_url


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("postgresql+psycopg://u:p@db/gallery", "postgresql+psycopg://u:p@db/gallery"),
        ("postgresql://u:p@db/gallery", "postgresql+psycopg://u:p@db/gallery"),
        ("postgres://u:p@db/gallery", "postgresql+psycopg://u:p@db/gallery"),
        ("sqlite+aiosqlite:///gallery.db", "sqlite+aiosqlite:///gallery.db"),
    ],
)
def test_normalize_database_url_only_rewrites_postgres_schemes(raw, expected):
    assert normalize_database_url(raw) == expected
