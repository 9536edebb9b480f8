from __future__ import annotations

import pytest

from gallery.client import GalleryResponseError, normalize_page


def test_paginated_payload_is_normalized():
    page = normalize_page(
        {
            "items": [
                {
                    "id": "12",
                    "prompt": "a cat",
                    "metadata": {"model": "x"},
                    "telegram": {"chat_id": 99, "file_id": "abc"},
                    "timestamp": "2026-01-02T03:04:05Z",
                }
            ],
            "hasMore": True,
            "nextCursor": "12",
            "limit": 1,
        }
    )

    assert page.has_more is True
    assert page.next_cursor == "12"
    entry = page.items[0]
    assert entry.id == "12"
    assert entry.resource_ref.chat_id == "99"
    assert entry.file_id == "abc"
    assert entry.metadata == {"model": "x"}
    assert entry.timestamp.year == 2026


def test_legacy_list_payload_has_no_more_pages():
    page = normalize_page([{"id": 3, "prompt": None, "metadata": None}, {"id": "2"}])

    assert [entry.id for entry in page.items] == ["3", "2"]
    assert page.items[0].prompt == ""
    assert page.items[0].metadata == {}
    assert page.items[0].file_id is None
    assert page.has_more is False
    assert page.next_cursor is None


def test_has_more_without_cursor_is_treated_as_exhausted():
    page = normalize_page({"items": [], "hasMore": True, "nextCursor": None})

    assert page.has_more is False
    assert page.next_cursor is None


@pytest.mark.parametrize("payload", [{"error": "nope"}, "text", [{"prompt": "missing id"}]])
def test_malformed_payload_raises_response_error(payload):
    with pytest.raises(GalleryResponseError):
        normalize_page(payload)
