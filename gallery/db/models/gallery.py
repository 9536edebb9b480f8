from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import JSON, BigInteger, DateTime, Identity, Index, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

from gallery.db.base import Base


class GalleryEntry(Base):
    __tablename__ = "gallery_entries"
    __table_args__ = (
        Index("ix_gallery_entries_timestamp", "timestamp"),
        Index("ix_gallery_entries_file_id", "file_id"),
    )

    # Identity ids grow with insertion order, so `id < cursor` walks backwards in time.
    id: Mapped[int] = mapped_column(BigInteger, Identity(), primary_key=True)
    prompt: Mapped[str] = mapped_column(Text, nullable=False, default="")
    metadata_json: Mapped[dict[str, Any]] = mapped_column(
        "metadata",
        JSON,
        nullable=False,
        default=dict,
    )
    chat_id: Mapped[str | None] = mapped_column(String(64), nullable=True)
    file_id: Mapped[str | None] = mapped_column(String(255), nullable=True)
    bot_token: Mapped[str | None] = mapped_column(String(255), nullable=True)
    timestamp: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
