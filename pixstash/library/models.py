"""SQLAlchemy ORM models for the image library."""

from __future__ import annotations

from sqlalchemy import Boolean, Index, Integer, LargeBinary, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class LibraryBase(DeclarativeBase):
    """Base class for library ORM models."""

    pass


class SavedImage(LibraryBase):
    """A bookmarked image and its metadata."""

    __tablename__ = "images"

    id: Mapped[str] = mapped_column(String(32), primary_key=True)
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    page_url: Mapped[str | None] = mapped_column(Text)
    page_title: Mapped[str | None] = mapped_column(Text)
    mime_type: Mapped[str] = mapped_column(String(64), default="", server_default="")
    file_size: Mapped[int] = mapped_column(Integer, default=0, server_default="0")
    width: Mapped[int | None] = mapped_column(Integer)
    height: Mapped[int | None] = mapped_column(Integer)
    # Milliseconds since the epoch
    saved_at: Mapped[int] = mapped_column(Integer, nullable=False)
    rating: Mapped[str | None] = mapped_column(String(1))
    account: Mapped[str | None] = mapped_column(String(64))
    is_deleted: Mapped[bool] = mapped_column(Boolean, default=False, server_default="0")
    blob: Mapped[bytes | None] = mapped_column(LargeBinary, nullable=True, deferred=True)

    __table_args__ = (
        Index("ix_images_saved_at", "saved_at"),
        Index("ix_images_page_url", "page_url"),
        Index("ix_images_rating", "rating"),
        Index("ix_images_account", "account"),
    )

    def __repr__(self) -> str:
        return f"<SavedImage(id='{self.id}', url='{self.image_url[:40]}')>"


class ImageTag(LibraryBase):
    """Multi-value tag membership for a saved image."""

    __tablename__ = "image_tags"

    image_id: Mapped[str] = mapped_column(String(32), primary_key=True)
    tag: Mapped[str] = mapped_column(String(256), primary_key=True)
    # Order the tags were given in
    position: Mapped[int] = mapped_column(Integer, default=0, server_default="0")

    __table_args__ = (Index("ix_image_tags_tag", "tag"),)

    def __repr__(self) -> str:
        return f"<ImageTag(image_id='{self.image_id}', tag='{self.tag}')>"
