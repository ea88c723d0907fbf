"""Unit tests for library models and session management."""

from __future__ import annotations

from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import Session

from pixstash.exceptions import LibraryNotFoundError
from pixstash.library.models import ImageTag, SavedImage
from pixstash.library.session import (
    LIBRARY_DB_NAME,
    delete_library,
    get_library_session,
    require_library,
)


class TestSavedImage:
    def test_create_and_query(self, library_session: Session) -> None:
        library_session.add(
            SavedImage(
                id="a" * 32,
                image_url="https://example.com/cat.png",
                page_url="https://example.com/post/1",
                page_title="Cat post",
                mime_type="image/png",
                file_size=1234,
                width=640,
                height=480,
                saved_at=1700000000000,
                rating="g",
                account="alice",
                blob=b"\x89PNG",
            )
        )
        library_session.commit()

        result = library_session.query(SavedImage).one()
        assert result.image_url == "https://example.com/cat.png"
        assert result.page_title == "Cat post"
        assert result.mime_type == "image/png"
        assert (result.width, result.height) == (640, 480)
        assert result.rating == "g"
        assert result.account == "alice"
        assert result.is_deleted is False
        assert result.blob == b"\x89PNG"

    def test_defaults(self, library_session: Session) -> None:
        library_session.add(SavedImage(id="b" * 32, image_url="u", saved_at=1))
        library_session.commit()

        result = library_session.get(SavedImage, "b" * 32)
        assert result is not None
        assert result.mime_type == ""
        assert result.file_size == 0
        assert result.rating is None
        assert result.account is None
        assert result.is_deleted is False

    def test_repr(self) -> None:
        image = SavedImage(id="c" * 32, image_url="https://example.com/x.gif", saved_at=0)
        assert "c" * 32 in repr(image)


class TestImageTag:
    def test_composite_key(self, library_session: Session) -> None:
        library_session.add(ImageTag(image_id="a" * 32, tag="cat", position=0))
        library_session.add(ImageTag(image_id="a" * 32, tag="girl", position=1))
        library_session.add(ImageTag(image_id="b" * 32, tag="cat", position=0))
        library_session.commit()

        cats = library_session.query(ImageTag).filter_by(tag="cat").all()
        assert {row.image_id for row in cats} == {"a" * 32, "b" * 32}


class TestSessionManagement:
    def test_creates_database_and_parent_dirs(self, tmp_path: Path) -> None:
        db_path = tmp_path / "nested" / LIBRARY_DB_NAME
        with get_library_session(db_path) as session:
            assert session.query(SavedImage).count() == 0
        assert db_path.exists()

    def test_commits_on_success(self, tmp_path: Path) -> None:
        db_path = tmp_path / LIBRARY_DB_NAME
        with get_library_session(db_path) as session:
            session.add(SavedImage(id="d" * 32, image_url="u", saved_at=1))

        with get_library_session(db_path) as session:
            assert session.get(SavedImage, "d" * 32) is not None

    def test_rolls_back_on_error(self, tmp_path: Path) -> None:
        db_path = tmp_path / LIBRARY_DB_NAME
        with pytest.raises(RuntimeError):
            with get_library_session(db_path) as session:
                session.add(SavedImage(id="e" * 32, image_url="u", saved_at=1))
                session.flush()
                raise RuntimeError("boom")

        with get_library_session(db_path) as session:
            assert session.get(SavedImage, "e" * 32) is None

    def test_corrupt_database_recreated(self, tmp_path: Path) -> None:
        db_path = tmp_path / LIBRARY_DB_NAME
        db_path.write_bytes(b"this is not an sqlite file at all" * 100)

        with get_library_session(db_path) as session:
            assert session.query(SavedImage).count() == 0

    def test_schema_evolution_adds_missing_columns(self, tmp_path: Path) -> None:
        db_path = tmp_path / LIBRARY_DB_NAME
        engine = create_engine(f"sqlite:///{db_path}")
        with engine.begin() as conn:
            conn.execute(
                text(
                    "CREATE TABLE images ("
                    "id VARCHAR(32) PRIMARY KEY, image_url TEXT NOT NULL, saved_at INTEGER NOT NULL)"
                )
            )
            conn.execute(text("INSERT INTO images (id, image_url, saved_at) VALUES ('old', 'u', 1)"))
        engine.dispose()

        with get_library_session(db_path) as session:
            image = session.get(SavedImage, "old")
            assert image is not None
            assert image.account is None
            assert image.is_deleted is False

        engine = create_engine(f"sqlite:///{db_path}")
        inspector = inspect(engine)
        columns = {col["name"] for col in inspector.get_columns("images")}
        indexes = {idx["name"] for idx in inspector.get_indexes("images")}
        engine.dispose()
        assert {"rating", "account", "is_deleted", "mime_type"} <= columns
        assert "ix_images_account" in indexes


class TestRequireLibrary:
    def test_missing(self, tmp_path: Path) -> None:
        with pytest.raises(LibraryNotFoundError):
            require_library(tmp_path / "missing.db")

    def test_present(self, tmp_path: Path) -> None:
        db_path = tmp_path / LIBRARY_DB_NAME
        db_path.touch()
        assert require_library(db_path) == db_path


def test_delete_library(tmp_path: Path) -> None:
    db_path = tmp_path / LIBRARY_DB_NAME
    assert delete_library(db_path) is False
    db_path.touch()
    assert delete_library(db_path) is True
    assert not db_path.exists()
