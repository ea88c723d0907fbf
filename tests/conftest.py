"""Shared pytest fixtures."""

from __future__ import annotations

import shutil
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from pixstash.library.models import LibraryBase

if TYPE_CHECKING:
    from collections.abc import Generator

    from sqlalchemy.orm import Session

    from pixstash.config import Config


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    path = Path(tempfile.mkdtemp())
    try:
        yield path
    finally:
        shutil.rmtree(path, ignore_errors=True)


@pytest.fixture
def sample_config(temp_dir: Path) -> Path:
    """Create a sample config file."""
    config_path = temp_dir / "config.toml"
    config_path.write_text(f"""[paths]
library_db = "{temp_dir / 'library.db'}"

[display]
colored_output = false

[search]
default_limit = 25
default_format = "ids"
""")
    return config_path


@pytest.fixture
def library_session() -> Generator[Session, None, None]:
    """In-memory library database session."""
    engine = create_engine("sqlite:///:memory:")
    LibraryBase.metadata.create_all(engine)
    session = sessionmaker(bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def mock_config(temp_dir: Path) -> Config:
    """Create a Config object pointing at a library inside temp_dir."""
    from pixstash.config import Config

    return Config(
        library_db=temp_dir / "library.db",
        colored_output=False,
    )
