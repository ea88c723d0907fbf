"""Local SQLite library of saved images and their tags."""

from pixstash.library.models import ImageTag, LibraryBase, SavedImage
from pixstash.library.ratings import extract_rating_from_tags
from pixstash.library.session import LIBRARY_DB_NAME, get_library_session, require_library

__all__ = [
    "ImageTag",
    "LIBRARY_DB_NAME",
    "LibraryBase",
    "SavedImage",
    "extract_rating_from_tags",
    "get_library_session",
    "require_library",
]
