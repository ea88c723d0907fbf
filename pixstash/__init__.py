"""pixstash: personal image bookmarks with a Danbooru-style tag search."""

__version__ = "0.1.0"
