"""truthrank — Truth-ranking and content-safety classification for archival search results."""

__version__ = "0.1.0"
