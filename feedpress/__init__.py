"""Markdown post ingestion, slugging, chapters, an in-memory record store and collection-schema migrations for a personal feed."""

__version__ = "0.1.0"

__all__ = [
    "assets",
    "catalog",
    "history_1",
    "history_2",
    "history_3",
    "history_4",
    "history_5",
    "posts",
    "schema",
    "store",
    "templui",
    "text",
]