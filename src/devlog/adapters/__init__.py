"""Adapters - I/O implementations of ports."""

from .sqlite_store import SqliteStore
from .memory_store import InMemoryStore
from .file_reports import FileReportStore

__all__ = [
    "SqliteStore",
    "InMemoryStore",
    "FileReportStore",
]
