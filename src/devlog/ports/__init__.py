"""Ports - interfaces/protocols for external dependencies."""

from .record_store import RecordStore
from .report_sink import ReportSink

__all__ = [
    "RecordStore",
    "ReportSink",
]
