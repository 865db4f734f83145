"""Report output interface."""

from pathlib import Path
from typing import Protocol


class ReportSink(Protocol):
    """Interface for saving rendered reports."""

    def write(self, filename: str, content: str) -> Path:
        """Write content to a new file and return its path."""
        ...
