"""File-based report storage adapter."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class FileReportStore:
    """
    File-based report storage.

    Implements ReportSink protocol. Each report gets its own markdown file.
    """

    def __init__(self, reports_dir: Path | str):
        self.reports_dir = Path(reports_dir).expanduser()
        self.reports_dir.mkdir(parents=True, exist_ok=True)

    def _unique_path(self, filename: str) -> Path:
        """Avoid clobbering a report written earlier in the same second."""
        path = self.reports_dir / filename
        counter = 2
        while path.exists():
            path = self.reports_dir / f"{Path(filename).stem}-{counter}{Path(filename).suffix}"
            counter += 1
        return path

    def write(self, filename: str, content: str) -> Path:
        """Write content to a new file and return its path."""
        path = self._unique_path(filename)
        path.write_text(content)
        logger.debug(f"Wrote report {path}")
        return path
