"""Row-oriented tabular backends

A workbook is a set of named sheets; each sheet is a list of rows and each
row a list of cell strings. Row indexes are 0-based positions in the list
returned by ``read_rows`` (the header row, if any, is index 0).
"""

import json
import logging
import os
import platform
import tempfile
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, List, Optional, Union

from errors import StoreUnavailable

logger = logging.getLogger(__name__)

Rows = List[List[str]]


class TabularBackend(ABC):
    """Abstract base class for workbook storage"""

    @abstractmethod
    def read_rows(self, sheet: str) -> Optional[Rows]:
        """Return every row of ``sheet``, or None if the sheet does not exist"""

    @abstractmethod
    def create_sheet(self, sheet: str, rows: Rows) -> None:
        """Create ``sheet`` with initial ``rows`` (no-op if it already exists)"""

    @abstractmethod
    def update_row(self, sheet: str, index: int, values: List[str]) -> None:
        """Overwrite row ``index`` of ``sheet``"""

    @abstractmethod
    def append_row(self, sheet: str, values: List[str]) -> None:
        """Append a row at the end of ``sheet``"""

    @abstractmethod
    def delete_row(self, sheet: str, index: int) -> None:
        """Remove row ``index`` of ``sheet``"""

    def __init__(self):
        # Held by stores around read-modify-write sequences
        self.lock = threading.RLock()


class InMemoryBackend(TabularBackend):
    """Workbook kept in process memory"""

    def __init__(self, sheets: Optional[Dict[str, Rows]] = None):
        super().__init__()
        self._sheets: Dict[str, Rows] = {
            name: [list(map(str, row)) for row in rows] for name, rows in (sheets or {}).items()
        }

    def _load(self) -> Dict[str, Rows]:
        return self._sheets

    def _save(self, sheets: Dict[str, Rows]) -> None:
        self._sheets = sheets

    def _existing(self, sheets: Dict[str, Rows], sheet: str) -> Rows:
        if sheet not in sheets:
            raise StoreUnavailable(sheet)
        return sheets[sheet]

    def read_rows(self, sheet: str) -> Optional[Rows]:
        with self.lock:
            rows = self._load().get(sheet)
            return None if rows is None else [list(row) for row in rows]

    def create_sheet(self, sheet: str, rows: Rows) -> None:
        with self.lock:
            sheets = self._load()
            if sheet in sheets:
                return
            sheets[sheet] = [[str(cell) for cell in row] for row in rows]
            self._save(sheets)

    def update_row(self, sheet: str, index: int, values: List[str]) -> None:
        with self.lock:
            sheets = self._load()
            rows = self._existing(sheets, sheet)
            rows[index] = [str(cell) for cell in values]
            self._save(sheets)

    def append_row(self, sheet: str, values: List[str]) -> None:
        with self.lock:
            sheets = self._load()
            self._existing(sheets, sheet).append([str(cell) for cell in values])
            self._save(sheets)

    def delete_row(self, sheet: str, index: int) -> None:
        with self.lock:
            sheets = self._load()
            del self._existing(sheets, sheet)[index]
            self._save(sheets)


class JsonFileBackend(InMemoryBackend):
    """Workbook persisted as a JSON file with owner-only permissions

    The file holds ``{"sheets": {name: rows}}`` and is rewritten atomically
    on every mutation.
    """

    def __init__(self, workbook_file: Union[str, Path]):
        super().__init__()
        self.workbook_path = Path(workbook_file)
        self._ensure_secure_directory()

    def _ensure_secure_directory(self):
        """Create parent directory with secure permissions"""
        parent_dir = self.workbook_path.parent
        if not parent_dir.exists():
            parent_dir.mkdir(parents=True, exist_ok=True)
            # Set directory permissions to 700 on Unix-like systems
            if platform.system() != "Windows":
                os.chmod(parent_dir, 0o700)

    def _load(self) -> Dict[str, Rows]:
        if not self.workbook_path.exists():
            return {}
        try:
            data = json.loads(self.workbook_path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            raise StoreUnavailable(
                str(self.workbook_path), f"Workbook {self.workbook_path} is unreadable: {e}"
            ) from e
        return {name: [[str(cell) for cell in row] for row in rows]
                for name, rows in data.get("sheets", {}).items()}

    def _save(self, sheets: Dict[str, Rows]) -> None:
        tmp_path = None
        try:
            fd, tmp_path = tempfile.mkstemp(dir=self.workbook_path.parent, suffix=".tmp")
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump({"sheets": sheets}, f, indent=2, ensure_ascii=False)
            if platform.system() != "Windows":
                os.chmod(tmp_path, 0o600)
            os.replace(tmp_path, self.workbook_path)
        except OSError as e:
            if tmp_path and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            logger.error(f"Could not write workbook {self.workbook_path}: {e}")
            raise StoreUnavailable(
                str(self.workbook_path), f"Workbook {self.workbook_path} is not writable: {e}"
            ) from e
        logger.debug(f"Saved workbook to {self.workbook_path}")
