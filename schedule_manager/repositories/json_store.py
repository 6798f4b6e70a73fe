# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Storage adapter: one JSON array per file.
Reads and writes whole collections; no partial updates, no locking.
"""

import json
import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from schedule_manager.core.logging import get_logger

logger = get_logger(__name__)


class JsonFileStore:
    """Flat-file blob store for a single collection."""

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._path.parent.mkdir(parents=True, exist_ok=True)

    # ── Read ──

    def load(self) -> list[dict[str, Any]]:
        """Return the stored records, or [] when the file is absent or unreadable."""
        if not self._path.exists():
            logger.info("Data file not found, starting empty: %s", self._path)
            return []
        try:
            raw = self._path.read_text(encoding="utf-8")
            if not raw.strip():
                return []
            records = json.loads(raw)
        except (OSError, json.JSONDecodeError) as exc:
            logger.error("Failed to load %s: %s", self._path, exc)
            return []
        if not isinstance(records, list):
            logger.error("Ignoring %s: top-level JSON value is not an array", self._path)
            return []
        logger.info("Loaded %d records from %s", len(records), self._path)
        return records

    def stats(self) -> dict[str, Any]:
        if not self._path.exists():
            return {"fileExists": False, "fileSize": 0, "lastModified": None}
        st = self._path.stat()
        return {
            "fileExists": True,
            "fileSize": st.st_size,
            "lastModified": datetime.fromtimestamp(st.st_mtime, timezone.utc).isoformat(),
        }

    # ── Write ──

    def save(self, records: list[dict[str, Any]]) -> bool:
        """Overwrite the file with the full collection. Returns False on failure."""
        try:
            payload = json.dumps(records, ensure_ascii=False, indent=2)
            self._path.write_text(payload, encoding="utf-8")
        except (OSError, TypeError, ValueError) as exc:
            logger.error("Failed to save %d records to %s: %s", len(records), self._path, exc)
            return False
        logger.info("Saved %d records to %s", len(records), self._path)
        return True

    def backup(self) -> bool:
        """Copy the current file to a timestamped sibling. True if nothing to copy."""
        if not self._path.exists():
            return True
        stamp = datetime.now(timezone.utc).isoformat().replace(":", "-").replace(".", "-")
        backup_path = self._path.with_name(f"{self._path.stem}_backup_{stamp}{self._path.suffix}")
        try:
            shutil.copyfile(self._path, backup_path)
        except OSError as exc:
            logger.error("Failed to back up %s: %s", self._path, exc)
            return False
        logger.info("Backup created: %s", backup_path)
        return True
