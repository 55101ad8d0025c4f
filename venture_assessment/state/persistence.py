"""Snapshot persistence for the assessment store.

The storage system:
- Writes the snapshot as a single JSON file (camelCase keys)
- Writes atomically: a temp file is written then moved into place
- Serializes access with a lock so writes never interleave
- Bounds the snapshot size by dropping heavy fields (rawData, then data)
- Debounces autosaves so a burst of mutations produces one write
"""

import asyncio
import json
import logging
import os
from pathlib import Path
from threading import Lock
from typing import Any, Callable

from venture_assessment.models.snapshot import PersistedSnapshot

logger = logging.getLogger(__name__)

# Heavy assessment fields, in the order they are dropped under size pressure
DROPPABLE_FIELDS = ("raw_data", "data")


class SnapshotStorage:
    """File-backed storage for one snapshot.
    
    Attributes:
        path: Location of the snapshot file
    """
    
    def __init__(self, path: Path | str) -> None:
        self.path = Path(path)
        self._lock = Lock()
    
    def read(self) -> str | None:
        """Return the stored snapshot text, or None when nothing is stored.
        
        Raises:
            OSError: If the file exists but cannot be read
            UnicodeDecodeError: If the stored bytes are not valid UTF-8
        """
        with self._lock:
            if not self.path.exists():
                return None
            return self.path.read_text(encoding="utf-8")
    
    def write(self, text: str) -> None:
        """Atomically replace the stored snapshot.
        
        Raises:
            OSError: If the directory or file cannot be written
        """
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            temp_path = self.path.with_name(f"{self.path.name}.tmp")
            try:
                with open(temp_path, "w", encoding="utf-8") as f:
                    f.write(text)
                os.replace(temp_path, self.path)
            except OSError:
                temp_path.unlink(missing_ok=True)
                raise
        logger.debug(f"Snapshot written to {self.path} ({len(text)} characters)")
    
    def clear(self) -> None:
        """Remove the stored snapshot, if any."""
        with self._lock:
            self.path.unlink(missing_ok=True)
        logger.debug(f"Snapshot cleared at {self.path}")
    
    def exists(self) -> bool:
        return self.path.exists()


def encode_snapshot(snapshot: PersistedSnapshot, max_bytes: int) -> str | None:
    """Serialize a snapshot within a size bound.
    
    When the full snapshot exceeds max_bytes, rawData is dropped from every
    assessment; if still too large, data is dropped as well.
    
    Args:
        snapshot: Snapshot to serialize
        max_bytes: Maximum encoded size in bytes
    
    Returns:
        JSON text, or None if the snapshot cannot fit even without the
        heavy fields
    """
    excluded: set[str] = set()
    
    for drop in (None, *DROPPABLE_FIELDS):
        if drop is not None:
            excluded.add(drop)
            logger.warning(f"Snapshot exceeds {max_bytes} bytes, dropping {drop}")
        exclude = {"assessments": {"__all__": set(excluded)}} if excluded else None
        payload = snapshot.model_dump(mode="json", by_alias=True, exclude=exclude)
        text = json.dumps(payload, ensure_ascii=False)
        if len(text.encode("utf-8")) <= max_bytes:
            return text
    
    return None


class DebouncedWriter:
    """Coalesces save requests into a single delayed flush.
    
    Each schedule() call restarts the quiet period. Outside a running event
    loop the flush happens immediately.
    """
    
    def __init__(self, flush: Callable[[], Any], delay: float) -> None:
        self._flush = flush
        self.delay = delay
        self._handle: asyncio.TimerHandle | None = None
    
    @property
    def pending(self) -> bool:
        return self._handle is not None
    
    def schedule(self) -> None:
        """Request a flush after the quiet period."""
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._flush()
            return
        
        if self._handle is not None:
            self._handle.cancel()
        self._handle = loop.call_later(self.delay, self._fire)
    
    def _fire(self) -> None:
        self._handle = None
        self._flush()
    
    def flush(self) -> None:
        """Write immediately if a flush is pending."""
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
        self._flush()
    
    def cancel(self) -> None:
        """Drop a pending flush without writing."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
