from __future__ import annotations

import json
import os
import threading
from typing import Any, Dict, Optional, TextIO


class TelemetryLogger:
    """Append-only JSONL log of robot move attempts.

    One JSON object per line. Writes are serialised with a lock so a single
    logger can be shared between threads. Usable as a context manager.
    """

    def __init__(self, path: str, truncate: bool = False) -> None:
        self.path = path
        self.records_written = 0
        os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
        self._lock = threading.Lock()
        self._fp: Optional[TextIO] = open(self.path, "w" if truncate else "a", encoding="utf-8")

    def log_step(self, record: Dict[str, Any]) -> None:
        """Append a single record."""
        line = json.dumps(record, separators=(",", ":"))
        with self._lock:
            if self._fp is None:
                raise ValueError(f"telemetry log '{self.path}' is closed")
            self._fp.write(line + "\n")
            self._fp.flush()
            self.records_written += 1

    def close(self) -> None:
        with self._lock:
            if self._fp is not None:
                self._fp.close()
                self._fp = None

    def __enter__(self) -> "TelemetryLogger":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
