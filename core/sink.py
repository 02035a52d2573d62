"""Append-only JSON-lines persistence for confirmed credentials."""

import json
import threading
from pathlib import Path
from typing import List, Optional

from core.models import FoundCredential


class ResultSink:
    """Collects findings and appends each one to the output file as it arrives.

    The output file is truncated on construction so a fresh run never mixes
    with an older one, and every record is flushed immediately so an
    interrupted run keeps what it found.
    """

    def __init__(self, filepath: Optional[str] = None):
        self.filepath = Path(filepath) if filepath else None
        self.found: List[FoundCredential] = []
        self._lock = threading.Lock()
        if self.filepath is not None:
            self.filepath.write_text("")

    def record(self, found: FoundCredential) -> None:
        line = json.dumps(found.to_record())
        with self._lock:
            self.found.append(found)
            if self.filepath is not None:
                with self.filepath.open("a", encoding="utf-8") as fh:
                    fh.write(line + "\n")
                    fh.flush()

    def __len__(self) -> int:
        return len(self.found)
