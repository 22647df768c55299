from __future__ import annotations

import json
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterable, Mapping

from runcards.engine.types import Event


@dataclass
class TelemetryService:
    """Append-only JSONL event log. Nothing here is ever read back."""

    path: Path
    enabled: bool = True

    def _record(self, event_type: str, payload: Mapping[str, object]) -> str:
        rec = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        return json.dumps(rec, ensure_ascii=False)

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        self.write([self._record(event_type, payload)])

    def log_events(self, events: Iterable[Event]) -> int:
        """Write engine events drained from the session; returns how many."""
        lines = []
        for ev in events:
            payload = {k: v for k, v in ev.items() if k != "type"}
            lines.append(self._record(str(ev.get("type", "UNKNOWN")), payload))
        self.write(lines)
        return len(lines)

    def write(self, lines: list[str]) -> None:
        if not self.enabled or not lines:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
