"""engine.logging

Narrated run log + JSON export helpers.

The narrated log is presentation-facing: append-only lines describing what the
engine resolved. A run export is JSON-serializable so it can be downloaded.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class LogSource(str, Enum):
    SYSTEM = "SYSTEM"
    HERO = "HERO"
    MONSTER = "MONSTER"
    AI = "AI"


@dataclass(frozen=True)
class LogEntry:
    seq: int
    text: str
    source: LogSource

    def to_dict(self) -> Dict[str, Any]:
        return {"seq": int(self.seq), "text": self.text, "source": self.source.value}


@dataclass
class RunLog:
    entries: List[LogEntry] = field(default_factory=list)
    _seq: int = 0

    def add(self, text: str, source: LogSource = LogSource.SYSTEM) -> LogEntry:
        self._seq += 1
        entry = LogEntry(seq=self._seq, text=str(text), source=LogSource(source))
        self.entries.append(entry)
        return entry

    def clear(self) -> None:
        self.entries.clear()

    def tail(self, n: int) -> List[LogEntry]:
        return list(self.entries[-int(n):]) if n > 0 else []

    def to_list(self) -> List[Dict[str, Any]]:
        return [e.to_dict() for e in self.entries]


def make_run_export(*, seed: int, config: Dict[str, Any], snapshot: Dict[str, Any], log: List[Dict[str, Any]]) -> Dict[str, Any]:
    return {
        "version": 1,
        "seed": int(seed),
        "config": dict(config),
        "snapshot": dict(snapshot),
        "log": list(log),
    }


def dumps_run_export(obj: Dict[str, Any]) -> str:
    return json.dumps(obj, ensure_ascii=False, indent=2, sort_keys=True)
