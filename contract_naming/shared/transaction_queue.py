"""Queue of contract calls awaiting joint execution by a multisig wallet."""

from __future__ import annotations

import json
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from contract_naming.config import resolve_storage_dir

logger = logging.getLogger(__name__)


@dataclass
class QueuedCall:
    chain_id: int
    to: str
    function: str
    args: list[Any]
    value: int = 0
    description: str = ""
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    id: str = ""

    def __post_init__(self):
        if not self.id:
            timestamp = int(self.created_at.timestamp() * 1000)
            self.id = f"call-{timestamp}-{uuid.uuid4().hex[:8]}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "chain_id": self.chain_id,
            "to": self.to,
            "function": self.function,
            "args": self.args,
            "value": str(self.value),
            "description": self.description,
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "QueuedCall":
        return cls(
            id=data.get("id", ""),
            chain_id=int(data["chain_id"]),
            to=data["to"],
            function=data["function"],
            args=data.get("args", []),
            value=int(data.get("value", 0)),
            description=data.get("description", ""),
            created_at=datetime.fromisoformat(data["created_at"])
            if "created_at" in data
            else datetime.now(timezone.utc),
        )


class TransactionQueue:
    QUEUE_VERSION = 1

    def __init__(self, storage_dir: Path | None = None):
        if storage_dir is None:
            storage_dir = resolve_storage_dir() / "queue"
        self.storage_dir = storage_dir
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        self.queue_file = self.storage_dir / "transaction_queue.json"
        self._calls: list[QueuedCall] = []
        self._load()

    def _load(self) -> None:
        if not self.queue_file.exists():
            self._calls = []
            return

        try:
            with open(self.queue_file, "r") as f:
                data = json.load(f)

            version = data.get("version", 0)
            if version >= self.QUEUE_VERSION:
                self._calls = [QueuedCall.from_dict(c) for c in data.get("calls", [])]
            else:
                logger.warning("Transaction queue version mismatch, starting fresh")
                self._calls = []
        except (OSError, ValueError, KeyError) as e:
            logger.warning("Failed to load transaction queue: %s", e)
            self._calls = []

    def _save(self) -> None:
        data = {
            "version": self.QUEUE_VERSION,
            "calls": [c.to_dict() for c in self._calls],
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }
        with open(self.queue_file, "w") as f:
            json.dump(data, f, indent=2)

    def add(self, call: QueuedCall) -> str:
        self._calls.append(call)
        self._save()
        logger.info("Queued call %s (%s) on chain %d", call.id, call.function, call.chain_id)
        return call.id

    def clear(self) -> int:
        count = len(self._calls)
        self._calls = []
        self._save()
        logger.info("Cleared transaction queue (%d items)", count)
        return count

    def count(self) -> int:
        return len(self._calls)

    def is_empty(self) -> bool:
        return len(self._calls) == 0
