"""Data types shared by the batching feature."""

from __future__ import annotations

from dataclasses import dataclass, field

from contract_naming.abi import ZERO_ADDRESS


@dataclass(frozen=True)
class NamingRequest:
    address: str
    label: str

    @property
    def is_placeholder(self) -> bool:
        return not self.address or self.address.lower() == ZERO_ADDRESS


@dataclass(frozen=True)
class DomainNode:
    full_name: str
    level: int
    immediate_parent: str
    source: NamingRequest

    @property
    def label(self) -> str:
        return self.full_name.split(".", 1)[0]

    @property
    def address(self) -> str:
        return self.source.address

    @property
    def is_placeholder(self) -> bool:
        return self.source.is_placeholder


@dataclass(frozen=True)
class Batch:
    immediate_parent: str
    level: int
    entries: tuple[DomainNode, ...] = field(default_factory=tuple)

    @property
    def labels(self) -> list[str]:
        return [entry.label for entry in self.entries]

    @property
    def addresses(self) -> list[str]:
        return [entry.address for entry in self.entries]

    @property
    def real_entries(self) -> list[DomainNode]:
        return [entry for entry in self.entries if not entry.is_placeholder]

    def __len__(self) -> int:
        return len(self.entries)
