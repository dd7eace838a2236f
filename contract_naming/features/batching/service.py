"""Hierarchical batching of naming requests."""

from __future__ import annotations

import logging

from contract_naming.abi import ZERO_ADDRESS
from contract_naming.features.batching.models import Batch, DomainNode, NamingRequest
from contract_naming.features.batching.validators import NamingValidationError

logger = logging.getLogger(__name__)


def normalize_full_name(label: str, root_parent: str) -> str:
    name = label.strip().lower()
    if name == root_parent or name.endswith(f".{root_parent}"):
        return name
    return f"{name}.{root_parent}"


def label_count(name: str) -> int:
    return len(name.split("."))


class NameGraphBuilder:
    """Turns naming requests into dependency-ordered batches.

    Every batch holds the entries that share one level and one immediate
    parent. Missing ancestors between an entry and the root parent are
    added as zero-address placeholders, so a parent is always created in an
    earlier batch than its children.
    """

    def __init__(self, root_parent: str):
        root = (root_parent or "").strip().lower()
        if not root or any(not part for part in root.split(".")):
            raise NamingValidationError("Parent domain is required")
        self.root_parent = root
        self._root_levels = label_count(root)

    def level_of(self, full_name: str) -> int:
        return label_count(full_name) - self._root_levels

    def immediate_parent_of(self, full_name: str) -> str:
        if self.level_of(full_name) == 1:
            return self.root_parent
        return full_name.split(".", 1)[1]

    def _node(self, full_name: str, source: NamingRequest) -> DomainNode:
        return DomainNode(
            full_name=full_name,
            level=self.level_of(full_name),
            immediate_parent=self.immediate_parent_of(full_name),
            source=source,
        )

    def collect_nodes(self, requests: list[NamingRequest]) -> dict[str, DomainNode]:
        nodes: dict[str, DomainNode] = {}
        for request in requests:
            full_name = normalize_full_name(request.label, self.root_parent)
            level = self.level_of(full_name)
            if level <= 0:
                raise NamingValidationError(
                    f'"{request.label}" is not below the parent domain "{self.root_parent}"'
                )
            nodes[full_name] = self._node(
                full_name, NamingRequest(address=request.address, label=full_name)
            )

        for full_name in list(nodes):
            ancestor = full_name.split(".", 1)[1]
            while ancestor != self.root_parent:
                if ancestor not in nodes:
                    nodes[ancestor] = self._node(
                        ancestor, NamingRequest(address=ZERO_ADDRESS, label=ancestor)
                    )
                    logger.debug("Added placeholder ancestor %s", ancestor)
                ancestor = ancestor.split(".", 1)[1]

        return nodes

    def build(self, requests: list[NamingRequest]) -> list[Batch]:
        groups: dict[tuple[int, str], list[DomainNode]] = {}
        for node in self.collect_nodes(requests).values():
            groups.setdefault((node.level, node.immediate_parent), []).append(node)

        batches = [
            Batch(
                immediate_parent=parent,
                level=level,
                entries=tuple(sorted(entries, key=lambda n: n.full_name)),
            )
            for (level, parent), entries in groups.items()
        ]
        batches.sort(key=lambda b: (b.level, b.immediate_parent))
        return batches


def build(requests: list[NamingRequest], root_parent: str) -> list[Batch]:
    return NameGraphBuilder(root_parent).build(requests)


def flatten(batches: list[Batch]) -> list[NamingRequest]:
    return [entry.source for batch in batches for entry in batch.entries]


def count_entries(batches: list[Batch]) -> tuple[int, int]:
    """Return (real contracts, placeholder subnames) across all batches."""
    real = sum(len(batch.real_entries) for batch in batches)
    total = sum(len(batch) for batch in batches)
    return real, total - real
