"""Ownership feature: read-only probes that classify target contracts."""

from contract_naming.features.ownership.service import (
    ContractOwnership,
    OwnershipProbe,
    OwnershipStatus,
    ProbeReport,
)

__all__ = [
    "ContractOwnership",
    "OwnershipProbe",
    "OwnershipStatus",
    "ProbeReport",
]
