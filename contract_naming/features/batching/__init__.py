"""Batching feature for contract naming.

This module provides:
- Validation of (address, name) requests against a parent domain
- Hierarchical grouping into dependency-ordered batches
- CSV import and template export
"""

from contract_naming.features.batching.csv_import import (
    CsvImportResult,
    load_csv,
    parse_csv,
    template_csv,
    write_template,
)
from contract_naming.features.batching.models import Batch, DomainNode, NamingRequest
from contract_naming.features.batching.service import (
    NameGraphBuilder,
    build,
    count_entries,
    flatten,
)
from contract_naming.features.batching.validators import (
    NamingValidationError,
    RequestValidator,
    ValidationIssue,
    validate_requests,
)

__all__ = [
    "Batch",
    "CsvImportResult",
    "DomainNode",
    "NameGraphBuilder",
    "NamingRequest",
    "NamingValidationError",
    "RequestValidator",
    "ValidationIssue",
    "build",
    "count_entries",
    "flatten",
    "load_csv",
    "parse_csv",
    "template_csv",
    "validate_requests",
    "write_template",
]
