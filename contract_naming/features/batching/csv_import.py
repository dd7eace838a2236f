"""CSV import and template export for batch naming."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field
from pathlib import Path

from contract_naming.features.batching.models import NamingRequest
from contract_naming.validation import AddressValidator

logger = logging.getLogger(__name__)

TEMPLATE_ROWS = [
    ("address", "name"),
    ("0x1234567890123456789012345678901234567890", "vault"),
    ("0x2345678901234567890123456789012345678901", "api.v1"),
    ("0x3456789012345678901234567890123456789012", "treasury.dao"),
]


@dataclass
class CsvRowError:
    line: int
    message: str

    def __str__(self) -> str:
        return f"Line {self.line}: {self.message}"


@dataclass
class CsvImportResult:
    requests: list[NamingRequest] = field(default_factory=list)
    errors: list[CsvRowError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors


def _clean(value: str) -> str:
    return value.strip().strip("\"'").strip()


def parse_csv(text: str) -> CsvImportResult:
    """Parse ``address,name`` rows. A first row mentioning "address" is a header."""
    result = CsvImportResult()
    rows = [row for row in csv.reader(io.StringIO(text)) if any(cell.strip() for cell in row)]
    if rows and "address" in ",".join(rows[0]).lower():
        rows = rows[1:]
        offset = 2
    else:
        offset = 1

    for index, row in enumerate(rows):
        line = index + offset
        if len(row) < 2:
            result.errors.append(CsvRowError(line, "Expected two columns: address, name"))
            continue

        address, name = _clean(row[0]), _clean(row[1])
        if not name:
            result.errors.append(CsvRowError(line, "Name is empty"))
            continue

        if not AddressValidator.is_zero(address):
            address_result = AddressValidator.validate(address)
            if not address_result.is_valid:
                result.errors.append(CsvRowError(line, address_result.error_message or ""))
                continue

        result.requests.append(NamingRequest(address=address, label=name))

    logger.info(
        "Parsed %d naming requests from CSV (%d errors)",
        len(result.requests),
        len(result.errors),
    )
    return result


def load_csv(path: str | Path) -> CsvImportResult:
    with open(path, "r", encoding="utf-8-sig", newline="") as f:
        return parse_csv(f.read())


def template_csv() -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(TEMPLATE_ROWS)
    return buffer.getvalue()


def write_template(path: str | Path) -> Path:
    target = Path(path)
    target.write_text(template_csv(), encoding="utf-8")
    return target
