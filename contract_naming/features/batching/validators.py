"""Planning-time validation of naming requests."""

from __future__ import annotations

from dataclasses import dataclass

from contract_naming.abi import ZERO_ADDRESS
from contract_naming.features.batching.models import NamingRequest
from contract_naming.validation import AddressValidator, NameValidator, ValidationResult


@dataclass(frozen=True)
class ValidationIssue:
    index: int
    field: str
    message: str

    def __str__(self) -> str:
        return f"Entry {self.index + 1} ({self.field}): {self.message}"


class NamingValidationError(ValueError):
    def __init__(self, issues: list[ValidationIssue] | str):
        if isinstance(issues, str):
            issues = [ValidationIssue(index=-1, field="request", message=issues)]
        self.issues = issues
        super().__init__("; ".join(str(i) if i.index >= 0 else i.message for i in issues))


class RequestValidator:
    @staticmethod
    def validate(requests: list[NamingRequest], parent: str) -> ValidationResult:
        """Check every request against the parent.

        On success the normalized value is the list of requests with full
        names and zero-address placeholders filled in. On failure the error
        message joins every issue found.
        """
        parent_result = NameValidator.validate_parent(parent)
        if not parent_result.is_valid:
            return ValidationResult(
                is_valid=False,
                error_message=parent_result.error_message,
                normalized_value=[
                    ValidationIssue(-1, "parent", parent_result.error_message or "")
                ],
            )
        parent = parent_result.normalized_value

        if not requests:
            return ValidationResult(
                is_valid=False,
                error_message="At least one entry is required",
                normalized_value=[
                    ValidationIssue(-1, "request", "At least one entry is required")
                ],
            )

        issues: list[ValidationIssue] = []
        normalized: list[NamingRequest] = []
        seen_names: dict[str, int] = {}
        seen_addresses: dict[str, int] = {}

        for index, request in enumerate(requests):
            address = (request.address or "").strip()
            if AddressValidator.is_zero(address):
                address = ZERO_ADDRESS
            else:
                address_result = AddressValidator.validate(address)
                if not address_result.is_valid:
                    issues.append(
                        ValidationIssue(index, "address", address_result.error_message or "")
                    )
                else:
                    key = address.lower()
                    if key in seen_addresses:
                        issues.append(
                            ValidationIssue(
                                index,
                                "address",
                                f"Duplicate address (also entry {seen_addresses[key] + 1})",
                            )
                        )
                    else:
                        seen_addresses[key] = index

            name_result = NameValidator.validate_subname(request.label, parent)
            if not name_result.is_valid:
                issues.append(ValidationIssue(index, "label", name_result.error_message or ""))
                continue

            full_name = name_result.normalized_value
            if full_name in seen_names:
                issues.append(
                    ValidationIssue(
                        index,
                        "label",
                        f'Duplicate name "{full_name}" (also entry {seen_names[full_name] + 1})',
                    )
                )
            else:
                seen_names[full_name] = index

            normalized.append(NamingRequest(address=address, label=full_name))

        if issues:
            return ValidationResult(
                is_valid=False,
                error_message="; ".join(str(i) for i in issues),
                normalized_value=issues,
            )

        return ValidationResult(is_valid=True, normalized_value=normalized)


def validate_requests(requests: list[NamingRequest], parent: str) -> list[NamingRequest]:
    result = RequestValidator.validate(requests, parent)
    if not result.is_valid:
        raise NamingValidationError(result.normalized_value)
    return result.normalized_value
