"""Input validation utilities for contract addresses and ENS names."""

import re
from dataclasses import dataclass
from typing import Any

from contract_naming.abi import ZERO_ADDRESS


@dataclass
class ValidationResult:
    is_valid: bool
    error_message: str | None = None
    normalized_value: Any = None


ADDRESS_PATTERN = re.compile(r"^0x[0-9a-fA-F]{40}$")
LABEL_PATTERN = re.compile(r"^[a-z0-9_\-]+$")
MAX_LABEL_LENGTH = 63


class AddressValidator:
    @staticmethod
    def validate(address: str) -> ValidationResult:
        if not address or not address.strip():
            return ValidationResult(
                is_valid=False,
                error_message="Address is required",
            )

        normalized = address.strip()

        if not normalized.lower().startswith("0x"):
            return ValidationResult(
                is_valid=False,
                error_message="Address must start with 0x",
            )

        if len(normalized) != 42:
            return ValidationResult(
                is_valid=False,
                error_message=f"Address must be 42 characters (got {len(normalized)})",
            )

        if not ADDRESS_PATTERN.match(normalized):
            return ValidationResult(
                is_valid=False,
                error_message="Address contains invalid characters",
            )

        return ValidationResult(is_valid=True, normalized_value=normalized)

    @staticmethod
    def is_zero(address: str | None) -> bool:
        return not address or address.strip().lower() == ZERO_ADDRESS


class NameValidator:
    @staticmethod
    def validate_label(label: str) -> ValidationResult:
        if not label:
            return ValidationResult(
                is_valid=False,
                error_message="Label cannot be empty",
            )

        if len(label) > MAX_LABEL_LENGTH:
            return ValidationResult(
                is_valid=False,
                error_message=f"Label exceeds {MAX_LABEL_LENGTH} characters",
            )

        if not LABEL_PATTERN.match(label):
            return ValidationResult(
                is_valid=False,
                error_message=f'Label "{label}" can only contain a-z, 0-9, _ and -',
            )

        if label.startswith("-") or label.endswith("-"):
            return ValidationResult(
                is_valid=False,
                error_message=f'Label "{label}" cannot start or end with a hyphen',
            )

        return ValidationResult(is_valid=True, normalized_value=label)

    @classmethod
    def validate_name(cls, name: str) -> ValidationResult:
        if not name or not name.strip():
            return ValidationResult(
                is_valid=False,
                error_message="Name is required",
            )

        normalized = name.strip().lower()
        for label in normalized.split("."):
            result = cls.validate_label(label)
            if not result.is_valid:
                return result

        return ValidationResult(is_valid=True, normalized_value=normalized)

    @classmethod
    def validate_parent(cls, parent: str) -> ValidationResult:
        if not parent or not parent.strip():
            return ValidationResult(
                is_valid=False,
                error_message="Parent domain is required",
            )

        result = cls.validate_name(parent)
        if not result.is_valid:
            return ValidationResult(
                is_valid=False,
                error_message=f"Invalid parent domain: {result.error_message}",
            )
        return result

    @classmethod
    def validate_subname(cls, label: str, parent: str) -> ValidationResult:
        """Validate a relative or fully qualified label against its parent.

        Input that already ends with the parent is taken as a full name,
        anything else is placed below the parent. The normalized value is
        the full name.
        """
        if not label or not label.strip():
            return ValidationResult(
                is_valid=False,
                error_message="Label is required",
            )

        normalized = label.strip().lower()
        parent = parent.strip().lower()

        if normalized == parent:
            return ValidationResult(
                is_valid=False,
                error_message=f'Name "{normalized}" is the parent domain itself',
            )

        if normalized.endswith(f".{parent}"):
            full_name = normalized
        else:
            full_name = f"{normalized}.{parent}"

        relative = full_name[: -(len(parent) + 1)]
        for part in relative.split("."):
            result = cls.validate_label(part)
            if not result.is_valid:
                return result

        return ValidationResult(is_valid=True, normalized_value=full_name)
