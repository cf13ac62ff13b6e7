"""
Engine error types.

Two kinds of failure exist:
  - Validation problems the caller can correct (missing fields, negative
    amounts, bad dates). These are collected into a ValidationResult and
    returned, never raised.
  - Invariant violations passed straight into a calculator. These raise
    InvalidInputError and abort the computation; no partial result is built.
"""

from dataclasses import dataclass, field


class InvalidInputError(ValueError):
    """Raised when a calculator receives input that breaks its preconditions."""


@dataclass
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: list[str]) -> "ValidationResult":
        return cls(valid=len(errors) == 0, errors=list(errors))


def get_field(data, *names):
    """First non-None value among `names` (snake_case and camelCase spellings)."""
    for name in names:
        value = data.get(name)
        if value is not None:
            return value
    return None


def is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)
