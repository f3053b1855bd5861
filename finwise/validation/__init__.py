"""Record validation package."""

from finwise.validation.validator import (
    InvalidAmountError,
    RecordValidationError,
    RecordValidator,
    parse_amount,
    parse_date,
)

__all__ = [
    "InvalidAmountError",
    "RecordValidationError",
    "RecordValidator",
    "parse_amount",
    "parse_date",
]
