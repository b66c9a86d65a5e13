"""Transaction validation package."""

from src.validation.validator import TransactionValidator, contains_injection_pattern

__all__ = ["TransactionValidator", "contains_injection_pattern"]
