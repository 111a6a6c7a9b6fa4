"""Exceptions raised by the substitutability checker."""


class SubstitutabilityError(Exception):
    """Base class for checker failures."""
    pass


class ConfigurationError(SubstitutabilityError):
    """Raised when declarations cannot be resolved (cycles, unknown parents, bad rules)."""
    pass


class InsufficientSamplesError(SubstitutabilityError, ValueError):
    """Raised when too few sample inputs are supplied to validate an operation."""
    pass
