"""Custom exception hierarchy for tenancy-engine."""


class TenancyEngineError(Exception):
    """Base exception for all tenancy-engine errors."""


class PreconditionError(TenancyEngineError):
    """Raised when required input data is not available for a calculation."""


class EntityNotFoundError(PreconditionError):
    """Raised when a referenced entity does not exist."""


class CatalogNotFoundError(EntityNotFoundError):
    """Raised when no meter catalog is configured for an address."""


class DuplicateReadingError(PreconditionError):
    """Raised when a second reading is stored for the same meter, apartment and period."""


class InvalidReadingStateError(PreconditionError):
    """Raised when a reading is not in a state that allows the operation."""


class ContractViolationError(TenancyEngineError):
    """Raised when a caller passes input that can only produce a wrong number."""


class InvalidPeriodError(ContractViolationError):
    """Raised when a period identifier is not of the form YYYY-MM."""


class ConfigurationError(TenancyEngineError):
    """Raised when configuration is invalid or missing."""


class SinkError(TenancyEngineError):
    """Raised when a sink operation fails."""
