class NotFoundException(Exception):
    def __init__(self, resource: str, identifier: str, status_code: int = 404):
        self.resource = resource
        self.identifier = identifier
        self.status_code = status_code

    def __str__(self):
        return f"{self.resource} '{self.identifier}' not found"


class CancellationNotAllowed(Exception):
    pass


class BookingStateConflict(Exception):
    pass


class CalculationError(Exception):
    """Base class for refund and invoice calculation failures."""


class InvalidDateRange(CalculationError):
    pass


class InvalidAmount(CalculationError):
    pass


class InvalidPercent(CalculationError):
    pass


class InvalidRefundPolicy(CalculationError):
    pass


class TotalsMismatch(CalculationError):
    pass


class MissingPriceConfiguration(CalculationError):
    def __init__(self, category: str):
        self.category = category

    def __str__(self):
        return f"no per-guest meal price configured for '{self.category}'"
