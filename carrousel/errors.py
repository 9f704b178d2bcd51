"""
Error types raised by Carrousel.

Every error carries an ``is_retryable`` flag so the display driver can tell
a recoverable scheduling condition from a fault that must stop rotation.
"""

from typing import Optional


class CarrouselError(Exception):
    """Base class for Carrousel errors."""

    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        is_retryable: Optional[bool] = None,
        original_error: Optional[Exception] = None,
    ):
        super().__init__(message)
        if is_retryable is not None:
            self.is_retryable = is_retryable
        self.original_error = original_error


class ConfigurationError(CarrouselError):
    """The content catalog or configuration file is invalid."""


class DistributionIntegrityError(CarrouselError):
    """Cumulative selection probability does not add up to 1."""

    def __init__(self, total_mass: float, tolerance: float):
        super().__init__(
            f"Cumulative selection probability is {total_mass!r}, "
            f"expected 1 +/- {tolerance}",
            is_retryable=False,
        )
        self.total_mass = total_mass
        self.tolerance = tolerance


class DegenerateDistributionError(CarrouselError):
    """No entry has a positive weight, so nothing can be drawn."""

    is_retryable = True

    def __init__(self, entry_count: int):
        super().__init__(
            f"All {entry_count} entries have zero eligible weight"
        )
        self.entry_count = entry_count
