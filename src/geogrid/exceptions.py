"""Custom exceptions for the geogrid package."""


class GeoGridError(Exception):
    """Base exception for all geogrid errors."""
    pass


class InvalidStudyAreaError(GeoGridError):
    """Raised when study-area bounds are out of range or not ordered."""
    pass


class InvalidOffsetError(GeoGridError):
    """Raised when a row or column offset is not a positive number."""
    pass


class MalformedNumericInputError(GeoGridError):
    """Raised when a coordinate or offset value is not numeric."""
    pass


class ConfigurationError(GeoGridError):
    """Raised when a configuration file is unreadable or ill-typed."""
    pass


class NonConvergenceError(GeoGridError):
    """Raised when the longitude step cannot be fitted to the target band.

    Attributes
    ----------
    latitude : float
        Latitude of the row being resized.
    step : float
        Last longitude step tried, in degrees.
    distance : float
        Width in miles measured for ``step``.
    iterations : int
        Number of adjustments made before giving up.
    """

    def __init__(self, latitude: float, step: float, distance: float, iterations: int, reason: str = ""):
        self.latitude = latitude
        self.step = step
        self.distance = distance
        self.iterations = iterations
        message = (
            f"longitude step did not converge at latitude {latitude}: "
            f"step={step:.6f} deg, width={distance:.4f} mi after {iterations} iterations"
        )
        if reason:
            message = f"{message} ({reason})"
        super().__init__(message)
