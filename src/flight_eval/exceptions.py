"""Custom exceptions for the application."""


class FlightEvalError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class UnrecognizedAircraftCodeError(FlightEvalError):
    """Raised when an ICAO aircraft code has no canonical display name."""

    def __init__(self, code: str):
        super().__init__(
            f"Unrecognized aircraft code: {code!r}", {"code": code}
        )
        self.code = code


class DatasetLoadError(FlightEvalError):
    """Raised when the ground-truth dataset cannot be loaded."""

    pass


class ExtractionProviderError(FlightEvalError):
    """Raised when the extraction provider fails to produce a record."""

    pass


class ScoringPolicyError(FlightEvalError):
    """Raised when a scoring policy is invalid or cannot be loaded."""

    pass


class EvaluationError(FlightEvalError):
    """Raised when evaluation fails."""

    pass
