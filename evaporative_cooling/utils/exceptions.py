"""
Custom exception hierarchy for the Evaporative Cooling feature selection system.
"""
from typing import Optional


class EvaporativeCoolingException(Exception):
    """Base exception for all system errors."""

    def __init__(self, message: str, phase: Optional[str] = None, iteration: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.phase = phase
        self.iteration = iteration
        self.reported = False

    def annotate(self, phase: Optional[str], iteration: Optional[int]) -> 'EvaporativeCoolingException':
        """Attach the failing phase and iteration unless already set by an inner frame."""
        if self.phase is None:
            self.phase = phase
        if self.iteration is None:
            self.iteration = iteration
        return self

    def __str__(self) -> str:
        if self.phase is None and self.iteration is None:
            return self.message
        context = []
        if self.phase is not None:
            context.append(f"phase={self.phase}")
        if self.iteration is not None:
            context.append(f"iteration={self.iteration}")
        return f"[{', '.join(context)}] {self.message}"


class ConfigurationError(EvaporativeCoolingException):
    """Configuration validation failed."""
    pass


class DataValidationError(EvaporativeCoolingException):
    """Data validation failed."""
    pass


class InsufficientAttributesError(EvaporativeCoolingException):
    """The dataset has no more attributes than the requested target."""
    pass


class ScorerFailureError(EvaporativeCoolingException):
    """A main-effects or interaction learner failed."""
    pass


class InternalConsistencyError(EvaporativeCoolingException):
    """Paired score sets disagree on size or attribute identity."""
    pass


class ParseError(EvaporativeCoolingException):
    """A variable importance record could not be parsed."""
    pass


class InvalidRemovalCountError(EvaporativeCoolingException):
    """Elimination request is out of bounds."""
    pass
