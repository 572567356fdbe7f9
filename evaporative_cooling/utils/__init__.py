"""
Shared utilities: exception hierarchy, error-handling decorator, constants and table I/O.
"""

from .exceptions import (
    EvaporativeCoolingException,
    ConfigurationError,
    DataValidationError,
    InsufficientAttributesError,
    ScorerFailureError,
    InternalConsistencyError,
    ParseError,
    InvalidRemovalCountError,
)
from .error_handling import handle_phase_errors

__all__ = [
    'EvaporativeCoolingException',
    'ConfigurationError',
    'DataValidationError',
    'InsufficientAttributesError',
    'ScorerFailureError',
    'InternalConsistencyError',
    'ParseError',
    'InvalidRemovalCountError',
    'handle_phase_errors',
]
