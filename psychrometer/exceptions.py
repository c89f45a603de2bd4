"""Psychrometer Exception Hierarchy.

Exceptions raised by the psychrometric engine carry rich error context so a
sampling loop can log, retry or surface an "unavailable" status without
inspecting message strings.

Exception Hierarchy:
    PsychrometerException (base)
    ├── ConfigurationError
    └── CalculationException
        ├── InvalidInputError
        ├── NumericSingularityError
        └── ConvergenceFailureError

All exceptions include:
- error_code: Unique error identifier
- context: Dictionary with error-specific details
- timestamp: When the error occurred

Example:
    >>> from psychrometer.exceptions import InvalidInputError
    >>> raise InvalidInputError(
    ...     message="Dry-bulb temperature is not finite",
    ...     field="dry_bulb_c",
    ...     value=float("nan"),
    ... )
"""

import json
import re
from datetime import datetime
from typing import Any, Dict, Optional


# ==============================================================================
# Base Exception
# ==============================================================================

class PsychrometerException(Exception):
    """Base exception for all psychrometer errors.

    Attributes:
        message: Human-readable error message
        error_code: Unique error identifier (e.g., "PSY_CALC_INVALID_INPUT_ERROR")
        context: Dictionary with error-specific details
        timestamp: When the error occurred
    """

    ERROR_PREFIX = "PSY"

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize exception with rich context.

        Args:
            message: Human-readable error message
            error_code: Unique error identifier (auto-generated if not provided)
            context: Dictionary with error-specific details
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._generate_error_code()
        self.context = context or {}
        self.timestamp = datetime.now()

    def _generate_error_code(self) -> str:
        """Generate error code from the exception class name.

        Returns:
            Error code like "PSY_CALC_CONVERGENCE_FAILURE_ERROR"
        """
        error_type = re.sub(r'(?<!^)(?=[A-Z])', '_', self.__class__.__name__).upper()
        return f"{self.ERROR_PREFIX}_{error_type}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_code": self.error_code,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
        }

    def to_json(self) -> str:
        """Convert exception to JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    def __str__(self) -> str:
        return f"[{self.error_code}] - {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message='{self.message}', "
            f"error_code='{self.error_code}')"
        )


class ConfigurationError(PsychrometerException):
    """Engine configuration is invalid or could not be loaded.

    Example:
        >>> raise ConfigurationError(
        ...     message="Invalid atmospheric pressure",
        ...     source="env",
        ...     context={"value": "-3"}
        ... )
    """

    ERROR_PREFIX = "PSY_CONFIG"

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        source: Optional[str] = None,
    ):
        context = context or {}
        if source:
            context["source"] = source
        super().__init__(message, context=context)


# ==============================================================================
# Calculation Exceptions
# ==============================================================================

class CalculationException(PsychrometerException):
    """Base exception for failures inside the psychrometric engine.

    Every subclass is a local, recoverable condition: the engine never
    terminates the process.
    """

    ERROR_PREFIX = "PSY_CALC"


class InvalidInputError(CalculationException):
    """A temperature is non-finite or outside the plausible sensor range.

    Raised before any formula is evaluated.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        field: Optional[str] = None,
        value: Optional[float] = None,
    ):
        context = context or {}
        if field:
            context["field"] = field
        if value is not None:
            context["value"] = value
        super().__init__(message, context=context)


class NumericSingularityError(CalculationException):
    """A formula denominator vanished (or changed sign where it must not).

    Example:
        >>> raise NumericSingularityError(
        ...     message="Saturation pressure reaches total pressure",
        ...     quantity="saturated_absolute_humidity",
        ...     denominator=0.0,
        ... )
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        quantity: Optional[str] = None,
        denominator: Optional[float] = None,
    ):
        context = context or {}
        if quantity:
            context["quantity"] = quantity
        if denominator is not None:
            context["denominator"] = denominator
        super().__init__(message, context=context)


class ConvergenceFailureError(CalculationException):
    """The dew-point bisection hit its iteration cap or a non-finite value.

    Callers may retry with a wider seed bracket.
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        iterations: Optional[int] = None,
        target_pressure_pa: Optional[float] = None,
    ):
        context = context or {}
        if iterations is not None:
            context["iterations"] = iterations
        if target_pressure_pa is not None:
            context["target_pressure_pa"] = target_pressure_pa
        super().__init__(message, context=context)


# ==============================================================================
# Utility Functions
# ==============================================================================

def format_exception_chain(exc: Exception) -> str:
    """Format exception chain for logging/display.

    Args:
        exc: Exception to format

    Returns:
        Formatted string with full exception chain
    """
    lines = []
    current = exc

    while current is not None:
        if isinstance(current, PsychrometerException):
            lines.append(str(current))
            lines.append(f"  Context: {current.context}")
        else:
            lines.append(f"{type(current).__name__}: {current}")

        current = getattr(current, "__cause__", None)

    return "\n".join(lines)


def is_retriable(exc: Exception) -> bool:
    """Check if a failed reading is worth retrying.

    Only a convergence failure can change outcome on retry (with a wider
    bracket); bad input and singular formulas are deterministic.

    Args:
        exc: Exception to check

    Returns:
        True if operation should be retried
    """
    if isinstance(exc, ConvergenceFailureError):
        return True
    return False


__all__ = [
    "PsychrometerException",
    "ConfigurationError",
    "CalculationException",
    "InvalidInputError",
    "NumericSingularityError",
    "ConvergenceFailureError",
    "format_exception_chain",
    "is_retriable",
]
