"""
Errors raised by the zootechnical analysis engine.

Problems are reported on two channels:

    Structural errors (this module) are raised when an operation has nothing
    meaningful to return, e.g. a weight column without a single number or
    x/y arrays of different lengths.

    Data-quality findings (implausible GPD, value below the NRC minimum, ...)
    are returned as result objects from core.results and never raise.

Every error carries an ErrorSeverity so the CLI can decide whether to abort
the run, skip the file or keep going.
"""

from typing import Optional, Dict, Any, List
from enum import Enum


class ErrorSeverity(Enum):
    """
    How far an error should propagate.

    FATAL aborts the run (broken configuration), CRITICAL abandons the
    current input file, RECOVERABLE abandons one computation and WARNING
    is only logged.
    """
    FATAL = "fatal"
    CRITICAL = "critical"
    RECOVERABLE = "recoverable"
    WARNING = "warning"


class ZootechAnalysisError(Exception):
    """
    Root of every error raised by zootech_analysis.

    Attributes:
        message: Portuguese message shown to the user
        severity: ErrorSeverity of the failure
        details: Context for logs and JSON output (column, group sizes, ...)
        original_exception: Wrapped lower-level exception, if any

    Example:
        >>> raise ZootechAnalysisError(
        ...     "Falha ao processar a coluna peso",
        ...     details={'column': 'peso'}
        ... )
    """

    def __init__(
        self,
        message: str,
        severity: ErrorSeverity = ErrorSeverity.RECOVERABLE,
        details: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.severity = severity
        self.details = details or {}
        self.original_exception = original_exception

    def to_dict(self) -> Dict[str, Any]:
        """JSON-safe representation used by the CLI debug log."""
        return {
            'type': self.__class__.__name__,
            'message': self.message,
            'severity': self.severity.value,
            'details': self.details,
            'original_error': str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Configuration
# ============================================================================

class ConfigError(ZootechAnalysisError):
    """
    The YAML configuration cannot be used; the run stops.

    Covers a missing file, unparsable YAML and values outside their range.
    ``field`` names the offending key ('cross_validation.gpd_tolerance').
    """

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            message,
            severity=ErrorSeverity.FATAL,
            details={'field': field} if field else {}
        )
        self.field = field


class YAMLSizeError(ConfigError):
    """Configuration file larger than MAX_YAML_FILE_SIZE."""

    def __init__(self, message: str, file_size: Optional[int] = None, max_size: Optional[int] = None):
        super().__init__(message)
        self.details.update({
            'file_size': file_size,
            'max_size': max_size
        })


class ConfigValidationError(ConfigError):
    """
    Parsed YAML with an unknown section or an out-of-range value.

    Example:
        >>> raise ConfigValidationError(
        ...     "Nível de confiança não suportado: 0.8",
        ...     field="analysis.confidence_level",
        ...     expected="0.90, 0.95, 0.99",
        ...     actual="0.8"
        ... )
    """

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        expected: Optional[str] = None,
        actual: Optional[str] = None
    ):
        super().__init__(message, field)
        self.details.update({
            'expected': expected,
            'actual': actual
        })


# ============================================================================
# Input files
# ============================================================================

class DataLoadError(ZootechAnalysisError):
    """
    A CSV file could not be read into row records.

    Raised by the command-line loaders only; the analysis functions receive
    rows that are already in memory.
    """

    def __init__(
        self,
        message: str,
        file_path: str,
        original_exception: Optional[Exception] = None
    ):
        super().__init__(
            message,
            severity=ErrorSeverity.CRITICAL,
            details={'file_path': file_path},
            original_exception=original_exception
        )
        self.file_path = file_path


class UnsupportedFormatError(DataLoadError):
    """File extension is not one of the supported tabular formats."""

    def __init__(self, file_path: str, file_format: str, supported: List[str]):
        super().__init__(
            f"Formato não suportado '{file_format}'. Formatos aceitos: {', '.join(supported)}",
            file_path
        )
        self.details.update({
            'format': file_format,
            'supported_formats': supported
        })


# ============================================================================
# Parameters
# ============================================================================

class ParameterValidationError(ZootechAnalysisError):
    """
    Invalid argument passed to an analysis operation.

    Example:
        >>> raise ParameterValidationError(
        ...     "Nível de confiança não suportado: 0.8",
        ...     parameter="confidence_level",
        ...     value=0.8
        ... )
    """

    def __init__(self, message: str, parameter: str, value: Any):
        super().__init__(
            message,
            severity=ErrorSeverity.RECOVERABLE,
            details={'parameter': parameter, 'value': value}
        )
        self.parameter = parameter
        self.value = value


# ============================================================================
# Statistical inputs
# ============================================================================

class StatisticalInputError(ZootechAnalysisError):
    """
    Base class for inputs a statistical routine cannot work with at all.

    These are programmer-error-class failures (malformed call, empty required
    dataset). They propagate to the caller unchanged; retrying the same pure
    computation cannot succeed.

    Attributes:
        operation (str): Name of the routine that rejected its input
    """

    def __init__(self, message: str, operation: str, details: Optional[Dict[str, Any]] = None):
        merged = {'operation': operation}
        merged.update(details or {})
        super().__init__(message, severity=ErrorSeverity.RECOVERABLE, details=merged)
        self.operation = operation


class NoValidNumericValuesError(StatisticalInputError):
    """No value in the input could be parsed as a number."""

    def __init__(self, operation: str = "calculate_numeric_stats", total_values: int = 0):
        super().__init__(
            "Nenhum valor numérico válido",
            operation,
            {'total_values': total_values}
        )


class LengthMismatchError(StatisticalInputError):
    """Paired inputs (x/y, before/after) differ in length."""

    def __init__(self, message: str, operation: str, left_length: int, right_length: int):
        super().__init__(
            message,
            operation,
            {'left_length': left_length, 'right_length': right_length}
        )


class InsufficientDataError(StatisticalInputError):
    """Fewer observations than the statistic requires."""

    def __init__(self, message: str, operation: str, required: int, actual: int):
        super().__init__(
            message,
            operation,
            {'required': required, 'actual': actual}
        )


class InsufficientGroupsError(StatisticalInputError):
    """Group comparison called with fewer than two groups."""

    def __init__(self, operation: str = "one_way_anova", actual: int = 0):
        super().__init__(
            "São necessários pelo menos 2 grupos",
            operation,
            {'required': 2, 'actual': actual}
        )


class EmptyDatasetError(StatisticalInputError):
    """Dataset analysis called without any rows."""

    def __init__(self, operation: str = "analyze_dataset"):
        super().__init__("Dataset vazio", operation)
