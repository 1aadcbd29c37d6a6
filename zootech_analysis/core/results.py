"""
Validation Result Classes.

This module defines the data-quality channel of the engine: dataclasses that
carry ``valid`` flags, errors, warnings and suggestions instead of raising.

- CrossValidationResult: one derived-index or plausibility rule applied to one row
- RowValidation: every rule that ran on a single row
- CrossValidationReport: dataset-level aggregation of cross-field checks
- MetricValidation: a value checked against a canonical metric's rules
- ValidationStatus / OverallStatus: reference-comparison classifications
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any
from enum import Enum


class Status(Enum):
    """
    Overall status of a dataset-level check.

    - PASSED: no errors and no warnings
    - WARNING: warnings only
    - FAILED: at least one error
    """
    PASSED = "PASSED"
    FAILED = "FAILED"
    WARNING = "WARNING"


class ValidationStatus(Enum):
    """
    Classification of a single value against a reference range.

    Ordered from best to worst inside the range, then the two out-of-range
    outcomes, then the absence of a benchmark.
    """
    EXCELLENT = "excellent"
    GOOD = "good"
    ACCEPTABLE = "acceptable"
    BELOW_MINIMUM = "below_minimum"
    ABOVE_MAXIMUM = "above_maximum"
    NO_REFERENCE = "no_reference"

    @property
    def is_out_of_range(self) -> bool:
        return self in (ValidationStatus.BELOW_MINIMUM, ValidationStatus.ABOVE_MAXIMUM)


class OverallStatus(Enum):
    """Aggregate status of several reference comparisons."""
    EXCELLENT = "excellent"
    GOOD = "good"
    ATTENTION = "attention"
    NO_DATA = "no_data"


@dataclass
class CrossValidationResult:
    """
    Outcome of one cross-field rule on one row.

    ``valid`` turns False as soon as an error is added; warnings and
    suggestions never change it.

    Attributes:
        valid: False when at least one error was recorded
        warnings: Suspicious but possible findings
        errors: Findings that indicate wrong data
        suggestions: Hints for the user (calculated values, things to check)

    Example:
        >>> result = CrossValidationResult()
        >>> result.add_error("Peso final menor que peso inicial")
        >>> result.valid
        False
    """

    valid: bool = True
    warnings: List[str] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        self.errors.append(message)
        self.valid = False

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def add_suggestion(self, message: str) -> None:
        self.suggestions.append(message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "warnings": list(self.warnings),
            "errors": list(self.errors),
            "suggestions": list(self.suggestions),
        }


@dataclass
class RowValidation:
    """
    All cross-field rules that ran on one input row.

    Attributes:
        row: 1-based row number in the input sequence
        validations: Rule name (gpd, fcr, iep, gpd_plausibility) -> result
    """

    row: int
    validations: Dict[str, CrossValidationResult] = field(default_factory=dict)

    @property
    def error_count(self) -> int:
        return sum(len(result.errors) for result in self.validations.values())

    @property
    def warning_count(self) -> int:
        return sum(len(result.warnings) for result in self.validations.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "row": self.row,
            "validations": {name: result.to_dict() for name, result in self.validations.items()},
        }


@dataclass
class CrossValidationReport:
    """
    Dataset-level cross-field validation report.

    Only rows where at least one rule ran are listed in ``results``.

    Attributes:
        species: Species the rows were validated for
        results: Per-row validations, in input order
        total_rows: Number of rows inspected
    """

    species: str
    results: List[RowValidation] = field(default_factory=list)
    total_rows: int = 0

    def add_row(self, row_validation: RowValidation) -> None:
        """Add a row's validations; rows without any rule are dropped."""
        if row_validation.validations:
            self.results.append(row_validation)

    @property
    def total_errors(self) -> int:
        return sum(row.error_count for row in self.results)

    @property
    def total_warnings(self) -> int:
        return sum(row.warning_count for row in self.results)

    @property
    def overall_valid(self) -> bool:
        return self.total_errors == 0

    @property
    def status(self) -> Status:
        if self.total_errors > 0:
            return Status.FAILED
        if self.total_warnings > 0:
            return Status.WARNING
        return Status.PASSED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "species": self.species,
            "overall_valid": self.overall_valid,
            "status": self.status.value,
            "total_rows": self.total_rows,
            "total_warnings": self.total_warnings,
            "total_errors": self.total_errors,
            "results": [row.to_dict() for row in self.results],
        }


@dataclass
class MetricValidation:
    """Result of checking a value against a canonical metric's rules."""

    valid: bool
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors)}
