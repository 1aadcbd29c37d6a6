"""
Tests for the data-quality result classes.

Covers CrossValidationResult, RowValidation and CrossValidationReport
aggregation, plus the reference-comparison status enums.
"""

import pytest

from zootech_analysis.core.results import (
    CrossValidationResult,
    RowValidation,
    CrossValidationReport,
    MetricValidation,
    Status,
    ValidationStatus,
    OverallStatus,
)


@pytest.fixture
def failing_result():
    result = CrossValidationResult()
    result.add_error("GPD reportado difere significativamente")
    result.add_suggestion("Verifique os pesos")
    return result


@pytest.fixture
def warning_result():
    result = CrossValidationResult()
    result.add_warning("Valor incomumente alto")
    return result


# ============================================================================
# CROSS VALIDATION RESULT TESTS
# ============================================================================

@pytest.mark.unit
class TestCrossValidationResult:
    """Test CrossValidationResult."""

    def test_new_result_is_valid(self):
        """A fresh result is valid and empty."""
        result = CrossValidationResult()

        assert result.valid is True
        assert result.errors == []
        assert result.warnings == []
        assert result.suggestions == []

    def test_error_invalidates(self, failing_result):
        """Adding an error flips valid to False."""
        assert failing_result.valid is False
        assert len(failing_result.errors) == 1

    def test_warning_keeps_valid(self, warning_result):
        """Warnings never change validity."""
        assert warning_result.valid is True
        assert warning_result.warnings == ["Valor incomumente alto"]

    def test_to_dict(self, failing_result):
        """Serialization exposes all four fields."""
        data = failing_result.to_dict()

        assert data == {
            "valid": False,
            "warnings": [],
            "errors": ["GPD reportado difere significativamente"],
            "suggestions": ["Verifique os pesos"],
        }

    def test_results_do_not_share_lists(self):
        """Each result owns its lists."""
        first = CrossValidationResult()
        second = CrossValidationResult()
        first.add_warning("x")

        assert second.warnings == []


# ============================================================================
# REPORT TESTS
# ============================================================================

@pytest.mark.unit
class TestCrossValidationReport:
    """Test dataset-level aggregation."""

    def test_rows_without_rules_are_dropped(self):
        """add_row skips rows where no rule ran."""
        report = CrossValidationReport(species="bovine", total_rows=2)
        report.add_row(RowValidation(row=1))

        assert report.results == []
        assert report.status == Status.PASSED

    def test_counts_and_status(self, failing_result, warning_result):
        """Errors and warnings are summed over every row and rule."""
        report = CrossValidationReport(species="bovine", total_rows=2)
        report.add_row(RowValidation(row=1, validations={'gpd': failing_result}))
        report.add_row(RowValidation(row=2, validations={'gpd_plausibility': warning_result}))

        assert report.total_errors == 1
        assert report.total_warnings == 1
        assert report.overall_valid is False
        assert report.status == Status.FAILED

    def test_warning_status(self, warning_result):
        """Warnings only give WARNING."""
        report = CrossValidationReport(species="swine")
        report.add_row(RowValidation(row=3, validations={'fcr': warning_result}))

        assert report.overall_valid is True
        assert report.status == Status.WARNING

    def test_to_dict(self, failing_result):
        """Serialization nests rows and rule names."""
        report = CrossValidationReport(species="poultry", total_rows=1)
        report.add_row(RowValidation(row=1, validations={'iep': failing_result}))

        data = report.to_dict()

        assert data['species'] == "poultry"
        assert data['status'] == "FAILED"
        assert data['results'][0]['row'] == 1
        assert data['results'][0]['validations']['iep']['valid'] is False


@pytest.mark.unit
class TestStatusEnums:
    """Test reference-comparison enums."""

    def test_validation_status_values(self):
        """Values match the serialized status names."""
        assert [s.value for s in ValidationStatus] == [
            "excellent", "good", "acceptable", "below_minimum", "above_maximum", "no_reference"
        ]

    def test_out_of_range(self):
        """Only the two bound violations are out of range."""
        assert ValidationStatus.BELOW_MINIMUM.is_out_of_range
        assert ValidationStatus.ABOVE_MAXIMUM.is_out_of_range
        assert not ValidationStatus.ACCEPTABLE.is_out_of_range
        assert not ValidationStatus.NO_REFERENCE.is_out_of_range

    def test_overall_status_values(self):
        """Overall statuses serialize in lowercase."""
        assert OverallStatus.ATTENTION.value == "attention"
        assert OverallStatus.NO_DATA.value == "no_data"

    def test_metric_validation_to_dict(self):
        """MetricValidation serializes its errors."""
        assert MetricValidation(valid=False, errors=["x"]).to_dict() == {"valid": False, "errors": ["x"]}
