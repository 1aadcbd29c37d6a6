"""
Unit tests for the exception hierarchy.

Covers severity classification, serialization and the structural
statistical errors raised by the analysis routines.
"""

import pytest
from zootech_analysis.core.exceptions import (
    ZootechAnalysisError,
    ErrorSeverity,
    ConfigError,
    YAMLSizeError,
    ConfigValidationError,
    DataLoadError,
    UnsupportedFormatError,
    ParameterValidationError,
    StatisticalInputError,
    NoValidNumericValuesError,
    LengthMismatchError,
    InsufficientDataError,
    InsufficientGroupsError,
    EmptyDatasetError,
)


@pytest.mark.unit
class TestErrorSeverity:
    """Test error severity enum."""

    def test_severity_values(self):
        """All severity levels exist with lowercase values."""
        assert ErrorSeverity.FATAL.value == "fatal"
        assert ErrorSeverity.CRITICAL.value == "critical"
        assert ErrorSeverity.RECOVERABLE.value == "recoverable"
        assert ErrorSeverity.WARNING.value == "warning"


@pytest.mark.unit
class TestZootechAnalysisError:
    """Test base exception class."""

    def test_basic_exception(self):
        """Defaults: recoverable, no details, no original exception."""
        exc = ZootechAnalysisError("Falha")

        assert str(exc) == "Falha"
        assert exc.message == "Falha"
        assert exc.severity == ErrorSeverity.RECOVERABLE
        assert exc.details == {}
        assert exc.original_exception is None

    def test_exception_serialization(self):
        """to_dict() carries type, message, severity, details and the wrapped error."""
        exc = ZootechAnalysisError(
            "Falha ao processar dados",
            severity=ErrorSeverity.CRITICAL,
            details={'column': 'peso'},
            original_exception=ValueError("original")
        )

        result = exc.to_dict()

        assert result['type'] == 'ZootechAnalysisError'
        assert result['message'] == 'Falha ao processar dados'
        assert result['severity'] == 'critical'
        assert result['details']['column'] == 'peso'
        assert 'original' in result['original_error']

    def test_serialization_without_original(self):
        """original_error is None when nothing was wrapped."""
        assert ZootechAnalysisError("x").to_dict()['original_error'] is None


@pytest.mark.unit
class TestConfigErrors:
    """Test configuration error classes."""

    def test_config_error_is_fatal(self):
        """ConfigError stops all processing."""
        exc = ConfigError("Configuração inválida", field="analysis")

        assert exc.severity == ErrorSeverity.FATAL
        assert exc.field == "analysis"
        assert exc.details['field'] == "analysis"

    def test_yaml_size_error(self):
        """YAMLSizeError records file and maximum sizes."""
        exc = YAMLSizeError("Muito grande", file_size=2000, max_size=1000)

        assert isinstance(exc, ConfigError)
        assert exc.details['file_size'] == 2000
        assert exc.details['max_size'] == 1000

    def test_config_validation_error(self):
        """ConfigValidationError records expected and actual values."""
        exc = ConfigValidationError("Inválido", field="analysis.confidence_level", expected="0.95", actual="0.8")

        assert exc.details['field'] == "analysis.confidence_level"
        assert exc.details['expected'] == "0.95"
        assert exc.details['actual'] == "0.8"


@pytest.mark.unit
class TestDataLoadErrors:
    """Test loader error classes."""

    def test_data_load_error_is_critical(self):
        """DataLoadError stops processing of the current file."""
        exc = DataLoadError("Não foi possível ler", file_path="dados.csv")

        assert exc.severity == ErrorSeverity.CRITICAL
        assert exc.file_path == "dados.csv"

    def test_unsupported_format(self):
        """UnsupportedFormatError lists the accepted formats."""
        exc = UnsupportedFormatError("dados.xlsx", ".xlsx", ['.csv', '.tsv'])

        assert isinstance(exc, DataLoadError)
        assert ".xlsx" in exc.message
        assert exc.details['supported_formats'] == ['.csv', '.tsv']


# ============================================================================
# STRUCTURAL STATISTICAL ERRORS
# ============================================================================

@pytest.mark.unit
class TestStatisticalInputErrors:
    """Test the errors raised by statistical routines."""

    @pytest.mark.parametrize("exc", [
        NoValidNumericValuesError(total_values=3),
        LengthMismatchError("Tamanhos diferentes", "pearson_correlation", 3, 4),
        InsufficientDataError("Poucos dados", "independent_t_test", 2, 1),
        InsufficientGroupsError(actual=1),
        EmptyDatasetError(),
    ])
    def test_all_are_recoverable_statistical_errors(self, exc):
        """Every structural error shares the StatisticalInputError base."""
        assert isinstance(exc, StatisticalInputError)
        assert isinstance(exc, ZootechAnalysisError)
        assert exc.severity == ErrorSeverity.RECOVERABLE
        assert 'operation' in exc.details

    def test_length_mismatch_details(self):
        """Both lengths are kept for reporting."""
        exc = LengthMismatchError("Tamanhos diferentes", "pearson_correlation", 3, 4)

        assert exc.operation == "pearson_correlation"
        assert exc.details['left_length'] == 3
        assert exc.details['right_length'] == 4

    def test_insufficient_groups_defaults(self):
        """ANOVA is the default operation and two groups are required."""
        exc = InsufficientGroupsError(actual=1)

        assert exc.operation == "one_way_anova"
        assert exc.details['required'] == 2
        assert exc.details['actual'] == 1

    def test_parameter_validation_error(self):
        """ParameterValidationError keeps the offending parameter and value."""
        exc = ParameterValidationError("Nível não suportado", parameter="confidence_level", value=0.8)

        assert exc.parameter == "confidence_level"
        assert exc.value == 0.8
        assert exc.details == {'parameter': 'confidence_level', 'value': 0.8}
