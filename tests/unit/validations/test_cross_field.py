"""
Tests for cross-field consistency and plausibility checks.
"""

import pandas as pd
import pytest

from zootech_analysis.core.results import Status
from zootech_analysis.validations.cross_field import CrossFieldValidator, perform_cross_validation


@pytest.fixture
def validator():
    return CrossFieldValidator()


# ============================================================================
# DERIVED INDICES
# ============================================================================

@pytest.mark.unit
class TestGpd:
    """Test daily weight gain recalculation."""

    def test_consistent(self, validator):
        """(400 - 250) / 120 = 1.25."""
        result = validator.validate_gpd(250, 400, 120, reported=1.25)
        assert result.valid
        assert result.errors == []
        assert result.warnings == []

    def test_error_beyond_tolerance(self, validator):
        """20% off is an error at the default 15% tolerance."""
        result = validator.validate_gpd(250, 400, 120, reported=1.5)
        assert not result.valid
        assert result.errors == [
            'GPD reportado (1.500 kg/dia) difere significativamente do calculado (1.250 kg/dia) - diferença de 20.0%'
        ]
        assert result.suggestions

    def test_warning_beyond_half_tolerance(self, validator):
        """8% off is a warning."""
        result = validator.validate_gpd(250, 400, 120, reported=1.35)
        assert result.valid
        assert len(result.warnings) == 1

    def test_no_reported_value_suggests_calculation(self, validator):
        """Without a reported value the calculated one is suggested."""
        result = validator.validate_gpd("250,0", "400", "120")
        assert result.valid
        assert result.suggestions == ['GPD calculado: 1.250 kg/dia']

    def test_weight_loss_is_error(self, validator):
        """Final weight below initial weight."""
        result = validator.validate_gpd(400, 250, 120, reported=1.0)
        assert not result.valid
        assert result.errors[0].startswith('Peso final menor que peso inicial')

    def test_zero_days_skipped(self, validator):
        """Division by zero days skips the rule."""
        result = validator.validate_gpd(250, 400, 0, reported=1.0)
        assert result.valid
        assert result.suggestions == []

    def test_custom_tolerance(self):
        """A wider tolerance accepts the same difference silently."""
        result = CrossFieldValidator(gpd_tolerance=0.5).validate_gpd(250, 400, 120, reported=1.5)
        assert result.valid
        assert result.warnings == []


@pytest.mark.unit
class TestFcr:
    """Test feed conversion recalculation."""

    def test_consistent(self, validator):
        """500 / 100 = 5."""
        assert validator.validate_fcr(500, 100, 5.0).valid

    def test_error(self, validator):
        """20% off is an error."""
        assert not validator.validate_fcr(500, 100, 6.0).valid

    def test_non_positive_gain(self, validator):
        """Gain must be positive."""
        result = validator.validate_fcr(500, 0, 5.0)
        assert result.errors == ['Ganho de peso total deve ser positivo']

    def test_suggestion(self, validator):
        """Without a reported value the ratio is suggested."""
        assert validator.validate_fcr(500, 100).suggestions == ['Conversão alimentar calculada: 5.00 kg/kg']


@pytest.mark.unit
class TestIep:
    """Test poultry production efficiency index recalculation."""

    def test_consistent(self, validator):
        """95 * 2.5 / (42 * 1.7) * 100 = 332.6."""
        result = validator.validate_iep(95, 2.5, 42, 1.7, reported=333)
        assert result.valid
        assert result.warnings == []

    def test_warning(self, validator):
        """About 10% off is a warning at the 10% tolerance."""
        result = validator.validate_iep(95, 2.5, 42, 1.7, reported=300)
        assert result.valid
        assert len(result.warnings) == 1

    def test_error(self, validator):
        """About 25% off is an error."""
        assert not validator.validate_iep(95, 2.5, 42, 1.7, reported=250).valid

    def test_suggestion(self, validator):
        """Without a reported value the index is suggested."""
        assert validator.validate_iep(95, 2.5, 42, 1.7).suggestions == ['IEP calculado: 333 pontos']


# ============================================================================
# PLAUSIBILITY
# ============================================================================

@pytest.mark.unit
class TestBiologicalPlausibility:
    """Test hard and soft biological bounds."""

    def test_within_bounds(self, validator):
        """Typical beef GPD passes."""
        result = validator.validate_biological_plausibility('gpd', 1.0, 'bovine')
        assert result.valid
        assert result.warnings == []

    def test_outside_hard_bounds(self, validator):
        """Values beyond the hard bounds are errors."""
        result = validator.validate_biological_plausibility('gpd', 3.5, 'bovine')
        assert not result.valid
        assert result.errors == ['Valor 3.5 fora dos limites biologicamente plausíveis (0 - 3)']

    def test_soft_bounds(self, validator):
        """Values beyond the soft bounds are warnings."""
        low = validator.validate_biological_plausibility('gpd', 0.2, 'bovine')
        high = validator.validate_biological_plausibility('gpd', 2.5, 'bovine')

        assert low.valid and high.valid
        assert low.warnings == ['Valor 0.2 é incomumente baixo (esperado > 0.3)']
        assert high.warnings == ['Valor 2.5 é incomumente alto (esperado < 2)']

    def test_species_rule_before_generic(self):
        """'metric_species' rules win over 'metric' rules."""
        validator = CrossFieldValidator(plausibility_rules={
            'gpd': {'min': 0, 'max': 10},
            'gpd_poultry': {'min': 0, 'max': 0.15},
        })
        assert not validator.validate_biological_plausibility('gpd', 1.0, 'poultry').valid
        assert validator.validate_biological_plausibility('gpd', 1.0, 'bovine').valid

    def test_generic_rule(self, validator):
        """Metrics without a species rule use the generic one."""
        result = validator.validate_biological_plausibility('mortalidade', 15, 'bovine')
        assert result.valid
        assert len(result.warnings) == 1

    def test_unknown_metric_passes(self, validator):
        """Metrics without any rule are not checked."""
        assert validator.validate_biological_plausibility('cor_pelagem', 999, 'bovine').valid


# ============================================================================
# DATASET
# ============================================================================

@pytest.mark.unit
class TestPerformCrossValidation:
    """Test dataset-level cross validation."""

    @pytest.fixture
    def rows(self):
        return [
            {'peso_inicial': '250', 'peso_final': '400', 'dias': '120', 'gpd': '1,25'},
            {'raca': 'Nelore'},
            {'peso_inicial': '250', 'peso_final': '400', 'dias': '120', 'gpd': '2,5'},
        ]

    def test_report(self, validator, rows):
        """Rows without rules are omitted; counts aggregate every rule."""
        report = validator.perform_cross_validation(rows, 'bovine')

        assert report.total_rows == 3
        assert [row.row for row in report.results] == [1, 3]
        assert set(report.results[0].validations) == {'gpd', 'gpd_plausibility'}
        assert report.total_errors == 1
        assert report.total_warnings == 1
        assert not report.overall_valid
        assert report.status == Status.FAILED

    def test_iep_only_for_poultry(self, validator):
        """The IEP rule runs for poultry only."""
        row = {'viabilidade': '95', 'peso_medio': '2,5', 'idade': '42', 'conversao': '1,7', 'iep': '333'}

        assert validator.perform_cross_validation([row], 'bovine').results == []
        poultry = validator.perform_cross_validation([row], 'poultry')
        assert set(poultry.results[0].validations) == {'iep'}
        assert poultry.overall_valid

    def test_fcr_rule(self, validator):
        """Consumption and gain columns trigger the FCR rule."""
        report = validator.perform_cross_validation(
            [{'consumo_total': '500', 'ganho_total': '100', 'conversao_alimentar': '5'}], 'swine'
        )
        assert set(report.results[0].validations) == {'fcr'}
        assert report.status == Status.PASSED

    def test_dataframe_and_module_function(self, rows):
        """DataFrames work through the module-level helper."""
        report = perform_cross_validation(pd.DataFrame(rows), 'bovine')
        assert report.total_rows == 3
        assert report.to_dict()['status'] == 'FAILED'
