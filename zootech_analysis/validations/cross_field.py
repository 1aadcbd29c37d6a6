"""
Cross-field validation of zootechnical records.

Recalculates derived indices from their inputs and compares them with the
values reported in the same row, then checks values against biological
plausibility bounds:

- GPD (ganho de peso diário) = (peso_final - peso_inicial) / dias
- FCR (conversão alimentar)  = consumo_total / ganho_total
- IEP (índice de eficiência produtiva, poultry)
      = viabilidade * peso_medio / (idade * conversao) * 100

A reported index that differs from the recalculated one by more than the
tolerance is an error; by more than half the tolerance, a warning. A rule
whose inputs are absent or unparsable is skipped.

Results are data-quality findings, never exceptions:

    validator = CrossFieldValidator()
    result = validator.validate_gpd(250, 400, 120, reported=1.25)
    result.valid, result.errors, result.warnings, result.suggestions
"""

import logging
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from zootech_analysis.core.constants import GPD_TOLERANCE, FCR_TOLERANCE, IEP_TOLERANCE
from zootech_analysis.core.results import CrossValidationReport, CrossValidationResult, RowValidation
from zootech_analysis.reference_data.loader import ReferenceDataLoader
from zootech_analysis.utils.number_utils import parse_lenient_number

logger = logging.getLogger(__name__)

# Row columns read by perform_cross_validation
GPD_FIELDS = ('peso_inicial', 'peso_final', 'dias', 'gpd')
FCR_FIELDS = ('consumo_total', 'ganho_total', 'conversao_alimentar')
IEP_FIELDS = ('viabilidade', 'peso_medio', 'idade', 'conversao', 'iep')

PLAUSIBILITY_SUGGESTION = 'Valor possível mas incomum - verifique se está correto'


def _fmt(value: float) -> str:
    """Render a number without a spurious '.0' (5 -> '5', 2.5 -> '2.5')."""
    return format(value, '.10g')


def _percent_difference(calculated: float, reported: float) -> float:
    """|calculated - reported| as a percentage of ``calculated``."""
    if calculated == 0:
        return 0.0 if reported == 0 else 100.0
    return abs(calculated - reported) / abs(calculated) * 100


class CrossFieldValidator:
    """
    Consistency and plausibility checks between related fields.

    Args:
        gpd_tolerance: Relative GPD difference that is an error (default 0.15)
        fcr_tolerance: Relative FCR difference that is an error (default 0.15)
        iep_tolerance: Relative IEP difference that is an error (default 0.10)
        plausibility_rules: {'metric_species' or 'metric': {min, max, warning_min, warning_max}};
            defaults to the bundled table
    """

    def __init__(
        self,
        gpd_tolerance: float = GPD_TOLERANCE,
        fcr_tolerance: float = FCR_TOLERANCE,
        iep_tolerance: float = IEP_TOLERANCE,
        plausibility_rules: Optional[Dict[str, Dict[str, float]]] = None
    ):
        self.gpd_tolerance = gpd_tolerance
        self.fcr_tolerance = fcr_tolerance
        self.iep_tolerance = iep_tolerance
        self.plausibility_rules = (
            plausibility_rules if plausibility_rules is not None
            else ReferenceDataLoader.get_plausibility_rules()
        )

    # ------------------------------------------------------------------
    # Derived indices
    # ------------------------------------------------------------------

    def validate_gpd(
        self,
        initial_weight: Any,
        final_weight: Any,
        days: Any,
        reported: Any = None,
        tolerance: Optional[float] = None
    ) -> CrossValidationResult:
        """Check a reported GPD against (final - initial) / days."""
        result = CrossValidationResult()
        tolerance = self.gpd_tolerance if tolerance is None else tolerance

        initial = parse_lenient_number(initial_weight)
        final = parse_lenient_number(final_weight)
        n_days = parse_lenient_number(days)
        if initial is None or final is None or not n_days:
            return result

        calculated = (final - initial) / n_days
        if calculated < 0:
            result.add_error('Peso final menor que peso inicial - possível erro de digitação')
            result.add_suggestion('Verifique se os pesos foram inseridos na ordem correta')
            return result

        reported_value = parse_lenient_number(reported)
        if reported_value is None:
            result.add_suggestion(f'GPD calculado: {calculated:.3f} kg/dia')
            return result

        percent = _percent_difference(calculated, reported_value)
        if percent > tolerance * 100:
            result.add_error(
                f'GPD reportado ({reported_value:.3f} kg/dia) difere significativamente do calculado '
                f'({calculated:.3f} kg/dia) - diferença de {percent:.1f}%'
            )
            result.add_suggestion('Verifique os valores de peso inicial, peso final e número de dias')
        elif percent > tolerance / 2 * 100:
            result.add_warning(
                f'GPD reportado ({reported_value:.3f} kg/dia) difere do calculado '
                f'({calculated:.3f} kg/dia) - diferença de {percent:.1f}%'
            )
        return result

    def validate_fcr(
        self,
        total_feed: Any,
        total_gain: Any,
        reported: Any = None,
        tolerance: Optional[float] = None
    ) -> CrossValidationResult:
        """Check a reported feed conversion ratio against consumption / gain."""
        result = CrossValidationResult()
        tolerance = self.fcr_tolerance if tolerance is None else tolerance

        feed = parse_lenient_number(total_feed)
        gain = parse_lenient_number(total_gain)
        if feed is None or gain is None:
            return result

        if gain <= 0:
            result.add_error('Ganho de peso total deve ser positivo')
            return result

        calculated = feed / gain
        reported_value = parse_lenient_number(reported)
        if reported_value is None:
            result.add_suggestion(f'Conversão alimentar calculada: {calculated:.2f} kg/kg')
            return result

        percent = _percent_difference(calculated, reported_value)
        if percent > tolerance * 100:
            result.add_error(
                f'Conversão alimentar reportada ({reported_value:.2f}) difere significativamente '
                f'da calculada ({calculated:.2f}) - diferença de {percent:.1f}%'
            )
            result.add_suggestion('Verifique os valores de consumo total e ganho de peso total')
        elif percent > tolerance / 2 * 100:
            result.add_warning(
                f'Conversão alimentar reportada ({reported_value:.2f}) difere da calculada '
                f'({calculated:.2f}) - diferença de {percent:.1f}%'
            )
        return result

    def validate_iep(
        self,
        viability: Any,
        avg_weight: Any,
        age: Any,
        conversion: Any,
        reported: Any = None,
        tolerance: Optional[float] = None
    ) -> CrossValidationResult:
        """
        Check a reported poultry IEP.

        IEP = viability (%) * average weight (kg) / (age (days) * conversion) * 100
        """
        result = CrossValidationResult()
        tolerance = self.iep_tolerance if tolerance is None else tolerance

        viability_value = parse_lenient_number(viability)
        weight = parse_lenient_number(avg_weight)
        age_days = parse_lenient_number(age)
        conversion_value = parse_lenient_number(conversion)
        if viability_value is None or weight is None or not age_days or not conversion_value:
            return result

        calculated = viability_value * weight / (age_days * conversion_value) * 100
        reported_value = parse_lenient_number(reported)
        if reported_value is None:
            result.add_suggestion(f'IEP calculado: {calculated:.0f} pontos')
            return result

        percent = _percent_difference(calculated, reported_value)
        if percent > tolerance * 100:
            result.add_error(
                f'IEP reportado ({reported_value:.0f}) difere significativamente do calculado '
                f'({calculated:.0f}) - diferença de {percent:.1f}%'
            )
            result.add_suggestion('Verifique os valores de viabilidade, peso médio, idade e conversão alimentar')
        elif percent > tolerance / 2 * 100:
            result.add_warning(
                f'IEP reportado ({reported_value:.0f}) difere do calculado '
                f'({calculated:.0f}) - diferença de {percent:.1f}%'
            )
        return result

    # ------------------------------------------------------------------
    # Plausibility
    # ------------------------------------------------------------------

    def get_plausibility_rule(self, metric: str, species: Optional[str]) -> Optional[Dict[str, float]]:
        """Species-specific rule ('gpd_bovine') first, then the generic one ('mortalidade')."""
        if species:
            rule = self.plausibility_rules.get(f'{metric}_{species}')
            if rule is not None:
                return rule
        return self.plausibility_rules.get(metric)

    def validate_biological_plausibility(self, metric: str, value: Any, species: Optional[str]) -> CrossValidationResult:
        """
        Check a value against hard (error) and soft (warning) biological bounds.

        Metrics without a rule always pass.
        """
        result = CrossValidationResult()
        number = parse_lenient_number(value)
        rule = self.get_plausibility_rule(metric, species)
        if number is None or rule is None:
            return result

        if number < rule['min'] or number > rule['max']:
            result.add_error(
                f"Valor {_fmt(number)} fora dos limites biologicamente plausíveis "
                f"({_fmt(rule['min'])} - {_fmt(rule['max'])})"
            )
            result.add_suggestion('Verifique se o valor foi digitado corretamente e se a unidade está correta')
            return result

        warning_min = rule.get('warning_min')
        warning_max = rule.get('warning_max')
        if warning_min is not None and number < warning_min:
            result.add_warning(f"Valor {_fmt(number)} é incomumente baixo (esperado > {_fmt(warning_min)})")
            result.add_suggestion(PLAUSIBILITY_SUGGESTION)
        if warning_max is not None and number > warning_max:
            result.add_warning(f"Valor {_fmt(number)} é incomumente alto (esperado < {_fmt(warning_max)})")
            result.add_suggestion(PLAUSIBILITY_SUGGESTION)
        return result

    # ------------------------------------------------------------------
    # Dataset
    # ------------------------------------------------------------------

    def validate_row(self, row: Dict[str, Any], row_number: int, species: str) -> RowValidation:
        """Run every applicable rule on one row."""
        validation = RowValidation(row=row_number)

        values = {name: parse_lenient_number(row.get(name)) for name in GPD_FIELDS + FCR_FIELDS + IEP_FIELDS}

        if values['peso_inicial'] is not None and values['peso_final'] is not None and values['dias'] is not None:
            validation.validations['gpd'] = self.validate_gpd(
                values['peso_inicial'], values['peso_final'], values['dias'], values['gpd']
            )

        if values['consumo_total'] is not None and values['ganho_total'] is not None:
            validation.validations['fcr'] = self.validate_fcr(
                values['consumo_total'], values['ganho_total'], values['conversao_alimentar']
            )

        if species == 'poultry' and all(
            values[name] is not None for name in ('viabilidade', 'peso_medio', 'idade', 'conversao')
        ):
            validation.validations['iep'] = self.validate_iep(
                values['viabilidade'], values['peso_medio'], values['idade'], values['conversao'], values['iep']
            )

        if values['gpd'] is not None:
            validation.validations['gpd_plausibility'] = self.validate_biological_plausibility(
                'gpd', values['gpd'], species
            )

        return validation

    def perform_cross_validation(
        self,
        rows: Union[List[Dict[str, Any]], pd.DataFrame],
        species: str
    ) -> CrossValidationReport:
        """
        Validate every row of a dataset.

        Args:
            rows: Row dicts (or a DataFrame)
            species: Canonical species id; 'poultry' also runs IEP

        Returns:
            CrossValidationReport with 1-based row numbers; rows where no
            rule ran are omitted
        """
        records = rows.to_dict('records') if isinstance(rows, pd.DataFrame) else list(rows)
        report = CrossValidationReport(species=species, total_rows=len(records))

        for index, row in enumerate(records):
            report.add_row(self.validate_row(row, index + 1, species))

        logger.info(
            f"Cross-validation finished: {len(report.results)} rows checked, "
            f"{report.total_errors} errors, {report.total_warnings} warnings"
        )
        return report


def perform_cross_validation(rows: Union[List[Dict[str, Any]], pd.DataFrame], species: str) -> CrossValidationReport:
    return CrossFieldValidator().perform_cross_validation(rows, species)
