"""
Correlation Discovery Engine - biologically guided correlation analysis.

Finds the numeric columns of a dataset, matches them against the
species-specific table of biologically relevant variable pairs, computes
Pearson correlations for every matched pair and flags pairs whose observed
direction contradicts the expected one. Strong correlations between the
remaining numeric columns are reported as lower-relevance ad-hoc findings.

Architecture:
    1. Numeric columns: >= 80% of the first 10 rows parse as numbers
    2. Configured pairs: first column containing a var1 keyword and a different
       column containing a var2 keyword; Pearson on pairwise-complete points
    3. Ad-hoc pairs: all remaining column pairs with |r| >= 0.4 (relevance 3)
    4. Filter by relevance, sort by relevance then |r|, truncate
    5. Summaries, warnings and recommendations

Data problems (too few columns, unknown species, too few points) degrade to
an empty or partial report with warnings; nothing here raises for them.

Usage:
    engine = CorrelationDiscoveryEngine()
    report = engine.analyze_correlations(rows, "bovinos", CorrelationOptions(min_relevance_score=8))
    for correlation in report.top_correlations:
        print(correlation.var1, correlation.var2, correlation.coefficient)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple, Union

import pandas as pd

from zootech_analysis.core.constants import (
    DEFAULT_ALPHA,
    DEFAULT_MAX_CORRELATIONS,
    DEFAULT_MIN_RELEVANCE_SCORE,
    DEFAULT_MIN_DATA_POINTS,
    NUMERIC_COLUMN_SAMPLE_ROWS,
    NUMERIC_COLUMN_MIN_RATIO,
    ADDITIONAL_PAIR_MIN_ABS_R,
    ADDITIONAL_PAIR_RELEVANCE,
    ADDITIONAL_PAIR_CATEGORY,
    HIGH_RELEVANCE_SCORE,
    STRONG_CORRELATION_ABS_R,
    TOP_CORRELATIONS_COUNT,
    MAX_MISSING_VARIABLES,
)
from zootech_analysis.core.exceptions import StatisticalInputError
from zootech_analysis.profiler.profile_result import convert_numpy_types
from zootech_analysis.profiler.statistical_analysis import STRENGTH_LABELS_PT, pearson_correlation
from zootech_analysis.reference_data.loader import ReferenceDataLoader
from zootech_analysis.species import normalize_species
from zootech_analysis.utils.number_utils import parse_lenient_number

logger = logging.getLogger(__name__)

Rows = Union[List[Dict[str, Any]], pd.DataFrame]

ADDITIONAL_PAIR_INTERPRETATION = 'Correlação detectada automaticamente entre variáveis'

# Category-specific advice for strong significant correlations
CATEGORY_RECOMMENDATIONS: Dict[str, Tuple[str, ...]] = {
    'Crescimento': (
        'Utilize esta correlação forte para predição de desempenho',
        'Considere para seleção genética e melhoramento',
    ),
    'Eficiência': (
        'Monitore estas variáveis para otimização econômica',
        'Ajuste manejo nutricional baseado nesta relação',
    ),
    'Qualidade': (
        'Use como indicador de qualidade do produto',
        'Considere para estratificação de preços',
    ),
    'Produção': (
        'Importante para planejamento produtivo',
        'Considere para estimativas de produção',
    ),
}


@dataclass
class CorrelationOptions:
    """Tuning knobs for analyze_correlations."""
    max_correlations: int = DEFAULT_MAX_CORRELATIONS
    min_relevance_score: int = DEFAULT_MIN_RELEVANCE_SCORE
    min_data_points: int = DEFAULT_MIN_DATA_POINTS
    significance_level: float = DEFAULT_ALPHA
    allow_unknown_species_fallback: bool = False

    @classmethod
    def from_dict(cls, settings: Dict[str, Any]) -> 'CorrelationOptions':
        known = {name: settings[name] for name in cls.__dataclass_fields__ if name in settings}
        return cls(**known)


@dataclass
class CorrelationPair:
    """A biologically relevant variable pair from the species table."""
    var1_keywords: List[str]
    var2_keywords: List[str]
    category: str
    relevance_score: int
    expected_direction: str
    interpretation: str
    ideal_range: Optional[Dict[str, float]] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'CorrelationPair':
        return cls(
            var1_keywords=list(data['var1_keywords']),
            var2_keywords=list(data['var2_keywords']),
            category=data['category'],
            relevance_score=int(data['relevance_score']),
            expected_direction=data.get('expected_direction', 'either'),
            interpretation=data.get('interpretation', ''),
            ideal_range=data.get('ideal_range'),
        )


@dataclass
class CorrelationResult:
    """
    One correlation between two dataset columns.

    Attributes:
        var1, var2: Column names
        coefficient: Pearson r in [-1, 1]
        p_value: Two-sided p-value in [0, 1]
        significant: p_value < significance level
        strength: 'very weak' ... 'very strong'
        direction: 'positive', 'negative' or 'none'
        relevance_score: Biological relevance 0..10 (3 for ad-hoc pairs)
        category: Crescimento, Eficiência, ... or 'Outros'
        interpretation: Zootechnical meaning of the pair
        expected_direction: 'positive', 'negative' or 'either'
        matches_expectation: Observed direction agrees with the expected one
        data_points: Pairwise-complete observations [{'x': .., 'y': ..}]
        ideal_range: Optional expected range of r
    """
    var1: str
    var2: str
    coefficient: float
    p_value: float
    significant: bool
    strength: str
    direction: str
    relevance_score: int
    category: str
    interpretation: str
    expected_direction: str
    matches_expectation: bool
    data_points: List[Dict[str, float]] = field(default_factory=list)
    ideal_range: Optional[Dict[str, float]] = None

    def to_dict(self, include_points: bool = True) -> Dict[str, Any]:
        result = {
            "var1": self.var1,
            "var2": self.var2,
            "coefficient": self.coefficient,
            "p_value": self.p_value,
            "significant": self.significant,
            "strength": self.strength,
            "direction": self.direction,
            "relevance_score": self.relevance_score,
            "category": self.category,
            "interpretation": self.interpretation,
            "expected_direction": self.expected_direction,
            "matches_expectation": self.matches_expectation,
            "ideal_range": self.ideal_range,
        }
        if include_points:
            result["data_points"] = list(self.data_points)
        return convert_numpy_types(result)


@dataclass
class CorrelationReport:
    """Outcome of analyze_correlations."""
    total_correlations: int = 0
    significant_correlations: int = 0
    high_relevance_correlations: int = 0
    correlations_by_category: Dict[str, int] = field(default_factory=dict)
    top_correlations: List[CorrelationResult] = field(default_factory=list)
    all_correlations: List[CorrelationResult] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self, include_points: bool = False) -> Dict[str, Any]:
        return {
            "total_correlations": self.total_correlations,
            "significant_correlations": self.significant_correlations,
            "high_relevance_correlations": self.high_relevance_correlations,
            "correlations_by_category": dict(self.correlations_by_category),
            "top_correlations": [c.to_dict(include_points) for c in self.top_correlations],
            "all_correlations": [c.to_dict(include_points) for c in self.all_correlations],
            "warnings": list(self.warnings),
            "recommendations": list(self.recommendations),
        }


def matches_expectation(coefficient: float, expected_direction: str) -> bool:
    if expected_direction == 'positive':
        return coefficient > 0
    if expected_direction == 'negative':
        return coefficient < 0
    return True


def _find_column(columns: List[str], keywords: List[str]) -> Optional[str]:
    lowered = [keyword.lower() for keyword in keywords]
    for column in columns:
        name = column.lower()
        if any(keyword in name for keyword in lowered):
            return column
    return None


def find_matching_variables(columns: List[str], pair: CorrelationPair) -> Optional[Tuple[str, str]]:
    """First column for each keyword list; None unless both exist and differ."""
    var1 = _find_column(columns, pair.var1_keywords)
    var2 = _find_column(columns, pair.var2_keywords)
    if var1 and var2 and var1 != var2:
        return var1, var2
    return None


class CorrelationDiscoveryEngine:
    """
    Species-aware correlation discovery.

    Args:
        species_configs: {species: {expected_fields, additional_metrics, correlation_pairs}};
            defaults to the bundled table
    """

    def __init__(self, species_configs: Optional[Dict[str, Dict[str, Any]]] = None):
        self.species_configs = (
            species_configs if species_configs is not None
            else ReferenceDataLoader.get_species_correlations()
        )

    def get_correlation_pairs(self, species: str) -> Optional[List[CorrelationPair]]:
        """Configured pairs for a (normalised) species, None if the species is unknown."""
        config = self.species_configs.get(normalize_species(species))
        if config is None:
            return None
        return [CorrelationPair.from_dict(pair) for pair in config.get('correlation_pairs', [])]

    # ------------------------------------------------------------------
    # Data extraction
    # ------------------------------------------------------------------

    @staticmethod
    def _to_records(rows: Rows) -> List[Dict[str, Any]]:
        return rows.to_dict('records') if isinstance(rows, pd.DataFrame) else list(rows)

    @staticmethod
    def get_numeric_columns(records: List[Dict[str, Any]]) -> List[str]:
        """Columns of the first row whose sampled values are mostly numeric."""
        if not records:
            return []

        sample = records[:NUMERIC_COLUMN_SAMPLE_ROWS]
        numeric_columns = []
        for column in records[0].keys():
            numeric_count = sum(1 for row in sample if parse_lenient_number(row.get(column)) is not None)
            if numeric_count / len(sample) >= NUMERIC_COLUMN_MIN_RATIO:
                numeric_columns.append(column)
        return numeric_columns

    @staticmethod
    def extract_data_points(records: List[Dict[str, Any]], var1: str, var2: str) -> List[Dict[str, float]]:
        """Rows where both columns parse as numbers."""
        points = []
        for row in records:
            x = parse_lenient_number(row.get(var1))
            y = parse_lenient_number(row.get(var2))
            if x is not None and y is not None:
                points.append({'x': x, 'y': y})
        return points

    def _correlate(
        self,
        records: List[Dict[str, Any]],
        var1: str,
        var2: str,
        options: CorrelationOptions
    ):
        points = self.extract_data_points(records, var1, var2)
        if len(points) < options.min_data_points:
            return None, points
        try:
            pearson = pearson_correlation(
                [p['x'] for p in points],
                [p['y'] for p in points],
                options.significance_level
            )
        except StatisticalInputError as e:
            logger.warning(f"Erro ao calcular correlação {var1} vs {var2}: {e.message}")
            return None, points
        return pearson, points

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def analyze_correlations(
        self,
        rows: Rows,
        species: str,
        options: Optional[CorrelationOptions] = None
    ) -> CorrelationReport:
        """
        Discover correlations in a dataset.

        Args:
            rows: Row dicts (or a DataFrame)
            species: Species id or alias ('bovine', 'bovinos', 'gado', ...)
            options: CorrelationOptions; defaults when None

        Returns:
            CorrelationReport
        """
        options = options or CorrelationOptions()
        records = self._to_records(rows)
        report = CorrelationReport()

        numeric_columns = self.get_numeric_columns(records)
        if len(numeric_columns) < 2:
            report.warnings.append('Dados insuficientes: são necessárias pelo menos 2 variáveis numéricas')
            return report

        pairs = self.get_correlation_pairs(species)
        if pairs is None:
            if not options.allow_unknown_species_fallback:
                report.warnings.append(f'Configuração de correlação não encontrada para espécie: {species}')
                return report
            report.warnings.append(
                f"⚠️ Configuração específica não encontrada para '{species}'. "
                f"Usando análise automática de correlações."
            )
            pairs = []

        correlations: List[CorrelationResult] = []
        for pair in pairs:
            matched = find_matching_variables(numeric_columns, pair)
            if matched is None:
                continue
            var1, var2 = matched
            pearson, points = self._correlate(records, var1, var2, options)
            if pearson is None:
                continue

            matches = matches_expectation(pearson.coefficient, pair.expected_direction)
            correlations.append(CorrelationResult(
                var1=var1,
                var2=var2,
                coefficient=pearson.coefficient,
                p_value=pearson.p_value,
                significant=pearson.significant,
                strength=pearson.strength,
                direction=pearson.direction,
                relevance_score=pair.relevance_score,
                category=pair.category,
                interpretation=pair.interpretation,
                expected_direction=pair.expected_direction,
                matches_expectation=matches,
                data_points=points,
                ideal_range=pair.ideal_range,
            ))

            if pearson.significant and not matches:
                report.warnings.append(
                    f'⚠️ Correlação inesperada: {var1} vs {var2} - '
                    f'esperado {pair.expected_direction}, encontrado {pearson.direction}'
                )

            if (
                pearson.significant
                and pair.relevance_score >= HIGH_RELEVANCE_SCORE
                and abs(pearson.coefficient) > STRONG_CORRELATION_ABS_R
            ):
                report.recommendations.append(
                    f'✅ {pair.category}: {var1} e {var2} apresentam correlação '
                    f'{STRENGTH_LABELS_PT[pearson.strength]} (r = {pearson.coefficient:.3f}). {pair.interpretation}'
                )

        correlations.extend(self._additional_correlations(records, numeric_columns, correlations, options))

        ranked = sorted(
            (c for c in correlations if c.relevance_score >= options.min_relevance_score),
            key=lambda c: (-c.relevance_score, -abs(c.coefficient))
        )

        report.total_correlations = len(correlations)
        report.significant_correlations = sum(1 for c in correlations if c.significant)
        report.high_relevance_correlations = sum(
            1 for c in correlations if c.relevance_score >= HIGH_RELEVANCE_SCORE
        )
        for correlation in correlations:
            report.correlations_by_category[correlation.category] = (
                report.correlations_by_category.get(correlation.category, 0) + 1
            )
        report.top_correlations = ranked[:options.max_correlations]
        report.all_correlations = ranked

        if report.significant_correlations == 0:
            report.recommendations.append(
                '⚠️ Nenhuma correlação significativa encontrada. Verifique a qualidade e variabilidade dos dados.'
            )
        elif report.significant_correlations < 3:
            report.recommendations.append(
                '📊 Poucas correlações significativas. Considere coletar mais dados ou variáveis adicionais.'
            )

        logger.info(
            f"Correlation analysis for '{species}': {report.total_correlations} correlations, "
            f"{report.significant_correlations} significant"
        )
        return report

    def _additional_correlations(
        self,
        records: List[Dict[str, Any]],
        numeric_columns: List[str],
        existing: List[CorrelationResult],
        options: CorrelationOptions
    ) -> List[CorrelationResult]:
        """Strong correlations between column pairs not covered by the species table."""
        seen = {frozenset((c.var1, c.var2)) for c in existing}
        additional = []

        for i, var1 in enumerate(numeric_columns):
            for var2 in numeric_columns[i + 1:]:
                if frozenset((var1, var2)) in seen:
                    continue
                pearson, points = self._correlate(records, var1, var2, options)
                if pearson is None or abs(pearson.coefficient) < ADDITIONAL_PAIR_MIN_ABS_R:
                    continue
                additional.append(CorrelationResult(
                    var1=var1,
                    var2=var2,
                    coefficient=pearson.coefficient,
                    p_value=pearson.p_value,
                    significant=pearson.significant,
                    strength=pearson.strength,
                    direction=pearson.direction,
                    relevance_score=ADDITIONAL_PAIR_RELEVANCE,
                    category=ADDITIONAL_PAIR_CATEGORY,
                    interpretation=ADDITIONAL_PAIR_INTERPRETATION,
                    expected_direction='either',
                    matches_expectation=True,
                    data_points=points,
                ))
        return additional

    # ------------------------------------------------------------------
    # Planning helpers
    # ------------------------------------------------------------------

    def propose_correlations(self, columns: List[str], species: str) -> List[Dict[str, Any]]:
        """Configured pairs whose variables are both present, highest priority first."""
        pairs = self.get_correlation_pairs(species) or []
        proposals = []
        for pair in pairs:
            matched = find_matching_variables(list(columns), pair)
            if matched:
                proposals.append({
                    'var1': matched[0],
                    'var2': matched[1],
                    'reason': f'{pair.category}: {pair.interpretation}',
                    'priority': pair.relevance_score,
                })
        return sorted(proposals, key=lambda proposal: -proposal['priority'])

    def get_missing_variables(self, columns: List[str], species: str) -> List[Dict[str, str]]:
        """
        Variables of high-relevance pairs that the dataset lacks.

        Each entry names the pair's first keyword. Duplicates keep their first
        position and the last reason seen; at most 10 are returned.
        """
        pairs = self.get_correlation_pairs(species) or []
        available = [column.lower() for column in columns]

        def present(keywords: List[str]) -> bool:
            return any(keyword.lower() in column for keyword in keywords for column in available)

        missing: Dict[str, Dict[str, str]] = {}
        for pair in pairs:
            if pair.relevance_score < HIGH_RELEVANCE_SCORE:
                continue
            reason = f'Necessário para análise de {pair.category}: {pair.interpretation}'
            for keywords in (pair.var1_keywords, pair.var2_keywords):
                if not present(keywords):
                    missing[keywords[0]] = {'variable': keywords[0], 'importance': 'Alta', 'reason': reason}

        return list(missing.values())[:MAX_MISSING_VARIABLES]


def generate_correlation_interpretation(correlation: CorrelationResult) -> str:
    """Markdown explanation of a correlation for reports."""
    direction = 'positiva' if correlation.coefficient > 0 else 'negativa'
    strength = STRENGTH_LABELS_PT.get(correlation.strength, correlation.strength)

    lines = [
        f'**{correlation.var1} vs {correlation.var2}** ({correlation.category})',
        '',
        f'📊 **Coeficiente de Pearson:** r = {correlation.coefficient:.3f}',
        f'📈 **Força:** {strength} {direction}',
        f'🎯 **Relevância Biológica:** {correlation.relevance_score}/10',
        f"📉 **Significância:** {'Sim' if correlation.significant else 'Não'} (p = {correlation.p_value:.4f})",
        '',
    ]

    if not correlation.matches_expectation:
        lines.append(
            f'⚠️ **Atenção:** Esta correlação não corresponde ao padrão esperado '
            f'({correlation.expected_direction}). Isso pode indicar problemas nos dados '
            f'ou condições atípicas no manejo.'
        )
        lines.append('')

    lines.append('**Interpretação Zootécnica:**')
    lines.append(correlation.interpretation)
    lines.append('')

    if correlation.significant and abs(correlation.coefficient) > STRONG_CORRELATION_ABS_R:
        advice = CATEGORY_RECOMMENDATIONS.get(correlation.category)
        if advice:
            lines.append('**Recomendações:**')
            lines.extend(f'- {item}' for item in advice)
    elif not correlation.significant:
        lines.append(
            '**Nota:** Correlação não significativa estatisticamente. '
            'Pode ser necessário mais dados ou as variáveis podem ser independentes.'
        )

    return '\n'.join(lines) + '\n'


def analyze_correlations(rows: Rows, species: str, options: Optional[CorrelationOptions] = None) -> CorrelationReport:
    return CorrelationDiscoveryEngine().analyze_correlations(rows, species, options)


def get_top_correlations(report: CorrelationReport, count: int = TOP_CORRELATIONS_COUNT) -> List[CorrelationResult]:
    """The ``count`` highest-ranked correlations of a report."""
    return report.all_correlations[:count]
