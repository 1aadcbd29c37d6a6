"""
Tests for species-aware correlation discovery.
"""

import pandas as pd
import pytest

from zootech_analysis.profiler.correlation_discovery import (
    CorrelationDiscoveryEngine,
    CorrelationOptions,
    CorrelationPair,
    analyze_correlations,
    find_matching_variables,
    generate_correlation_interpretation,
    get_top_correlations,
    matches_expectation,
)


@pytest.fixture
def species_configs():
    return {
        'bovine': {
            'expected_fields': ['peso_nascimento', 'peso_desmame', 'idade', 'ecc'],
            'correlation_pairs': [
                {
                    'var1_keywords': ['peso_nascimento'],
                    'var2_keywords': ['peso_desmame'],
                    'category': 'Crescimento',
                    'relevance_score': 10,
                    'expected_direction': 'positive',
                    'interpretation': 'Vigor ao nascer se mantém até o desmame',
                    'ideal_range': {'min': 0.4, 'max': 0.8},
                },
                {
                    'var1_keywords': ['idade'],
                    'var2_keywords': ['ecc'],
                    'category': 'Qualidade',
                    'relevance_score': 6,
                    'expected_direction': 'negative',
                    'interpretation': 'Escore corporal cai com a idade',
                },
            ],
        },
    }


@pytest.fixture
def engine(species_configs):
    return CorrelationDiscoveryEngine(species_configs=species_configs)


@pytest.fixture
def herd_rows():
    """Twelve animals where every numeric column grows with the row index."""
    return [
        {
            'brinco': f'A{i}',
            'peso_nascimento': str(30 + i),
            'peso_desmame': str(180 + 5 * i),
            'idade': 10 * (i + 1),
            'ecc': f'{2 + 0.25 * i:.2f}'.replace('.', ','),
        }
        for i in range(12)
    ]


# ============================================================================
# HELPERS
# ============================================================================

@pytest.mark.unit
class TestHelpers:
    """Test keyword matching and column detection."""

    @pytest.mark.parametrize("r,expected,result", [
        (0.5, 'positive', True),
        (-0.5, 'positive', False),
        (-0.5, 'negative', True),
        (0.5, 'negative', False),
        (0.5, 'either', True),
        (-0.5, 'either', True),
    ])
    def test_matches_expectation(self, r, expected, result):
        """Observed sign against expected direction."""
        assert matches_expectation(r, expected) is result

    def test_find_matching_variables_first_column_wins(self):
        """The first column containing a keyword is used."""
        pair = CorrelationPair.from_dict({
            'var1_keywords': ['peso'], 'var2_keywords': ['Consumo'],
            'category': 'Eficiência', 'relevance_score': 9,
        })
        assert find_matching_variables(['peso_inicial', 'peso_final', 'consumo_ms'], pair) == ('peso_inicial', 'consumo_ms')
        assert pair.expected_direction == 'either'

    def test_find_matching_variables_same_column(self):
        """Both sides resolving to one column is no match."""
        pair = CorrelationPair.from_dict({
            'var1_keywords': ['peso'], 'var2_keywords': ['peso'],
            'category': 'Crescimento', 'relevance_score': 9,
        })
        assert find_matching_variables(['peso'], pair) is None

    def test_numeric_columns(self, engine, herd_rows):
        """Columns whose sampled values mostly parse as numbers."""
        assert engine.get_numeric_columns(herd_rows) == ['peso_nascimento', 'peso_desmame', 'idade', 'ecc']
        assert engine.get_numeric_columns([]) == []

    def test_extract_data_points_skips_incomplete_rows(self, engine):
        """Only rows where both values parse are kept."""
        rows = [{'a': '1', 'b': '2'}, {'a': '', 'b': '3'}, {'a': '4,5', 'b': 'x'}, {'a': '5', 'b': '6'}]
        assert engine.extract_data_points(rows, 'a', 'b') == [{'x': 1.0, 'y': 2.0}, {'x': 5.0, 'y': 6.0}]

    def test_options_from_dict_ignores_unknown_keys(self):
        """Only known option names are taken from config."""
        options = CorrelationOptions.from_dict({'max_correlations': 3, 'colour': 'blue'})
        assert options.max_correlations == 3
        assert options.min_relevance_score == 5


# ============================================================================
# ANALYSIS
# ============================================================================

@pytest.mark.unit
class TestAnalyzeCorrelations:
    """Test the full discovery run."""

    def test_configured_pair(self, engine, herd_rows):
        """The top correlation is the highest-relevance configured pair."""
        report = engine.analyze_correlations(herd_rows, 'bovine')
        top = report.top_correlations[0]

        assert (top.var1, top.var2) == ('peso_nascimento', 'peso_desmame')
        assert top.coefficient == pytest.approx(1.0)
        assert top.relevance_score == 10
        assert top.category == 'Crescimento'
        assert top.matches_expectation
        assert top.significant
        assert top.ideal_range == {'min': 0.4, 'max': 0.8}
        assert len(top.data_points) == 12

    def test_counts_cover_unfiltered_correlations(self, engine, herd_rows):
        """Ad-hoc pairs are counted even when filtered out of the ranking."""
        report = engine.analyze_correlations(herd_rows, 'bovine')

        assert report.total_correlations == 6
        assert report.significant_correlations == 6
        assert report.high_relevance_correlations == 1
        assert report.correlations_by_category == {'Crescimento': 1, 'Qualidade': 1, 'Outros': 4}
        assert [c.relevance_score for c in report.all_correlations] == [10, 6]

    def test_additional_pairs(self, engine, herd_rows):
        """Strong unconfigured pairs are reported with relevance 3."""
        report = engine.analyze_correlations(herd_rows, 'bovine', CorrelationOptions(min_relevance_score=0))

        assert len(report.all_correlations) == 6
        additional = report.all_correlations[2:]
        assert all(c.relevance_score == 3 and c.category == 'Outros' for c in additional)
        assert all(c.expected_direction == 'either' and c.matches_expectation for c in additional)
        pairs = {frozenset((c.var1, c.var2)) for c in report.all_correlations}
        assert len(pairs) == 6

    def test_unexpected_direction_warning(self, engine, herd_rows):
        """A significant correlation against the expected sign is flagged."""
        report = engine.analyze_correlations(herd_rows, 'bovine')

        quality = [c for c in report.all_correlations if c.category == 'Qualidade'][0]
        assert not quality.matches_expectation
        assert any('Correlação inesperada: idade vs ecc' in w for w in report.warnings)

    def test_strong_relevant_recommendation(self, engine, herd_rows):
        """Strong significant high-relevance pairs become recommendations."""
        report = engine.analyze_correlations(herd_rows, 'bovine')

        assert any(r.startswith('✅ Crescimento: peso_nascimento e peso_desmame') for r in report.recommendations)
        assert not any('Poucas' in r for r in report.recommendations)

    def test_max_correlations_truncates_top_only(self, engine, herd_rows):
        """max_correlations limits top_correlations, not all_correlations."""
        report = engine.analyze_correlations(herd_rows, 'bovine', CorrelationOptions(max_correlations=1))
        assert len(report.top_correlations) == 1
        assert len(report.all_correlations) == 2

    def test_few_significant_recommendation(self, engine, herd_rows):
        """Fewer than three significant correlations suggests collecting more data."""
        rows = [{'peso_nascimento': r['peso_nascimento'], 'peso_desmame': r['peso_desmame']} for r in herd_rows]
        report = engine.analyze_correlations(rows, 'bovine')

        assert report.significant_correlations == 1
        assert any(r.startswith('📊 Poucas correlações significativas') for r in report.recommendations)

    def test_not_enough_points(self, engine, herd_rows):
        """Pairs below min_data_points are skipped."""
        report = engine.analyze_correlations(herd_rows, 'bovine', CorrelationOptions(min_data_points=20))

        assert report.total_correlations == 0
        assert report.recommendations == [
            '⚠️ Nenhuma correlação significativa encontrada. Verifique a qualidade e variabilidade dos dados.'
        ]

    def test_insufficient_numeric_columns(self, engine):
        """Fewer than two numeric columns gives an empty report."""
        report = engine.analyze_correlations([{'raca': 'Nelore', 'peso': '450'}], 'bovine')

        assert report.total_correlations == 0
        assert report.warnings == ['Dados insuficientes: são necessárias pelo menos 2 variáveis numéricas']

    def test_unknown_species(self, engine, herd_rows):
        """An unconfigured species returns an empty report with a warning."""
        report = engine.analyze_correlations(herd_rows, 'lhama')

        assert report.total_correlations == 0
        assert report.warnings == ['Configuração de correlação não encontrada para espécie: lhama']

    def test_unknown_species_fallback(self, engine, herd_rows):
        """With the fallback enabled only ad-hoc pairs are searched."""
        options = CorrelationOptions(min_relevance_score=0, allow_unknown_species_fallback=True)
        report = engine.analyze_correlations(herd_rows, 'lhama', options)

        assert report.warnings[0].startswith("⚠️ Configuração específica não encontrada para 'lhama'")
        assert report.total_correlations == 6
        assert all(c.category == 'Outros' for c in report.all_correlations)

    def test_species_alias(self, engine, herd_rows):
        """Portuguese species names resolve to the canonical configuration."""
        report = engine.analyze_correlations(herd_rows, 'gado')
        assert report.top_correlations[0].category == 'Crescimento'

    def test_dataframe_input(self, species_configs, herd_rows):
        """DataFrames are accepted."""
        report = CorrelationDiscoveryEngine(species_configs).analyze_correlations(pd.DataFrame(herd_rows), 'bovine')
        assert report.total_correlations == 6

    def test_report_to_dict_omits_points(self, engine, herd_rows):
        """Serialised reports leave out data points by default."""
        data = engine.analyze_correlations(herd_rows, 'bovine').to_dict()
        assert 'data_points' not in data['top_correlations'][0]
        assert 'data_points' in engine.analyze_correlations(herd_rows, 'bovine').to_dict(include_points=True)['top_correlations'][0]

    def test_get_top_correlations(self, engine, herd_rows):
        """The first N ranked correlations."""
        report = engine.analyze_correlations(herd_rows, 'bovine')
        assert get_top_correlations(report, 1) == report.all_correlations[:1]

    def test_top_list_uses_max_correlations_not_five(self, engine, herd_rows):
        """top_correlations keeps up to max_correlations; the five-item cut is get_top_correlations."""
        report = engine.analyze_correlations(herd_rows, 'bovine', CorrelationOptions(min_relevance_score=0))
        assert len(report.top_correlations) == 6
        assert report.top_correlations == report.all_correlations
        assert len(get_top_correlations(report)) == 5

    def test_bundled_configuration(self, herd_rows):
        """The module-level helper uses the bundled species table."""
        report = analyze_correlations(herd_rows, 'bovinos')
        assert report.total_correlations > 0
        assert CorrelationDiscoveryEngine().get_correlation_pairs('bovine')


# ============================================================================
# PLANNING AND INTERPRETATION
# ============================================================================

@pytest.mark.unit
class TestPlanningAndInterpretation:
    """Test proposals, missing variables and markdown interpretation."""

    def test_propose_correlations(self, engine):
        """Available pairs are proposed highest priority first."""
        proposals = engine.propose_correlations(['ecc', 'idade', 'peso_nascimento', 'peso_desmame'], 'bovine')

        assert [p['priority'] for p in proposals] == [10, 6]
        assert proposals[0]['var1'] == 'peso_nascimento'
        assert proposals[0]['reason'].startswith('Crescimento: ')

    def test_missing_variables(self, engine):
        """Only variables of high-relevance pairs are listed."""
        missing = engine.get_missing_variables(['peso_nascimento'], 'bovine')
        assert missing == [{
            'variable': 'peso_desmame',
            'importance': 'Alta',
            'reason': 'Necessário para análise de Crescimento: Vigor ao nascer se mantém até o desmame',
        }]

    def test_missing_variables_unknown_species(self, engine):
        """Nothing is missing for an unconfigured species."""
        assert engine.get_missing_variables(['x'], 'lhama') == []

    def test_interpretation_of_strong_correlation(self, engine, herd_rows):
        """Strong significant correlations carry category advice."""
        top = engine.analyze_correlations(herd_rows, 'bovine').top_correlations[0]
        text = generate_correlation_interpretation(top)

        assert text.startswith('**peso_nascimento vs peso_desmame** (Crescimento)')
        assert '🎯 **Relevância Biológica:** 10/10' in text
        assert '**Recomendações:**' in text
        assert '- Considere para seleção genética e melhoramento' in text
        assert text.endswith('\n')

    def test_interpretation_of_unexpected_correlation(self, engine, herd_rows):
        """Unexpected directions carry an attention note."""
        report = engine.analyze_correlations(herd_rows, 'bovine')
        quality = [c for c in report.all_correlations if c.category == 'Qualidade'][0]
        assert '⚠️ **Atenção:**' in generate_correlation_interpretation(quality)
