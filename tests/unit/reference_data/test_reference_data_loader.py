"""
Tests for ReferenceDataLoader.

Validates that the bundled tables load and keep the shapes the engine relies on:
- Canonical metric catalogue
- Unit conversion factors
- NRC and EMBRAPA reference ranges
- Species correlation configurations
- Plausibility rules
"""

import pytest

from zootech_analysis.reference_data import ReferenceDataLoader


class TestCatalogues:
    """Tests for the metric catalogue and conversion tables."""

    def test_canonical_metrics_have_keys(self):
        """Every metric definition has a key and a species list."""
        metrics = ReferenceDataLoader.get_canonical_metrics()
        assert len(metrics) > 20
        for metric in metrics:
            assert metric['key'], "Metric without key"
            assert isinstance(metric.get('species', []), list)

    def test_canonical_keys_unique(self):
        """Canonical keys are not repeated."""
        keys = [metric['key'] for metric in ReferenceDataLoader.get_canonical_metrics()]
        assert len(keys) == len(set(keys))

    def test_unit_conversions(self):
        """Conversion factors are nested from_unit -> to_unit -> factor."""
        conversions = ReferenceDataLoader.get_unit_conversions()
        assert conversions['g/dia']['kg/dia'] == pytest.approx(0.001)


class TestReferenceRanges:
    """Tests for the NRC and EMBRAPA tables."""

    def test_nrc_species(self):
        """NRC covers cattle, swine and poultry."""
        assert set(ReferenceDataLoader.get_nrc_references()) == {'bovine', 'swine', 'poultry'}

    def test_nrc_ranges_are_ordered(self):
        """min <= ideal_min <= ideal_max <= max for every NRC entry."""
        for species, subtypes in ReferenceDataLoader.get_nrc_references().items():
            for subtype, metrics in subtypes.items():
                for metric, data in metrics.items():
                    assert data['min'] <= data['ideal_min'] <= data['ideal_max'] <= data['max'], \
                        f"{species}/{subtype}/{metric} out of order"

    def test_embrapa_groups(self):
        """EMBRAPA groups forage, sheep/goat, aquaculture and bees."""
        assert set(ReferenceDataLoader.get_embrapa_references()) == {'forage', 'sheep_goat', 'aquaculture', 'bees'}

    def test_embrapa_ideal_inside_range(self):
        """Single ideals lie within [min, max]."""
        embrapa = ReferenceDataLoader.get_embrapa_references()
        groups = list(embrapa['sheep_goat'].values()) + list(embrapa['aquaculture'].values()) \
            + list(embrapa['bees'].values())
        for varieties in embrapa['forage'].values():
            groups.extend(varieties.values())

        for metrics in groups:
            for data in metrics.values():
                if 'ideal' in data:
                    assert data['min'] <= data['ideal'] <= data['max']


class TestSpeciesTables:
    """Tests for correlation and plausibility tables."""

    def test_correlation_pairs_shape(self):
        """Every pair has keywords, a category and a 0-10 relevance."""
        for species, config in ReferenceDataLoader.get_species_correlations().items():
            assert config['expected_fields'], f"{species} without expected fields"
            for pair in config['correlation_pairs']:
                assert pair['var1_keywords'] and pair['var2_keywords']
                assert pair['category']
                assert 0 <= pair['relevance_score'] <= 10
                assert pair['expected_direction'] in ('positive', 'negative', 'either')

    def test_plausibility_rules(self):
        """Hard bounds enclose the soft ones."""
        for name, rule in ReferenceDataLoader.get_plausibility_rules().items():
            assert rule['min'] <= rule.get('warning_min', rule['min']), name
            assert rule.get('warning_max', rule['max']) <= rule['max'], name


class TestCaching:
    """Tests for the cache."""

    def test_same_object_returned(self):
        """Repeated calls return the cached object."""
        assert ReferenceDataLoader.get_nrc_references() is ReferenceDataLoader.get_nrc_references()

    def test_clear_cache(self):
        """Clearing the cache reloads equal data."""
        before = ReferenceDataLoader.get_plausibility_rules()
        ReferenceDataLoader.clear_cache()
        assert ReferenceDataLoader.get_plausibility_rules() == before

    def test_data_source_info(self):
        """Source info lists every table."""
        info = ReferenceDataLoader.get_data_source_info()
        assert set(info) == {'canonical_metrics', 'nrc_references', 'embrapa_references', 'species_correlations'}
