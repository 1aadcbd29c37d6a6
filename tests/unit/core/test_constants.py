"""
Unit tests for the constants module.

Checks that thresholds are defined and consistent with each other.
"""

import pytest
from zootech_analysis.core.constants import (
    MAX_YAML_FILE_SIZE,
    MAX_YAML_NESTING_DEPTH,
    OUTLIER_IQR_MULTIPLIER,
    MISSING_VALUE_TOKENS,
    NUMERIC_MIN_RATIO,
    SUPPORTED_CONFIDENCE_LEVELS,
    DEFAULT_CONFIDENCE_LEVEL,
    EFFECT_SIZE_THRESHOLDS,
    CORRELATION_STRENGTH_THRESHOLDS,
    GPD_TOLERANCE,
    FCR_TOLERANCE,
    IEP_TOLERANCE,
    DEFAULT_MAX_CORRELATIONS,
    DEFAULT_MIN_RELEVANCE_SCORE,
    HIGH_RELEVANCE_SCORE,
    ADDITIONAL_PAIR_RELEVANCE,
    EMBRAPA_IDEAL_BAND,
    SINGLE_IDEAL_TOLERANCE,
)


@pytest.mark.unit
class TestConstants:
    """Test constant values."""

    def test_yaml_limits_positive(self):
        """YAML safety limits are positive."""
        assert MAX_YAML_FILE_SIZE > 0
        assert MAX_YAML_NESTING_DEPTH > 0

    def test_tukey_multiplier(self):
        """Outlier fences use Tukey's 1.5."""
        assert OUTLIER_IQR_MULTIPLIER == 1.5

    def test_missing_tokens(self):
        """Empty, null and undefined count as missing."""
        assert {'', 'null', 'undefined'} <= MISSING_VALUE_TOKENS

    def test_numeric_ratio_is_fraction(self):
        """Numeric detection threshold is a fraction."""
        assert 0 < NUMERIC_MIN_RATIO < 1

    def test_default_confidence_supported(self):
        """The default confidence level is one of the tabulated levels."""
        assert DEFAULT_CONFIDENCE_LEVEL in SUPPORTED_CONFIDENCE_LEVELS

    def test_thresholds_are_increasing(self):
        """Effect size and correlation thresholds are strictly increasing."""
        assert list(EFFECT_SIZE_THRESHOLDS) == sorted(EFFECT_SIZE_THRESHOLDS)
        assert list(CORRELATION_STRENGTH_THRESHOLDS) == sorted(CORRELATION_STRENGTH_THRESHOLDS)

    def test_tolerances(self):
        """Derived-index tolerances are fractions, IEP the strictest."""
        assert GPD_TOLERANCE == 0.15
        assert FCR_TOLERANCE == 0.15
        assert IEP_TOLERANCE == 0.10

    def test_relevance_scale(self):
        """Relevance thresholds stay on the 0..10 scale."""
        assert 0 <= ADDITIONAL_PAIR_RELEVANCE < DEFAULT_MIN_RELEVANCE_SCORE < HIGH_RELEVANCE_SCORE <= 10
        assert DEFAULT_MAX_CORRELATIONS > 0

    def test_reference_bands(self):
        """Single-ideal bands are 5% (ideal range) and 10% (excellent)."""
        assert EMBRAPA_IDEAL_BAND == 0.05
        assert SINGLE_IDEAL_TOLERANCE == 0.10
