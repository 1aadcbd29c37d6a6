"""
Zootech Analysis Constants.

This module defines the magic numbers, configuration defaults and thresholds
used throughout the analysis engine. Centralizing these values keeps the
domain rules in one place and documents where each number comes from.
"""

# ============================================================================
# Configuration Security Limits
# ============================================================================

# Maximum YAML configuration file size (1MB)
# Analysis configs are a handful of keys; anything larger is not a config file
MAX_YAML_FILE_SIZE: int = 1 * 1024 * 1024

# Maximum YAML nesting depth
MAX_YAML_NESTING_DEPTH: int = 10

# Maximum number of keys in a YAML document
MAX_YAML_KEY_COUNT: int = 1_000


# ============================================================================
# Descriptive Statistics
# ============================================================================

# IQR multiplier for outlier fences (Tukey's rule)
OUTLIER_IQR_MULTIPLIER: float = 1.5

# Minimum sample size before skewness is reported
# Rationale: the third-moment estimator is too unstable on tiny samples
MIN_SAMPLES_FOR_SKEWNESS: int = 10

# Decimal places used when rounding statistics for presentation
STATS_DECIMAL_PLACES: int = 4
CV_DECIMAL_PLACES: int = 2
FREQUENCY_DECIMAL_PLACES: int = 2

# Tokens treated as missing in raw columns (after trimming, case-insensitive)
MISSING_VALUE_TOKENS: frozenset = frozenset({'', 'null', 'undefined'})


# ============================================================================
# Variable Type Detection
# ============================================================================

# Share of values that must parse as numbers for a column to be quantitative
NUMERIC_MIN_RATIO: float = 0.9

# A numeric column of integers is discrete when its distinct ratio is below
# DISCRETE_MAX_UNIQUE_RATIO, or when values repeat and there are at most
# DISCRETE_MAX_DISTINCT of them
DISCRETE_MAX_DISTINCT: int = 10
DISCRETE_MAX_UNIQUE_RATIO: float = 0.1

# Identifier columns: every value unique and mostly non-numeric codes
IDENTIFIER_MAX_NUMERIC_RATIO: float = 0.5


# ============================================================================
# Inferential Statistics
# ============================================================================

DEFAULT_CONFIDENCE_LEVEL: float = 0.95
DEFAULT_ALPHA: float = 0.05
SUPPORTED_CONFIDENCE_LEVELS: tuple = (0.90, 0.95, 0.99)

# Cohen's d thresholds (trivial < 0.2 <= small < 0.5 <= moderate < 0.8 <= large)
EFFECT_SIZE_THRESHOLDS: tuple = (0.2, 0.5, 0.8)

# |r| thresholds for correlation strength labels
CORRELATION_STRENGTH_THRESHOLDS: tuple = (0.2, 0.4, 0.6, 0.8)


# ============================================================================
# Cross-Field Validation
# ============================================================================

# Relative difference between reported and recalculated index that is an error.
# Half of the tolerance is the warning threshold.
GPD_TOLERANCE: float = 0.15
FCR_TOLERANCE: float = 0.15
IEP_TOLERANCE: float = 0.10


# ============================================================================
# Correlation Discovery
# ============================================================================

DEFAULT_MAX_CORRELATIONS: int = 20
DEFAULT_MIN_RELEVANCE_SCORE: int = 5
DEFAULT_MIN_DATA_POINTS: int = 10

# Rows inspected when deciding whether a column is numeric
NUMERIC_COLUMN_SAMPLE_ROWS: int = 10
NUMERIC_COLUMN_MIN_RATIO: float = 0.8

# Ad-hoc (non-configured) pairs must reach this |r| to be reported
ADDITIONAL_PAIR_MIN_ABS_R: float = 0.4
ADDITIONAL_PAIR_RELEVANCE: int = 3
ADDITIONAL_PAIR_CATEGORY: str = 'Outros'

# Relevance at and above which a correlation counts as high relevance
HIGH_RELEVANCE_SCORE: int = 8

# |r| above which a significant high-relevance pair becomes a recommendation
STRONG_CORRELATION_ABS_R: float = 0.6

TOP_CORRELATIONS_COUNT: int = 5
MAX_MISSING_VARIABLES: int = 10


# ============================================================================
# Reference Comparison
# ============================================================================

# EMBRAPA tables publish a single ideal value; the ideal band is +/- 5% of it
EMBRAPA_IDEAL_BAND: float = 0.05

# Tolerance around a single ideal value that still counts as excellent
SINGLE_IDEAL_TOLERANCE: float = 0.10


# ============================================================================
# Species Data Consistency
# ============================================================================

SPECIES_MISMATCH_MIN_GAP: int = 20
SPECIES_MISMATCH_MAX_SELECTED_SCORE: int = 30
SPECIES_MISMATCH_MIN_DETECTED_SCORE: int = 40
