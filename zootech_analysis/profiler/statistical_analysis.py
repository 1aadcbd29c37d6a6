"""
Inferential statistics for zootechnical comparisons using scipy.

Provides:
- Critical t values from lookup tables (90/95/99%) and confidence intervals
- One-sample, independent (pooled) and paired t-tests with effect sizes
- One-way ANOVA with eta-squared
- Pearson correlation with strength/direction labels
- Simple linear regression (OLS)
- Summary statistics with a t-based confidence interval

Every test returns a dataclass with a Portuguese ``interpretation`` string
ready for reports. Values go through the lenient number parser and anything
unparsable counts as missing: it is dropped from single samples, and paired
inputs lose the whole pair. Structural problems (raw sequences of different
lengths, too few remaining observations, too few groups) raise
StatisticalInputError subclasses.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence, Tuple, Union

import numpy as np
from scipy import stats

from zootech_analysis.core.constants import (
    DEFAULT_ALPHA,
    DEFAULT_CONFIDENCE_LEVEL,
    SUPPORTED_CONFIDENCE_LEVELS,
    EFFECT_SIZE_THRESHOLDS,
    CORRELATION_STRENGTH_THRESHOLDS,
    OUTLIER_IQR_MULTIPLIER,
    STATS_DECIMAL_PLACES,
    CV_DECIMAL_PLACES,
)
from zootech_analysis.core.exceptions import (
    InsufficientDataError,
    InsufficientGroupsError,
    LengthMismatchError,
    ParameterValidationError,
)
from zootech_analysis.utils.number_utils import parse_lenient_number

logger = logging.getLogger(__name__)


# ============================================================================
# Critical values of Student's t (two-sided)
# ============================================================================

# Exact for df 1-10, then bucketed; beyond 120 the normal value is used
T_TABLES: Dict[float, Dict[int, float]] = {
    0.90: {
        1: 6.314, 2: 2.920, 3: 2.353, 4: 2.132, 5: 2.015,
        6: 1.943, 7: 1.895, 8: 1.860, 9: 1.833, 10: 1.812,
        15: 1.753, 20: 1.725, 25: 1.708, 30: 1.697, 40: 1.684,
        50: 1.676, 60: 1.671, 80: 1.664, 100: 1.660, 120: 1.658,
    },
    0.95: {
        1: 12.706, 2: 4.303, 3: 3.182, 4: 2.776, 5: 2.571,
        6: 2.447, 7: 2.365, 8: 2.306, 9: 2.262, 10: 2.228,
        15: 2.131, 20: 2.086, 25: 2.060, 30: 2.042, 40: 2.021,
        50: 2.009, 60: 2.000, 80: 1.990, 100: 1.984, 120: 1.980,
    },
    0.99: {
        1: 63.657, 2: 9.925, 3: 5.841, 4: 4.604, 5: 4.032,
        6: 3.707, 7: 3.499, 8: 3.355, 9: 3.250, 10: 3.169,
        15: 2.947, 20: 2.845, 25: 2.787, 30: 2.750, 40: 2.704,
        50: 2.678, 60: 2.660, 80: 2.639, 100: 2.626, 120: 2.617,
    },
}

NORMAL_CRITICAL_VALUES: Dict[float, float] = {0.90: 1.645, 0.95: 1.96, 0.99: 2.576}

EFFECT_SIZE_LABELS = ('trivial', 'pequeno', 'moderado', 'grande')

STRENGTH_LABELS = ('very weak', 'weak', 'moderate', 'strong', 'very strong')
STRENGTH_LABELS_PT = {
    'very weak': 'muito fraca',
    'weak': 'fraca',
    'moderate': 'moderada',
    'strong': 'forte',
    'very strong': 'muito forte',
}


def _supported_level(confidence_level: float) -> float:
    for level in SUPPORTED_CONFIDENCE_LEVELS:
        if abs(confidence_level - level) < 1e-9:
            return level
    raise ParameterValidationError(
        f"Nível de confiança não suportado: {confidence_level} (use 0.90, 0.95 ou 0.99)",
        parameter="confidence_level",
        value=confidence_level
    )


def t_critical(df: int, confidence_level: float = DEFAULT_CONFIDENCE_LEVEL) -> float:
    """
    Two-sided critical t value.

    Between tabulated degrees of freedom the largest tabulated df not above
    ``df`` is used, which errs towards wider intervals.

    Raises:
        ParameterValidationError: Unsupported confidence level or df < 1
    """
    level = _supported_level(confidence_level)
    if df < 1:
        raise ParameterValidationError(
            f"Graus de liberdade devem ser >= 1 (recebido {df})",
            parameter="df",
            value=df
        )

    table = T_TABLES[level]
    if df > max(table):
        return NORMAL_CRITICAL_VALUES[level]
    bucket = max(key for key in table if key <= df)
    return table[bucket]


def _two_sided_p_value(t_statistic: float, df: float) -> float:
    if math.isinf(t_statistic):
        return 0.0
    p_value = 2 * stats.t.sf(abs(t_statistic), df)
    return float(min(1.0, max(0.0, p_value)))


def _as_float_array(values: Sequence[Any]) -> np.ndarray:
    """Leniently parsed numbers; unparsable entries are treated as missing."""
    parsed = [parse_lenient_number(value) for value in values]
    return np.asarray([number for number in parsed if number is not None], dtype=float)


def _as_paired_arrays(x: Sequence[Any], y: Sequence[Any], operation: str) -> Tuple[np.ndarray, np.ndarray]:
    """
    Parse two aligned sequences, dropping every pair with a missing side.

    Raises:
        LengthMismatchError: If the raw sequences differ in length
    """
    if len(x) != len(y):
        raise LengthMismatchError(
            "Os vetores devem ter o mesmo tamanho",
            operation=operation,
            left_length=len(x),
            right_length=len(y)
        )

    xs, ys = [], []
    for raw_x, raw_y in zip(x, y):
        number_x = parse_lenient_number(raw_x)
        number_y = parse_lenient_number(raw_y)
        if number_x is not None and number_y is not None:
            xs.append(number_x)
            ys.append(number_y)
    return np.asarray(xs, dtype=float), np.asarray(ys, dtype=float)


def _sample_std(data: np.ndarray) -> float:
    return float(data.std(ddof=1)) if len(data) > 1 else 0.0


def interpret_effect_size(cohens_d: float) -> str:
    """Label |d|: trivial < 0.2 <= pequeno < 0.5 <= moderado < 0.8 <= grande."""
    magnitude = abs(cohens_d)
    for threshold, label in zip(EFFECT_SIZE_THRESHOLDS, EFFECT_SIZE_LABELS):
        if magnitude < threshold:
            return label
    return EFFECT_SIZE_LABELS[-1]


def correlation_strength(coefficient: float) -> str:
    magnitude = abs(coefficient)
    for threshold, label in zip(CORRELATION_STRENGTH_THRESHOLDS, STRENGTH_LABELS):
        if magnitude < threshold:
            return label
    return STRENGTH_LABELS[-1]


def correlation_direction(coefficient: float) -> str:
    if coefficient > 0:
        return 'positive'
    if coefficient < 0:
        return 'negative'
    return 'none'


# ============================================================================
# Result types
# ============================================================================

@dataclass
class ConfidenceInterval:
    lower: float
    upper: float
    margin: float

    def contains(self, value: float) -> bool:
        return self.lower <= value <= self.upper

    def to_dict(self) -> Dict[str, float]:
        return {"lower": self.lower, "upper": self.upper, "margin": self.margin}


@dataclass
class OneSampleTTestResult:
    t_statistic: float
    p_value: float
    degrees_of_freedom: int
    mean: float
    reference_value: float
    significant: bool
    confidence_interval: ConfidenceInterval

    def to_dict(self) -> Dict[str, Any]:
        return {
            "t_statistic": self.t_statistic,
            "p_value": self.p_value,
            "degrees_of_freedom": self.degrees_of_freedom,
            "mean": self.mean,
            "reference_value": self.reference_value,
            "significant": self.significant,
            "confidence_interval": self.confidence_interval.to_dict(),
        }


@dataclass
class TTestResult:
    """
    Two-sample (independent or paired) t-test outcome.

    Attributes:
        statistic: t statistic
        p_value: Two-sided p-value in [0, 1]
        degrees_of_freedom: n1 + n2 - 2 (independent) or n - 1 (paired)
        mean_difference: mean(group1) - mean(group2), or mean(before - after)
        confidence_interval: (lower, upper) for the mean difference
        significant: p_value < alpha
        effect_size: Cohen's d
        effect_size_label: trivial, pequeno, moderado or grande
        interpretation: Portuguese summary
    """
    statistic: float
    p_value: float
    degrees_of_freedom: int
    mean_difference: float
    confidence_interval: Tuple[float, float]
    significant: bool
    effect_size: float
    effect_size_label: str
    interpretation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "statistic": self.statistic,
            "p_value": self.p_value,
            "degrees_of_freedom": self.degrees_of_freedom,
            "mean_difference": self.mean_difference,
            "confidence_interval": list(self.confidence_interval),
            "significant": self.significant,
            "effect_size": self.effect_size,
            "effect_size_label": self.effect_size_label,
            "interpretation": self.interpretation,
        }


@dataclass
class GroupSummary:
    name: str
    mean: float
    std_dev: float
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "mean": self.mean, "std_dev": self.std_dev, "count": self.count}


@dataclass
class ANOVAResult:
    f_statistic: float
    p_value: float
    degrees_of_freedom_between: int
    degrees_of_freedom_within: int
    ss_between: float
    ss_within: float
    significant: bool
    effect_size: float
    groups: List[GroupSummary] = field(default_factory=list)
    interpretation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "f_statistic": self.f_statistic,
            "p_value": self.p_value,
            "degrees_of_freedom_between": self.degrees_of_freedom_between,
            "degrees_of_freedom_within": self.degrees_of_freedom_within,
            "ss_between": self.ss_between,
            "ss_within": self.ss_within,
            "significant": self.significant,
            "effect_size": self.effect_size,
            "groups": [group.to_dict() for group in self.groups],
            "interpretation": self.interpretation,
        }


@dataclass
class PearsonResult:
    coefficient: float
    p_value: float
    significant: bool
    strength: str
    direction: str
    n: int
    interpretation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "coefficient": self.coefficient,
            "p_value": self.p_value,
            "significant": self.significant,
            "strength": self.strength,
            "direction": self.direction,
            "n": self.n,
            "interpretation": self.interpretation,
        }


@dataclass
class RegressionResult:
    slope: float
    intercept: float
    r_squared: float
    p_value: float
    standard_error: float
    predictions: List[float]
    residuals: List[float]
    equation: str
    interpretation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slope": self.slope,
            "intercept": self.intercept,
            "r_squared": self.r_squared,
            "p_value": self.p_value,
            "standard_error": self.standard_error,
            "predictions": list(self.predictions),
            "residuals": list(self.residuals),
            "equation": self.equation,
            "interpretation": self.interpretation,
        }


@dataclass
class StatsWithCI:
    """Population-variance summary of a sample plus a t-based confidence interval."""
    count: int
    mean: float
    median: float
    std_dev: float
    variance: float
    min: float
    max: float
    range: float
    q1: float
    q3: float
    iqr: float
    cv: float
    outliers: List[float]
    ci95: ConfidenceInterval
    missing: int = 0

    @property
    def valid_count(self) -> int:
        return self.count

    @property
    def missing_count(self) -> int:
        return self.missing

    def significantly_different_from(self, value: float) -> bool:
        """True when ``value`` lies outside the confidence interval."""
        return value < self.ci95.lower or value > self.ci95.upper

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "valid_count": self.valid_count,
            "missing_count": self.missing_count,
            "mean": self.mean,
            "median": self.median,
            "std_dev": self.std_dev,
            "variance": self.variance,
            "min": self.min,
            "max": self.max,
            "range": self.range,
            "q1": self.q1,
            "q3": self.q3,
            "iqr": self.iqr,
            "cv": self.cv,
            "outliers": list(self.outliers),
            "ci95": self.ci95.to_dict(),
        }


# ============================================================================
# Confidence intervals
# ============================================================================

def calculate_confidence_interval(
    data: Sequence[Any],
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL
) -> ConfidenceInterval:
    """
    Confidence interval for the mean: mean +/- t_critical(n-1) * sd/sqrt(n).

    With fewer than two values the interval collapses onto the single value
    (or 0 for no values) with a zero margin.
    """
    level = _supported_level(confidence_level)
    values = _as_float_array(data)
    n = len(values)

    if n < 2:
        point = float(values[0]) if n else 0.0
        return ConfidenceInterval(lower=point, upper=point, margin=0.0)

    mean = float(values.mean())
    sem = _sample_std(values) / math.sqrt(n)
    margin = t_critical(n - 1, level) * sem
    return ConfidenceInterval(lower=mean - margin, upper=mean + margin, margin=margin)


def calculate_stats_with_ci(
    data: Sequence[Any],
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL
) -> StatsWithCI:
    """
    Summary statistics with a confidence interval.

    Uses the population variance (divide by n) for the summary and
    nearest-rank quartiles; the interval itself uses the sample standard
    deviation.

    Raises:
        InsufficientDataError: If ``data`` is empty
    """
    values = _as_float_array(data)
    n = len(values)
    if n == 0:
        raise InsufficientDataError(
            "São necessárias pelo menos 1 observação",
            operation="calculate_stats_with_ci",
            required=1,
            actual=0
        )

    ordered = np.sort(values)
    mean = float(values.mean())
    median = float(np.median(ordered))
    variance = float(values.var())
    std_dev = math.sqrt(variance)
    cv = std_dev / abs(mean) * 100 if mean != 0 else 0.0

    q1 = float(ordered[int(math.floor(n * 0.25))])
    q3 = float(ordered[min(int(math.floor(n * 0.75)), n - 1)])
    iqr = q3 - q1
    lower_fence = q1 - OUTLIER_IQR_MULTIPLIER * iqr
    upper_fence = q3 + OUTLIER_IQR_MULTIPLIER * iqr

    return StatsWithCI(
        count=n,
        mean=round(mean, STATS_DECIMAL_PLACES),
        median=round(median, STATS_DECIMAL_PLACES),
        std_dev=round(std_dev, STATS_DECIMAL_PLACES),
        variance=round(variance, STATS_DECIMAL_PLACES),
        min=float(ordered[0]),
        max=float(ordered[-1]),
        range=float(ordered[-1] - ordered[0]),
        q1=q1,
        q3=q3,
        iqr=iqr,
        cv=round(cv, CV_DECIMAL_PLACES),
        outliers=[float(v) for v in values if v < lower_fence or v > upper_fence],
        ci95=calculate_confidence_interval(values.tolist(), confidence_level),
        missing=len(data) - n,
    )


# ============================================================================
# t-tests
# ============================================================================

def one_sample_t_test(
    data: Sequence[Any],
    reference_value: float,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL,
    alpha: float = DEFAULT_ALPHA
) -> OneSampleTTestResult:
    """
    Test whether the sample mean differs from a reference value.

    Raises:
        InsufficientDataError: If fewer than 2 observations
    """
    values = _as_float_array(data)
    n = len(values)
    if n < 2:
        raise InsufficientDataError(
            "São necessárias pelo menos 2 observações",
            operation="one_sample_t_test",
            required=2,
            actual=n
        )

    mean = float(values.mean())
    sem = _sample_std(values) / math.sqrt(n)
    df = n - 1

    if sem == 0:
        t_statistic, p_value = 0.0, 1.0
    else:
        t_statistic = (mean - reference_value) / sem
        p_value = _two_sided_p_value(t_statistic, df)

    return OneSampleTTestResult(
        t_statistic=t_statistic,
        p_value=p_value,
        degrees_of_freedom=df,
        mean=mean,
        reference_value=reference_value,
        significant=p_value < alpha,
        confidence_interval=calculate_confidence_interval(values.tolist(), confidence_level),
    )


def independent_t_test(
    group1: Sequence[Any],
    group2: Sequence[Any],
    alpha: float = DEFAULT_ALPHA,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL
) -> TTestResult:
    """
    Student's t-test for two independent samples with pooled variance.

    Raises:
        InsufficientDataError: If either group has fewer than 2 observations
    """
    first = _as_float_array(group1)
    second = _as_float_array(group2)
    n1, n2 = len(first), len(second)
    if n1 < 2 or n2 < 2:
        raise InsufficientDataError(
            "Cada grupo deve ter pelo menos 2 observações",
            operation="independent_t_test",
            required=2,
            actual=min(n1, n2)
        )

    mean1 = float(first.mean())
    mean2 = float(second.mean())
    mean_diff = mean1 - mean2

    pooled_variance = ((n1 - 1) * _sample_std(first) ** 2 + (n2 - 1) * _sample_std(second) ** 2) / (n1 + n2 - 2)
    standard_error = math.sqrt(pooled_variance * (1 / n1 + 1 / n2))
    df = n1 + n2 - 2

    if standard_error == 0:
        t_statistic, p_value, cohens_d = 0.0, 1.0, 0.0
    else:
        t_statistic = mean_diff / standard_error
        p_value = _two_sided_p_value(t_statistic, df)
        cohens_d = mean_diff / math.sqrt(pooled_variance)

    margin = t_critical(df, confidence_level) * standard_error
    significant = p_value < alpha
    effect_label = interpret_effect_size(cohens_d)

    interpretation = "Teste t para amostras independentes: "
    if significant:
        comparison = "maior que" if mean_diff > 0 else "menor que"
        interpretation += (
            f"Diferença significativa entre os grupos (p = {p_value:.4f}). "
            f"Grupo 1 (M = {mean1:.2f}) {comparison} Grupo 2 (M = {mean2:.2f})."
        )
    else:
        interpretation += f"Não há diferença significativa entre os grupos (p = {p_value:.4f})."
    interpretation += f" Tamanho do efeito: {effect_label}."

    return TTestResult(
        statistic=t_statistic,
        p_value=p_value,
        degrees_of_freedom=df,
        mean_difference=mean_diff,
        confidence_interval=(mean_diff - margin, mean_diff + margin),
        significant=significant,
        effect_size=cohens_d,
        effect_size_label=effect_label,
        interpretation=interpretation,
    )


def paired_t_test(
    before: Sequence[Any],
    after: Sequence[Any],
    alpha: float = DEFAULT_ALPHA,
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL
) -> TTestResult:
    """
    Paired t-test on before - after differences.

    Raises:
        LengthMismatchError: If the samples differ in length
        InsufficientDataError: If fewer than 2 complete pairs
    """
    first, second = _as_paired_arrays(before, after, "paired_t_test")

    n = len(first)
    if n < 2:
        raise InsufficientDataError(
            "São necessárias pelo menos 2 pares de observações",
            operation="paired_t_test",
            required=2,
            actual=n
        )

    differences = first - second
    mean_diff = float(differences.mean())
    std_diff = _sample_std(differences)
    standard_error = std_diff / math.sqrt(n)
    df = n - 1

    if standard_error == 0:
        t_statistic, p_value, cohens_d = 0.0, 1.0, 0.0
    else:
        t_statistic = mean_diff / standard_error
        p_value = _two_sided_p_value(t_statistic, df)
        cohens_d = mean_diff / std_diff

    margin = t_critical(df, confidence_level) * standard_error
    significant = p_value < alpha

    if significant:
        interpretation = (
            f"Teste t pareado: Diferença significativa entre antes (M = {float(first.mean()):.2f}) "
            f"e depois (M = {float(second.mean()):.2f}), p = {p_value:.4f}."
        )
    else:
        interpretation = f"Teste t pareado: Não há diferença significativa (p = {p_value:.4f})."

    return TTestResult(
        statistic=t_statistic,
        p_value=p_value,
        degrees_of_freedom=df,
        mean_difference=mean_diff,
        confidence_interval=(mean_diff - margin, mean_diff + margin),
        significant=significant,
        effect_size=cohens_d,
        effect_size_label=interpret_effect_size(cohens_d),
        interpretation=interpretation,
    )


# ============================================================================
# ANOVA
# ============================================================================

GroupsInput = Union[Mapping[str, Sequence[Any]], Sequence[Tuple[str, Sequence[Any]]]]


def one_way_anova(groups: GroupsInput, alpha: float = DEFAULT_ALPHA) -> ANOVAResult:
    """
    One-way ANOVA.

    Args:
        groups: {name: values} or [(name, values), ...]
        alpha: Significance level

    Raises:
        InsufficientGroupsError: If fewer than 2 groups
        InsufficientDataError: If a group is empty or there are no more
            observations than groups
    """
    items = list(groups.items()) if isinstance(groups, Mapping) else list(groups)
    if len(items) < 2:
        raise InsufficientGroupsError(actual=len(items))

    arrays = []
    for name, values in items:
        array = _as_float_array(values)
        if len(array) == 0:
            raise InsufficientDataError(
                f"O grupo '{name}' não possui observações",
                operation="one_way_anova",
                required=1,
                actual=0
            )
        arrays.append((str(name), array))

    all_values = np.concatenate([array for _, array in arrays])
    grand_mean = float(all_values.mean())
    total = len(all_values)
    k = len(arrays)

    df_between = k - 1
    df_within = total - k
    if df_within < 1:
        raise InsufficientDataError(
            "São necessárias mais observações do que grupos",
            operation="one_way_anova",
            required=k + 1,
            actual=total
        )

    ssb = float(sum(len(array) * (array.mean() - grand_mean) ** 2 for _, array in arrays))
    ssw = float(sum(((array - array.mean()) ** 2).sum() for _, array in arrays))

    msb = ssb / df_between
    msw = ssw / df_within

    if msw == 0:
        f_statistic, p_value = (0.0, 1.0) if ssb == 0 else (math.inf, 0.0)
    else:
        f_statistic = msb / msw
        p_value = float(min(1.0, max(0.0, stats.f.sf(f_statistic, df_between, df_within))))

    eta_squared = ssb / (ssb + ssw) if (ssb + ssw) > 0 else 0.0
    significant = p_value < alpha

    interpretation = "ANOVA de uma via: "
    if significant:
        interpretation += (
            f"Diferença significativa entre os grupos "
            f"(F({df_between}, {df_within}) = {f_statistic:.2f}, p = {p_value:.4f})."
        )
    else:
        interpretation += f"Não há diferença significativa entre os grupos (p = {p_value:.4f})."
    interpretation += f" Tamanho do efeito (η²) = {eta_squared:.3f}."

    return ANOVAResult(
        f_statistic=f_statistic,
        p_value=p_value,
        degrees_of_freedom_between=df_between,
        degrees_of_freedom_within=df_within,
        ss_between=ssb,
        ss_within=ssw,
        significant=significant,
        effect_size=eta_squared,
        groups=[
            GroupSummary(name=name, mean=float(array.mean()), std_dev=_sample_std(array), count=len(array))
            for name, array in arrays
        ],
        interpretation=interpretation,
    )


# ============================================================================
# Correlation and regression
# ============================================================================

def _paired_input(x: Sequence[Any], y: Sequence[Any], operation: str) -> Tuple[np.ndarray, np.ndarray]:
    xs, ys = _as_paired_arrays(x, y, operation)
    if len(xs) < 3:
        raise InsufficientDataError(
            "São necessárias pelo menos 3 observações",
            operation=operation,
            required=3,
            actual=len(xs)
        )
    return xs, ys


def pearson_correlation(x: Sequence[Any], y: Sequence[Any], alpha: float = DEFAULT_ALPHA) -> PearsonResult:
    """
    Pearson product-moment correlation.

    Significance uses t = r*sqrt(n-2)/sqrt(1-r^2) with n-2 degrees of
    freedom. A constant vector gives r = 0 and p = 1.

    Raises:
        LengthMismatchError: If x and y differ in length
        InsufficientDataError: If fewer than 3 complete pairs
    """
    xs, ys = _paired_input(x, y, "pearson_correlation")

    n = len(xs)
    dx = xs - xs.mean()
    dy = ys - ys.mean()
    denominator = math.sqrt(float((dx ** 2).sum()) * float((dy ** 2).sum()))

    if denominator == 0:
        r, p_value = 0.0, 1.0
    else:
        r = float(max(-1.0, min(1.0, (dx * dy).sum() / denominator)))
        if abs(r) == 1.0:
            p_value = 0.0
        else:
            t_statistic = r * math.sqrt(n - 2) / math.sqrt(1 - r * r)
            p_value = _two_sided_p_value(t_statistic, n - 2)

    strength = correlation_strength(r)
    direction = correlation_direction(r)
    significant = p_value < alpha

    direction_pt = {'positive': 'positiva', 'negative': 'negativa'}.get(direction, 'nula')
    interpretation = f"Correlação de Pearson: r = {r:.3f}, correlação {direction_pt} {STRENGTH_LABELS_PT[strength]}. "
    if significant:
        interpretation += f"Estatisticamente significativa (p = {p_value:.4f})."
    else:
        interpretation += f"Não significativa (p = {p_value:.4f})."

    return PearsonResult(
        coefficient=r,
        p_value=p_value,
        significant=significant,
        strength=strength,
        direction=direction,
        n=n,
        interpretation=interpretation,
    )


def linear_regression(x: Sequence[Any], y: Sequence[Any], alpha: float = DEFAULT_ALPHA) -> RegressionResult:
    """
    Ordinary least squares fit of y = slope*x + intercept.

    Raises:
        LengthMismatchError: If x and y differ in length
        InsufficientDataError: If fewer than 3 complete pairs
    """
    xs, ys = _paired_input(x, y, "linear_regression")

    n = len(xs)
    mean_x = float(xs.mean())
    mean_y = float(ys.mean())
    dx = xs - mean_x
    sxx = float((dx ** 2).sum())

    slope = float((dx * (ys - mean_y)).sum() / sxx) if sxx > 0 else 0.0
    intercept = mean_y - slope * mean_x

    predictions = slope * xs + intercept
    residuals = ys - predictions

    sst = float(((ys - mean_y) ** 2).sum())
    sse = float((residuals ** 2).sum())
    r_squared = 1 - sse / sst if sst > 0 else 0.0

    standard_error = math.sqrt(sse / (n - 2))
    se_slope = standard_error / math.sqrt(sxx) if sxx > 0 else 0.0
    if se_slope == 0:
        p_value = 0.0 if slope != 0 else 1.0
    else:
        p_value = _two_sided_p_value(slope / se_slope, n - 2)

    equation = f"y = {slope:.3f}x + {intercept:.3f}"
    interpretation = (
        f"Regressão linear: {equation}. R² = {r_squared:.3f} "
        f"({r_squared * 100:.1f}% da variância explicada). "
    )
    if p_value < alpha:
        interpretation += f"O modelo é estatisticamente significativo (p = {p_value:.4f})."
    else:
        interpretation += f"O modelo não é estatisticamente significativo (p = {p_value:.4f})."

    return RegressionResult(
        slope=slope,
        intercept=intercept,
        r_squared=r_squared,
        p_value=p_value,
        standard_error=standard_error,
        predictions=predictions.tolist(),
        residuals=residuals.tolist(),
        equation=equation,
        interpretation=interpretation,
    )
