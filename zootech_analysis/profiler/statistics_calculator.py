"""
Statistics Calculator - descriptive statistics for a single column.

Architecture:
    StatisticsCalculator is responsible for:
    1. Numeric statistics (mean, median, mode, variance, quartiles, outliers, cv, skewness)
    2. Categorical statistics (distribution, percent frequencies, entropy, most/least common)

Design Decisions:
    - Values go through the lenient parser, so "450,5" and "450 kg" count as numbers;
      anything unparsable counts as missing
    - Quartiles use nearest-rank selection on the sorted values
      (indices floor(n*0.25) and floor(n*0.75)), no interpolation
    - Variance is the sample variance (n-1), 0 for a single value
    - Skewness is only reported from MIN_SAMPLES_FOR_SKEWNESS values on
    - A column without a single numeric value raises NoValidNumericValuesError;
      every other data problem is absorbed into the counts

Usage:
    calculator = StatisticsCalculator()
    numeric = calculator.calculate_numeric_stats(["450", "480,5", None])
    categorical = calculator.calculate_categorical_stats(["Nelore", "Angus", "Nelore"])
"""

import logging
import math
from typing import Any, Dict, List, Optional

import numpy as np

from zootech_analysis.core.constants import (
    OUTLIER_IQR_MULTIPLIER,
    MIN_SAMPLES_FOR_SKEWNESS,
    STATS_DECIMAL_PLACES,
    CV_DECIMAL_PLACES,
    FREQUENCY_DECIMAL_PLACES,
)
from zootech_analysis.core.exceptions import NoValidNumericValuesError
from zootech_analysis.profiler.profile_result import CategoricalStats, NumericStats
from zootech_analysis.utils.number_utils import is_missing_value, parse_lenient_number

logger = logging.getLogger(__name__)


def _round(value: float, places: int = STATS_DECIMAL_PLACES) -> float:
    return round(float(value), places)


class StatisticsCalculator:
    """
    Stateless descriptive statistics for one column at a time.

    Identical inputs always give identical outputs.
    """

    def calculate_numeric_stats(self, values: List[Any]) -> NumericStats:
        """
        Calculate numeric statistics.

        Args:
            values: Raw column values

        Returns:
            NumericStats rounded to 4 decimals (cv to 2)

        Raises:
            NoValidNumericValuesError: If no value parses as a number
        """
        parsed = [parse_lenient_number(value) for value in values]
        numeric_values = [value for value in parsed if value is not None]

        if not numeric_values:
            raise NoValidNumericValuesError(total_values=len(values))

        data = np.asarray(numeric_values, dtype=float)
        ordered = np.sort(data)
        n = len(data)

        mean = float(data.mean())
        median = float(np.median(ordered))
        minimum = float(ordered[0])
        maximum = float(ordered[-1])

        variance = float(data.var(ddof=1)) if n > 1 else 0.0
        std_dev = math.sqrt(variance)
        cv = std_dev / abs(mean) * 100 if mean != 0 else 0.0

        q1 = float(ordered[int(math.floor(n * 0.25))])
        q3 = float(ordered[min(int(math.floor(n * 0.75)), n - 1)])
        iqr = q3 - q1

        lower_fence = q1 - OUTLIER_IQR_MULTIPLIER * iqr
        upper_fence = q3 + OUTLIER_IQR_MULTIPLIER * iqr
        outliers = [value for value in numeric_values if value < lower_fence or value > upper_fence]

        skewness = self._skewness(data, mean, std_dev) if n >= MIN_SAMPLES_FOR_SKEWNESS else None

        return NumericStats(
            count=len(values),
            valid_count=n,
            missing_count=len(values) - n,
            mean=_round(mean),
            median=_round(median),
            mode=self._mode(ordered),
            std_dev=_round(std_dev),
            variance=_round(variance),
            min=_round(minimum),
            max=_round(maximum),
            range=_round(maximum - minimum),
            q1=_round(q1),
            q3=_round(q3),
            iqr=_round(iqr),
            cv=_round(cv, CV_DECIMAL_PLACES),
            skewness=_round(skewness) if skewness is not None else None,
            outliers=outliers,
        )

    @staticmethod
    def _mode(ordered: np.ndarray) -> Optional[float]:
        """Most frequent value (smallest on ties); None when every value is unique."""
        unique, counts = np.unique(ordered, return_counts=True)
        if counts.max() == 1:
            return None
        return float(unique[int(np.argmax(counts))])

    @staticmethod
    def _skewness(data: np.ndarray, mean: float, std_dev: float) -> float:
        """Adjusted third-moment estimator n/((n-1)(n-2)) * sum(z^3)."""
        n = len(data)
        if std_dev == 0:
            return 0.0
        z = (data - mean) / std_dev
        return float(n / ((n - 1) * (n - 2)) * np.sum(z ** 3))

    def calculate_categorical_stats(self, values: List[Any]) -> CategoricalStats:
        """
        Calculate categorical statistics.

        Values are trimmed; None, empty strings and the tokens "null" and
        "undefined" are missing. Ties in most/least common resolve to the
        category seen first.
        """
        clean_values = [str(value).strip() for value in values if not is_missing_value(value)]
        n = len(clean_values)

        distribution: Dict[str, int] = {}
        for value in clean_values:
            distribution[value] = distribution.get(value, 0) + 1

        frequencies = {
            key: round(count / n * 100, FREQUENCY_DECIMAL_PLACES)
            for key, count in distribution.items()
        }

        most_common = ''
        least_common = ''
        if distribution:
            most_common = max(distribution, key=distribution.get)
            least_common = min(distribution, key=distribution.get)

        entropy = 0.0
        if n:
            probabilities = np.array(list(distribution.values()), dtype=float) / n
            entropy = max(0.0, float(-np.sum(probabilities * np.log2(probabilities))))

        return CategoricalStats(
            count=len(values),
            valid_count=n,
            missing_count=len(values) - n,
            unique_values=len(distribution),
            distribution=distribution,
            frequencies=frequencies,
            most_common=most_common,
            least_common=least_common,
            entropy=_round(entropy),
        )


_default_calculator = StatisticsCalculator()


def calculate_numeric_stats(values: List[Any]) -> NumericStats:
    return _default_calculator.calculate_numeric_stats(values)


def calculate_categorical_stats(values: List[Any]) -> CategoricalStats:
    return _default_calculator.calculate_categorical_stats(values)
