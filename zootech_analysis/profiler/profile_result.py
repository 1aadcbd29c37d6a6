"""
Data structures for storing profiling results.

Contains classes for holding per-column type information, numeric and
categorical statistics, and the dataset-level analysis that groups them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Any, Optional

import numpy as np

from zootech_analysis.core.constants import DEFAULT_CONFIDENCE_LEVEL
from zootech_analysis.profiler.statistical_analysis import ConfidenceInterval


def convert_numpy_types(obj):
    """
    Recursively convert numpy types to Python native types for JSON serialization.

    Args:
        obj: Any object that might contain numpy types

    Returns:
        Object with numpy types converted to Python types
    """
    if isinstance(obj, np.bool_):
        return bool(obj)
    elif isinstance(obj, np.integer):
        return int(obj)
    elif isinstance(obj, np.floating):
        return float(obj)
    elif isinstance(obj, np.ndarray):
        return obj.tolist()
    elif isinstance(obj, dict):
        return {key: convert_numpy_types(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [convert_numpy_types(item) for item in obj]
    elif isinstance(obj, tuple):
        return tuple(convert_numpy_types(item) for item in obj)
    else:
        return obj


class VariableType(Enum):
    """Semantic type of a column."""
    QUANTITATIVE_CONTINUOUS = "quantitative_continuous"
    QUANTITATIVE_DISCRETE = "quantitative_discrete"
    QUALITATIVE_NOMINAL = "qualitative_nominal"
    QUALITATIVE_ORDINAL = "qualitative_ordinal"
    TEMPORAL = "temporal"
    IDENTIFIER = "identifier"

    @property
    def is_quantitative(self) -> bool:
        return self in (VariableType.QUANTITATIVE_CONTINUOUS, VariableType.QUANTITATIVE_DISCRETE)

    @property
    def is_qualitative(self) -> bool:
        return self in (VariableType.QUALITATIVE_NOMINAL, VariableType.QUALITATIVE_ORDINAL)


class RawType(Enum):
    """Storage-level type of a column's values."""
    NUMERIC = "numeric"
    STRING = "string"
    DATE = "date"


@dataclass
class VariableTypeInfo:
    """
    Type classification for a column.

    Attributes:
        name: Column name as given
        type: Semantic type
        raw_type: Storage-level type
        is_zootechnical: Column name matches the zootechnical vocabulary
        unit: Unit inferred from the name ('' when unknown)
        description: Portuguese description inferred from the name ('' when unknown)
    """
    name: str
    type: VariableType
    raw_type: RawType
    is_zootechnical: bool = False
    unit: str = ""
    description: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type.value,
            "raw_type": self.raw_type.value,
            "is_zootechnical": self.is_zootechnical,
            "unit": self.unit,
            "description": self.description,
        }


@dataclass
class NumericStats:
    """
    Descriptive statistics for a numeric column.

    Invariants: min <= q1 <= median <= q3 <= max and
    valid_count + missing_count == count.
    """
    count: int
    valid_count: int
    missing_count: int
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
    mode: Optional[float] = None
    skewness: Optional[float] = None
    outliers: List[float] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return convert_numpy_types({
            "count": self.count,
            "valid_count": self.valid_count,
            "missing_count": self.missing_count,
            "mean": self.mean,
            "median": self.median,
            "mode": self.mode,
            "std_dev": self.std_dev,
            "variance": self.variance,
            "min": self.min,
            "max": self.max,
            "range": self.range,
            "q1": self.q1,
            "q3": self.q3,
            "iqr": self.iqr,
            "cv": self.cv,
            "skewness": self.skewness,
            "outliers": list(self.outliers),
        })


@dataclass
class CategoricalStats:
    """
    Frequency statistics for a categorical column.

    Attributes:
        count: Total number of raw values
        valid_count: Values left after removing missing tokens
        missing_count: count - valid_count
        unique_values: Number of distinct categories
        distribution: Category -> absolute count, in first-seen order
        frequencies: Category -> percentage (2 decimals)
        most_common: Most frequent category ('' when empty)
        least_common: Least frequent category ('' when empty)
        entropy: Base-2 Shannon entropy (4 decimals)
    """
    count: int
    valid_count: int
    missing_count: int
    unique_values: int
    distribution: Dict[str, int] = field(default_factory=dict)
    frequencies: Dict[str, float] = field(default_factory=dict)
    most_common: str = ""
    least_common: str = ""
    entropy: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "count": self.count,
            "valid_count": self.valid_count,
            "missing_count": self.missing_count,
            "unique_values": self.unique_values,
            "distribution": dict(self.distribution),
            "frequencies": dict(self.frequencies),
            "most_common": self.most_common,
            "least_common": self.least_common,
            "entropy": self.entropy,
        }


@dataclass
class DatasetAnalysis:
    """
    Per-column analysis of a whole dataset.

    Numeric stats exist only for quantitative columns and categorical stats
    only for qualitative ones; temporal and identifier columns carry type
    information only. Each numeric column also gets a t-based interval for
    its mean at ``confidence_level``.
    """
    variables_info: Dict[str, VariableTypeInfo] = field(default_factory=dict)
    numeric_stats: Dict[str, NumericStats] = field(default_factory=dict)
    confidence_intervals: Dict[str, ConfidenceInterval] = field(default_factory=dict)
    categorical_stats: Dict[str, CategoricalStats] = field(default_factory=dict)
    total_rows: int = 0
    total_columns: int = 0
    confidence_level: float = DEFAULT_CONFIDENCE_LEVEL

    def get_columns_by_type(self, variable_type: VariableType) -> List[str]:
        return [name for name, info in self.variables_info.items() if info.type == variable_type]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_rows": self.total_rows,
            "total_columns": self.total_columns,
            "variables_info": {name: info.to_dict() for name, info in self.variables_info.items()},
            "numeric_stats": {name: stats.to_dict() for name, stats in self.numeric_stats.items()},
            "confidence_level": self.confidence_level,
            "confidence_intervals": {name: ci.to_dict() for name, ci in self.confidence_intervals.items()},
            "categorical_stats": {name: stats.to_dict() for name, stats in self.categorical_stats.items()},
        }
