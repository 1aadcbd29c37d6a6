"""
Dataset profiling: variable types, descriptive and inferential statistics,
and correlation discovery.
"""

from zootech_analysis.profiler.profile_result import (
    CategoricalStats,
    DatasetAnalysis,
    NumericStats,
    RawType,
    VariableType,
    VariableTypeInfo,
)
from zootech_analysis.profiler.type_detector import VariableTypeDetector, detect_variable_type
from zootech_analysis.profiler.statistics_calculator import (
    StatisticsCalculator,
    calculate_categorical_stats,
    calculate_numeric_stats,
)
from zootech_analysis.profiler.dataset_analyzer import DatasetAnalyzer, analyze_dataset

__all__ = [
    'CategoricalStats',
    'DatasetAnalysis',
    'NumericStats',
    'RawType',
    'VariableType',
    'VariableTypeInfo',
    'VariableTypeDetector',
    'detect_variable_type',
    'StatisticsCalculator',
    'calculate_categorical_stats',
    'calculate_numeric_stats',
    'DatasetAnalyzer',
    'analyze_dataset',
]
