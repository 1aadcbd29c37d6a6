"""
Dataset analysis - per-column type detection and statistics.

Runs the type detector over every column, then the numeric calculator for
quantitative columns and the categorical calculator for qualitative ones.
Temporal and identifier columns carry type information only. Numeric
columns also get a confidence interval for their mean.
"""

import logging
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from zootech_analysis.core.constants import DEFAULT_CONFIDENCE_LEVEL
from zootech_analysis.core.exceptions import EmptyDatasetError, StatisticalInputError
from zootech_analysis.profiler.profile_result import DatasetAnalysis
from zootech_analysis.profiler.statistical_analysis import calculate_confidence_interval
from zootech_analysis.profiler.statistics_calculator import StatisticsCalculator
from zootech_analysis.profiler.type_detector import VariableTypeDetector

logger = logging.getLogger(__name__)

Rows = Union[List[Dict[str, Any]], pd.DataFrame]


class DatasetAnalyzer:
    """
    Analyses every column of a tabular dataset.

    Args:
        detector: Type detector (a fresh one by default)
        calculator: Statistics calculator (a fresh one by default)
        confidence_level: Level of the interval for numeric means (0.90, 0.95 or 0.99)
    """

    def __init__(
        self,
        detector: Optional[VariableTypeDetector] = None,
        calculator: Optional[StatisticsCalculator] = None,
        confidence_level: float = DEFAULT_CONFIDENCE_LEVEL
    ):
        self.detector = detector or VariableTypeDetector()
        self.calculator = calculator or StatisticsCalculator()
        self.confidence_level = confidence_level

    def analyze(self, rows: Rows) -> DatasetAnalysis:
        """
        Analyse a dataset.

        Args:
            rows: List of row dicts, or a DataFrame

        Returns:
            DatasetAnalysis with one entry per column

        Raises:
            EmptyDatasetError: If there are no rows
        """
        df = rows if isinstance(rows, pd.DataFrame) else pd.DataFrame.from_records(list(rows))
        if len(df) == 0:
            raise EmptyDatasetError()

        analysis = DatasetAnalysis(
            total_rows=len(df),
            total_columns=len(df.columns),
            confidence_level=self.confidence_level
        )

        for column in df.columns:
            name = str(column)
            values = df[column].tolist()
            info = self.detector.detect_variable_type(name, values)
            analysis.variables_info[name] = info

            try:
                if info.type.is_quantitative:
                    analysis.numeric_stats[name] = self.calculator.calculate_numeric_stats(values)
                    analysis.confidence_intervals[name] = calculate_confidence_interval(values, self.confidence_level)
                elif info.type.is_qualitative:
                    analysis.categorical_stats[name] = self.calculator.calculate_categorical_stats(values)
            except StatisticalInputError as e:
                logger.warning(f"Erro ao analisar coluna {name}: {e.message}")

        logger.info(f"Dataset analysed: {analysis.total_rows} rows, {analysis.total_columns} columns")
        return analysis


def analyze_dataset(rows: Rows, confidence_level: float = DEFAULT_CONFIDENCE_LEVEL) -> DatasetAnalysis:
    return DatasetAnalyzer(confidence_level=confidence_level).analyze(rows)
