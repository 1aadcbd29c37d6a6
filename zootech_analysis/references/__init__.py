"""Comparison of metric values against NRC/EMBRAPA reference ranges."""

from zootech_analysis.references.service import (
    MetricComparison,
    MultiMetricComparison,
    ReferenceDataService,
    ReferenceRange,
    compare_multiple_metrics,
    validate_metric,
)

__all__ = [
    'MetricComparison',
    'MultiMetricComparison',
    'ReferenceDataService',
    'ReferenceRange',
    'compare_multiple_metrics',
    'validate_metric',
]
