"""
Canonical metric registry and unit conversion.
"""

from zootech_analysis.metrics.registry import (
    Metric,
    MetricRules,
    MetricRegistry,
    get_registry,
    normalize_key,
    resolve_metric,
    get_metrics_for_species,
    get_metrics_by_category,
    validate_metric_value,
)
from zootech_analysis.metrics.units import UnitConverter, convert_unit, get_converter

__all__ = [
    'Metric',
    'MetricRules',
    'MetricRegistry',
    'get_registry',
    'normalize_key',
    'resolve_metric',
    'get_metrics_for_species',
    'get_metrics_by_category',
    'validate_metric_value',
    'UnitConverter',
    'convert_unit',
    'get_converter',
]
