"""Cross-field consistency and biological plausibility checks."""

from zootech_analysis.validations.cross_field import CrossFieldValidator, perform_cross_validation

__all__ = ['CrossFieldValidator', 'perform_cross_validation']
