"""
Zootech Analysis - statistics and validation engine for zootechnical data.

Classifies the variables of animal-production datasets, computes descriptive
and inferential statistics, cross-checks derived indices (GPD, feed
conversion, IEP), discovers biologically relevant correlations and compares
values with NRC/EMBRAPA reference ranges.
"""

__version__ = "0.1.0"
