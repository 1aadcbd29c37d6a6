"""
Bundled zootechnical reference tables.

Provides the static catalogues the engine is built on:
- Canonical metric catalogue and unit conversion factors
- NRC and EMBRAPA species/subtype reference ranges
- Species correlation configurations
- Biological plausibility bounds

All tables are loaded lazily and cached for the lifetime of the process.
"""

from zootech_analysis.reference_data.loader import ReferenceDataLoader

__all__ = ['ReferenceDataLoader']
