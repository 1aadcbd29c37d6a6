"""
Reference data loader with caching.

Loads the static zootechnical tables bundled with the package:
- canonical_metrics.json: metric catalogue (key, aliases, units, species, rules)
- unit_conversions.json: conversion factors between unit pairs
- nrc_references.json: NRC ranges (min, ideal_min, ideal_max, max) per species/subtype
- embrapa_references.json: EMBRAPA ranges (min, ideal, max) for Brazilian systems
- species_correlations.json: biologically relevant variable pairs per species
- plausibility_rules.json: hard and soft biological bounds per metric/species

Tables are read-only inputs. They are loaded lazily, once per process, and
shared by every registry and service that does not receive its own tables.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Any, List

logger = logging.getLogger(__name__)


class ReferenceDataLoader:
    """
    Centralized loader for bundled reference tables with caching.

    Every getter returns the cached object; callers must treat it as
    immutable. Tests that need different tables pass them directly to the
    consuming class instead of patching this loader.
    """

    _cache: Dict[str, Any] = {}
    _data_dir = Path(__file__).parent

    @classmethod
    def _load_json(cls, file_name: str) -> Any:
        """
        Load and cache a bundled JSON file.

        A missing bundled table is a packaging error, so it raises instead of
        returning an empty structure.
        """
        if file_name in cls._cache:
            return cls._cache[file_name]

        json_path = cls._data_dir / file_name
        with open(json_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        logger.debug(f"Loaded reference table {file_name}")
        cls._cache[file_name] = data
        return data

    @classmethod
    def get_canonical_metrics(cls) -> List[Dict[str, Any]]:
        """
        Get the canonical metric catalogue.

        Returns:
            List of metric definitions:
            [
                {
                    'key': 'gpd',
                    'aliases': ['gmd', 'ganho_diario', ...],
                    'unit': 'kg/dia',
                    'accepted_units': ['kg/dia', 'g/dia', ...],
                    'species': ['bovine', 'swine', ...],
                    'category': 'performance',
                    'description': 'Ganho de Peso Diário',
                    'validation_rules': {'min': 0, 'max': 3, 'must_be_positive': True}
                },
                ...
            ]
        """
        return cls._load_json('canonical_metrics.json').get('metrics', [])

    @classmethod
    def get_unit_conversions(cls) -> Dict[str, Dict[str, float]]:
        """Get conversion factors: {from_unit: {to_unit: factor}}."""
        return cls._load_json('unit_conversions.json')

    @classmethod
    def get_nrc_references(cls) -> Dict[str, Dict[str, Dict[str, Dict[str, Any]]]]:
        """Get NRC ranges: {species: {subtype: {metric: range}}}."""
        return cls._load_json('nrc_references.json')

    @classmethod
    def get_embrapa_references(cls) -> Dict[str, Any]:
        """
        Get EMBRAPA ranges.

        The layout differs per group:
            forage:      {forage_type: {variety: {metric: range}}}
            sheep_goat:  {ovinos_corte|ovinos_la|...: {metric: range}}
            aquaculture: {fish: {metric: range}}
            bees:        {bee_type: {metric: range}}
        """
        return cls._load_json('embrapa_references.json')

    @classmethod
    def get_species_correlations(cls) -> Dict[str, Dict[str, Any]]:
        """Get correlation configurations keyed by species."""
        return cls._load_json('species_correlations.json')

    @classmethod
    def get_plausibility_rules(cls) -> Dict[str, Dict[str, float]]:
        """Get biological plausibility bounds keyed by 'metric_species' or 'metric'."""
        return cls._load_json('plausibility_rules.json').get('rules', {})

    @classmethod
    def clear_cache(cls) -> None:
        """Clear all cached data (useful for testing)."""
        cls._cache.clear()

    @classmethod
    def get_data_source_info(cls) -> Dict[str, Any]:
        """Get information about data sources for documentation/audit."""
        return {
            'canonical_metrics': {
                'source': 'Bundled JSON',
                'count': len(cls.get_canonical_metrics()),
            },
            'nrc_references': {
                'source': 'NRC (Beef Cattle 2016, Dairy Cattle 2016, Swine 2012, Poultry 1994)',
                'species': sorted(cls.get_nrc_references().keys()),
            },
            'embrapa_references': {
                'source': 'EMBRAPA technical publications',
                'groups': sorted(cls.get_embrapa_references().keys()),
            },
            'species_correlations': {
                'source': 'Bundled JSON',
                'species': sorted(cls.get_species_correlations().keys()),
            },
        }
