"""
Unit conversion between the units used in zootechnical records.

Factors come from the bundled unit_conversions.json table
({from_unit: {to_unit: factor}}). Unit names are matched case-insensitively,
so 'L/dia', 'l/dia' and 'L/DIA' are the same unit.

An unknown pair is not an error: the value is returned unchanged and a
warning is logged, so a single odd unit never stops a whole analysis.
"""

import logging
from typing import Dict, Optional

from zootech_analysis.reference_data.loader import ReferenceDataLoader

logger = logging.getLogger(__name__)


class UnitConverter:
    """
    Converts values using a factor table.

    Args:
        conversions: {from_unit: {to_unit: factor}}. Defaults to the bundled table.
    """

    def __init__(self, conversions: Optional[Dict[str, Dict[str, float]]] = None):
        if conversions is None:
            conversions = ReferenceDataLoader.get_unit_conversions()

        self._factors: Dict[str, Dict[str, float]] = {}
        for from_unit, targets in conversions.items():
            index = self._factors.setdefault(self._unit_key(from_unit), {})
            for to_unit, factor in targets.items():
                index[self._unit_key(to_unit)] = float(factor)

    @staticmethod
    def _unit_key(unit: str) -> str:
        return str(unit).strip().lower()

    def get_factor(self, from_unit: str, to_unit: str) -> Optional[float]:
        """Factor for from_unit -> to_unit, 1.0 for identical units, None if unknown."""
        source = self._unit_key(from_unit)
        target = self._unit_key(to_unit)
        if source == target:
            return 1.0
        return self._factors.get(source, {}).get(target)

    def can_convert(self, from_unit: str, to_unit: str) -> bool:
        return self.get_factor(from_unit, to_unit) is not None

    def convert_unit(self, value: float, from_unit: str, to_unit: str) -> float:
        """
        Convert ``value`` from one unit to another.

        Returns:
            The converted value, or ``value`` unchanged when the units are
            identical or the pair is not in the table
        """
        source = self._unit_key(from_unit)
        target = self._unit_key(to_unit)
        if source == target:
            return value

        targets = self._factors.get(source)
        if targets is None:
            logger.warning(f"Conversão não encontrada para unidade: {from_unit}")
            return value

        factor = targets.get(target)
        if factor is None:
            logger.warning(f"Conversão não encontrada de {from_unit} para {to_unit}")
            return value

        return value * factor


_default_converter: Optional[UnitConverter] = None


def get_converter() -> UnitConverter:
    """Get the process-wide converter built from the bundled table."""
    global _default_converter
    if _default_converter is None:
        _default_converter = UnitConverter()
    return _default_converter


def convert_unit(value: float, from_unit: str, to_unit: str) -> float:
    return get_converter().convert_unit(value, from_unit, to_unit)
