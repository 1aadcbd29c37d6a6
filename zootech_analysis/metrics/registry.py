"""
Canonical metric registry.

Maps user column names ("GMD", "ganho-peso-diário", "Conversão Alimentar")
onto the catalogue of known zootechnical metrics, and checks values against
each metric's validation rules.

Architecture:
    Metric definitions come from ReferenceDataLoader (bundled JSON) unless a
    list of definitions is passed in. At construction the registry builds a
    normalised index once:

        exact index:     normalised key   -> metric
        alias index:     normalised alias -> metric (keys win over aliases)
        substring table: (normalised alias or key, metric), longest first

Resolution order:
    1. exact key match
    2. exact alias match
    3. substring match (alias inside the column name, or the column name
       inside an alias); the longest matching alias wins
    4. when a species is given, a metric not applicable to it resolves to None

Usage:
    registry = MetricRegistry()
    metric = registry.resolve_metric("Ganho Diário", species="bovine")
    check = registry.validate_metric_value(1.2, metric)
"""

import logging
import re
import unicodedata
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple

from zootech_analysis.core.results import MetricValidation
from zootech_analysis.reference_data.loader import ReferenceDataLoader

logger = logging.getLogger(__name__)

_SEPARATORS = re.compile(r'[_\s-]+')

# Column names shorter than this never match by being contained in an alias
MIN_CONTAINED_NAME_LENGTH = 3


def normalize_key(raw: str) -> str:
    """
    Normalise a column or alias name for matching.

    Lower-cases, trims, strips accents and collapses runs of underscores,
    whitespace and hyphens into a single underscore.

    >>> normalize_key("  Conversão-Alimentar ")
    'conversao_alimentar'
    """
    text = str(raw).strip().lower()
    text = unicodedata.normalize('NFKD', text)
    text = ''.join(ch for ch in text if not unicodedata.combining(ch))
    return _SEPARATORS.sub('_', text).strip('_')


@dataclass(frozen=True)
class MetricRules:
    """Validation bounds for a metric. Bounds are inclusive."""
    must_be_positive: bool = False
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass(frozen=True)
class Metric:
    """
    A canonical zootechnical metric.

    Attributes:
        key: Canonical key (e.g. 'gpd')
        aliases: Alternative column names
        unit: Default unit
        accepted_units: Units a value may be reported in
        species: Species the metric applies to
        category: Grouping (performance, peso, leite, reproducao, ...)
        description: Portuguese display name used in messages
        validation_rules: Optional bounds
    """
    key: str
    aliases: frozenset
    unit: str
    accepted_units: frozenset
    species: frozenset
    category: str
    description: str
    validation_rules: Optional[MetricRules] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Metric':
        """Create a Metric from a catalogue entry."""
        rules = data.get('validation_rules')
        return cls(
            key=data['key'],
            aliases=frozenset(data.get('aliases', [])),
            unit=data.get('unit', ''),
            accepted_units=frozenset(data.get('accepted_units', [])),
            species=frozenset(data.get('species', [])),
            category=data.get('category', ''),
            description=data.get('description', data['key']),
            validation_rules=MetricRules(
                must_be_positive=bool(rules.get('must_be_positive', False)),
                min=rules.get('min'),
                max=rules.get('max'),
            ) if rules else None,
        )

    def applies_to(self, species: str) -> bool:
        return species in self.species

    def to_dict(self) -> Dict[str, Any]:
        result = {
            'key': self.key,
            'aliases': sorted(self.aliases),
            'unit': self.unit,
            'accepted_units': sorted(self.accepted_units),
            'species': sorted(self.species),
            'category': self.category,
            'description': self.description,
        }
        if self.validation_rules:
            result['validation_rules'] = {
                'must_be_positive': self.validation_rules.must_be_positive,
                'min': self.validation_rules.min,
                'max': self.validation_rules.max,
            }
        return result


class MetricRegistry:
    """
    Immutable catalogue of canonical metrics with a precomputed alias index.

    Args:
        definitions: Metric definitions (catalogue dicts). Defaults to the
            bundled catalogue.
    """

    def __init__(self, definitions: Optional[Iterable[Dict[str, Any]]] = None):
        if definitions is None:
            definitions = ReferenceDataLoader.get_canonical_metrics()

        self._metrics: Tuple[Metric, ...] = tuple(Metric.from_dict(d) for d in definitions)
        self._by_key: Dict[str, Metric] = {}
        self._by_alias: Dict[str, Metric] = {}
        substrings: List[Tuple[str, Metric]] = []

        for metric in self._metrics:
            self._by_key.setdefault(normalize_key(metric.key), metric)

        for metric in self._metrics:
            substrings.append((normalize_key(metric.key), metric))
            for alias in metric.aliases:
                normalized = normalize_key(alias)
                if normalized in self._by_key:
                    # An alias never shadows another metric's canonical key
                    continue
                self._by_alias.setdefault(normalized, metric)
                substrings.append((normalized, metric))

        # Longest alias first; stable sort keeps catalogue order for equal lengths
        self._substrings: Tuple[Tuple[str, Metric], ...] = tuple(
            sorted(substrings, key=lambda item: len(item[0]), reverse=True)
        )
        logger.debug(f"Metric registry built: {len(self._metrics)} metrics, {len(self._by_alias)} aliases")

    @property
    def metrics(self) -> Tuple[Metric, ...]:
        return self._metrics

    def get(self, key: str) -> Optional[Metric]:
        """Get a metric by canonical key (normalised, no alias matching)."""
        return self._by_key.get(normalize_key(key))

    def resolve_metric(self, raw_key: str, species: Optional[str] = None) -> Optional[Metric]:
        """
        Resolve a column name to a canonical metric.

        Args:
            raw_key: Column name as found in the data
            species: Optional species the metric must apply to

        Returns:
            The matching Metric, or None when nothing matches or the match
            does not apply to ``species``
        """
        if raw_key is None:
            return None

        name = normalize_key(raw_key)
        if not name:
            return None

        metric = self._by_key.get(name) or self._by_alias.get(name)
        if metric is None:
            metric = self._match_substring(name)

        if metric is not None and species and not metric.applies_to(species):
            logger.debug(f"Metric '{metric.key}' does not apply to species '{species}'")
            return None

        return metric

    def _match_substring(self, name: str) -> Optional[Metric]:
        for alias, metric in self._substrings:
            if alias in name:
                return metric
            if len(name) >= MIN_CONTAINED_NAME_LENGTH and name in alias:
                return metric
        return None

    def get_metrics_for_species(self, species: str) -> List[Metric]:
        """All metrics that list ``species``, in catalogue order."""
        return [m for m in self._metrics if m.applies_to(species)]

    def get_metrics_by_category(self, category: str) -> List[Metric]:
        """All metrics in ``category``, in catalogue order."""
        return [m for m in self._metrics if m.category == category]

    def get_categories(self) -> List[str]:
        seen: Dict[str, None] = {}
        for metric in self._metrics:
            seen.setdefault(metric.category, None)
        return list(seen)

    @staticmethod
    def validate_metric_value(value: float, metric: Metric) -> MetricValidation:
        """
        Check a value against a metric's validation rules.

        Bounds are inclusive; a metric without rules accepts any value.

        Returns:
            MetricValidation with Portuguese error messages
        """
        rules = metric.validation_rules
        if rules is None:
            return MetricValidation(valid=True)

        errors: List[str] = []
        if rules.must_be_positive and value < 0:
            errors.append(f"{metric.description} deve ser positivo")
        if rules.min is not None and value < rules.min:
            errors.append(f"{metric.description} abaixo do mínimo ({rules.min} {metric.unit})")
        if rules.max is not None and value > rules.max:
            errors.append(f"{metric.description} acima do máximo ({rules.max} {metric.unit})")

        return MetricValidation(valid=not errors, errors=errors)


_default_registry: Optional[MetricRegistry] = None


def get_registry() -> MetricRegistry:
    """Get the process-wide registry built from the bundled catalogue."""
    global _default_registry
    if _default_registry is None:
        _default_registry = MetricRegistry()
    return _default_registry


def resolve_metric(raw_key: str, species: Optional[str] = None) -> Optional[Metric]:
    return get_registry().resolve_metric(raw_key, species)


def get_metrics_for_species(species: str) -> List[Metric]:
    return get_registry().get_metrics_for_species(species)


def get_metrics_by_category(category: str) -> List[Metric]:
    return get_registry().get_metrics_by_category(category)


def validate_metric_value(value: float, metric: Metric) -> MetricValidation:
    return MetricRegistry.validate_metric_value(value, metric)
