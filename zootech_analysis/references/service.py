"""
Reference comparison service.

Compares metric values against species/subtype benchmark ranges taken from
the bundled NRC and EMBRAPA tables.

Lookup rules:
    - NRC tables are keyed species -> subtype -> metric. Without a known
      subtype the first subtype of the species is used.
    - EMBRAPA tables override NRC entries for the same metric. Entries that
      publish a single ideal value get an ideal band of +/-5% around it.
    - Sheep and goat subtypes are production aims (meat, wool, milk, skin)
      mapped onto the EMBRAPA sheep_goat keys.
    - Forage subtypes are 'type_variety' (e.g. 'brachiaria_brizantha');
      an unknown variety falls back to the first variety of the type.
    - Bees default to apis_mellifera.

Classification (bounds inclusive):
    value < min                      -> below_minimum (invalid)
    value > max                      -> above_maximum (invalid)
    ideal_min <= value <= ideal_max  -> excellent
    otherwise inside [min, max]      -> good
    single ideal only: within 10%    -> excellent, else good
    no ideal data                    -> acceptable
    no reference entry               -> no_reference (valid)
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from zootech_analysis.core.constants import EMBRAPA_IDEAL_BAND, SINGLE_IDEAL_TOLERANCE
from zootech_analysis.core.results import OverallStatus, ValidationStatus
from zootech_analysis.reference_data.loader import ReferenceDataLoader
from zootech_analysis.species import normalize_species
from zootech_analysis.utils.number_utils import parse_lenient_number

logger = logging.getLogger(__name__)

NO_REFERENCE_MESSAGE = 'Sem dados de referência disponíveis'

# Production aim -> EMBRAPA sheep_goat key, per species
SHEEP_GOAT_SUBTYPES: Dict[str, Dict[str, str]] = {
    'sheep': {
        'meat': 'ovinos_corte',
        'wool': 'ovinos_la',
        'milk': 'ovinos_leite',
        'skin': 'caprinos_pele',
    },
    'goat': {
        'meat': 'caprinos_corte',
        'wool': 'ovinos_la',
        'milk': 'caprinos_leite',
        'skin': 'caprinos_pele',
    },
}

DEFAULT_BEE_TYPE = 'apis_mellifera'

EMBRAPA_ONLY_SPECIES = ('forage', 'sheep', 'goat', 'aquaculture', 'bees')


def _fmt(value: float) -> str:
    return format(value, '.10g')


@dataclass
class ReferenceRange:
    """Benchmark interval for one (species, subtype, metric)."""
    min: float
    max: float
    unit: str = ''
    source: str = ''
    ideal_min: Optional[float] = None
    ideal_max: Optional[float] = None
    ideal: Optional[float] = None

    @classmethod
    def from_nrc(cls, data: Dict[str, Any]) -> 'ReferenceRange':
        return cls(
            min=data['min'],
            max=data['max'],
            unit=data.get('unit', ''),
            source=data.get('source', ''),
            ideal_min=data.get('ideal_min'),
            ideal_max=data.get('ideal_max'),
        )

    @classmethod
    def from_embrapa(cls, data: Dict[str, Any]) -> 'ReferenceRange':
        reference = cls.from_nrc(data)
        ideal = data.get('ideal')
        if ideal is not None:
            reference.ideal = ideal
            reference.ideal_min = ideal * (1 - EMBRAPA_IDEAL_BAND)
            reference.ideal_max = ideal * (1 + EMBRAPA_IDEAL_BAND)
        return reference

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "min": self.min,
            "max": self.max,
            "unit": self.unit,
            "source": self.source,
        }
        for name in ('ideal_min', 'ideal_max', 'ideal'):
            value = getattr(self, name)
            if value is not None:
                result[name] = value
        return result


@dataclass
class MetricComparison:
    """A value classified against its reference range."""
    valid: bool
    status: ValidationStatus
    message: str
    reference: Optional[ReferenceRange] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "valid": self.valid,
            "status": self.status.value,
            "message": self.message,
            "reference": self.reference.to_dict() if self.reference else None,
        }


@dataclass
class FieldComparison:
    metric: str
    value: float
    validation: MetricComparison

    def to_dict(self) -> Dict[str, Any]:
        return {"metric": self.metric, "value": self.value, "validation": self.validation.to_dict()}


@dataclass
class MultiMetricComparison:
    """
    Comparison of several metrics at once.

    Attributes:
        comparisons: One FieldComparison per input field, in input order
        summary: Counts keyed excellent, good, acceptable, attention, no_reference
        overall_status: attention > excellent > good > no_data
    """
    comparisons: List[FieldComparison] = field(default_factory=list)
    summary: Dict[str, int] = field(default_factory=lambda: {
        'excellent': 0,
        'good': 0,
        'acceptable': 0,
        'attention': 0,
        'no_reference': 0,
    })
    overall_status: OverallStatus = OverallStatus.NO_DATA

    def to_dict(self) -> Dict[str, Any]:
        return {
            "overall_status": self.overall_status.value,
            "summary": dict(self.summary),
            "comparisons": [comparison.to_dict() for comparison in self.comparisons],
        }


class ReferenceDataService:
    """
    Reference range lookups and classification.

    Args:
        nrc_references: {species: {subtype: {metric: range}}}; bundled table by default
        embrapa_references: EMBRAPA groups (forage, sheep_goat, aquaculture, bees);
            bundled table by default
    """

    def __init__(
        self,
        nrc_references: Optional[Dict[str, Any]] = None,
        embrapa_references: Optional[Dict[str, Any]] = None
    ):
        self.nrc = nrc_references if nrc_references is not None else ReferenceDataLoader.get_nrc_references()
        self.embrapa = (
            embrapa_references if embrapa_references is not None
            else ReferenceDataLoader.get_embrapa_references()
        )

    # ------------------------------------------------------------------
    # Table lookups
    # ------------------------------------------------------------------

    def get_nrc_data(self, species: str, subtype: Optional[str] = None) -> Optional[Dict[str, Any]]:
        species_data = self.nrc.get(species)
        if not species_data:
            return None
        if subtype and subtype in species_data:
            return species_data[subtype]
        return next(iter(species_data.values()))

    def get_embrapa_data(self, species: str, subtype: Optional[str] = None) -> Optional[Dict[str, Any]]:
        if species == 'forage':
            if not subtype:
                return None
            forage_type, _, variety = subtype.partition('_')
            varieties = self.embrapa.get('forage', {}).get(forage_type)
            if not varieties:
                return None
            if variety and variety in varieties:
                return varieties[variety]
            return next(iter(varieties.values()))

        if species in SHEEP_GOAT_SUBTYPES:
            if not subtype:
                return None
            key = SHEEP_GOAT_SUBTYPES[species].get(subtype)
            return self.embrapa.get('sheep_goat', {}).get(key) if key else None

        if species == 'aquaculture':
            fish = self.embrapa.get('aquaculture', {})
            if subtype and subtype in fish:
                return fish[subtype]
            return next(iter(fish.values()), None)

        if species == 'bees':
            bees = self.embrapa.get('bees', {})
            if subtype and subtype in bees:
                return bees[subtype]
            return bees.get(DEFAULT_BEE_TYPE)

        return None

    def get_references(self, species: str, subtype: Optional[str] = None) -> Dict[str, ReferenceRange]:
        """Every reference range for a species/subtype, EMBRAPA overriding NRC."""
        species = normalize_species(species)
        combined: Dict[str, ReferenceRange] = {}

        for metric, data in (self.get_nrc_data(species, subtype) or {}).items():
            combined[metric] = ReferenceRange.from_nrc(data)
        for metric, data in (self.get_embrapa_data(species, subtype) or {}).items():
            combined[metric] = ReferenceRange.from_embrapa(data)

        return combined

    def get_reference(
        self,
        species: str,
        subtype: Optional[str] = None,
        metric: Optional[str] = None
    ):
        """
        Reference data for a species/subtype.

        Returns:
            The ReferenceRange for ``metric`` when given, otherwise the
            {metric: ReferenceRange} mapping; None when nothing is known
        """
        combined = self.get_references(species, subtype)
        if not combined:
            logger.debug(f"No reference data for species '{species}' subtype '{subtype}'")
            return None
        if metric is not None:
            reference = combined.get(metric)
            if reference is None:
                logger.debug(f"No reference for metric '{metric}' ({species}/{subtype})")
            return reference
        return combined

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    @staticmethod
    def classify(value: float, reference: ReferenceRange) -> MetricComparison:
        if value < reference.min:
            return MetricComparison(
                valid=False,
                status=ValidationStatus.BELOW_MINIMUM,
                reference=reference,
                message=f'Valor abaixo do mínimo ({_fmt(reference.min)} {reference.unit})',
            )
        if value > reference.max:
            return MetricComparison(
                valid=False,
                status=ValidationStatus.ABOVE_MAXIMUM,
                reference=reference,
                message=f'Valor acima do máximo ({_fmt(reference.max)} {reference.unit})',
            )

        status = ValidationStatus.ACCEPTABLE
        if reference.ideal_min is not None and reference.ideal_max is not None:
            if reference.ideal_min <= value <= reference.ideal_max:
                status = ValidationStatus.EXCELLENT
            else:
                status = ValidationStatus.GOOD
        elif reference.ideal is not None:
            if abs(value - reference.ideal) <= abs(reference.ideal) * SINGLE_IDEAL_TOLERANCE:
                status = ValidationStatus.EXCELLENT
            else:
                status = ValidationStatus.GOOD

        return MetricComparison(
            valid=True,
            status=status,
            reference=reference,
            message=f'Valor dentro dos parâmetros ({status.value})',
        )

    def validate_metric(
        self,
        value: float,
        species: str,
        metric: str,
        subtype: Optional[str] = None
    ) -> MetricComparison:
        """
        Classify a value against the reference range for (species, subtype, metric).

        A missing reference is not a failure: the result is valid with status
        no_reference.
        """
        reference = self.get_reference(species, subtype, metric)
        if reference is None:
            return MetricComparison(valid=True, status=ValidationStatus.NO_REFERENCE, message=NO_REFERENCE_MESSAGE)
        return self.classify(value, reference)

    def compare_multiple_metrics(
        self,
        data: Dict[str, Any],
        species: str,
        subtype: Optional[str] = None
    ) -> MultiMetricComparison:
        """
        Validate several metrics and summarise the outcome.

        Values go through the lenient parser; an unparsable value is reported
        as no_reference.
        """
        result = MultiMetricComparison()

        for metric, raw_value in data.items():
            value = parse_lenient_number(raw_value)
            if value is None:
                validation = MetricComparison(
                    valid=True, status=ValidationStatus.NO_REFERENCE, message=NO_REFERENCE_MESSAGE
                )
            else:
                validation = self.validate_metric(value, species, metric, subtype)
            result.comparisons.append(FieldComparison(metric=metric, value=value, validation=validation))

            if validation.status.is_out_of_range:
                result.summary['attention'] += 1
            else:
                result.summary[validation.status.value] += 1

        summary = result.summary
        if summary['attention'] > 0:
            result.overall_status = OverallStatus.ATTENTION
        elif summary['excellent'] > summary['good'] + summary['acceptable']:
            result.overall_status = OverallStatus.EXCELLENT
        elif summary['good'] > 0 or summary['acceptable'] > 0:
            result.overall_status = OverallStatus.GOOD

        return result

    # ------------------------------------------------------------------
    # Catalogue
    # ------------------------------------------------------------------

    def get_available_metrics(self, species: str, subtype: Optional[str] = None) -> List[str]:
        return list(self.get_references(species, subtype).keys())

    def get_available_species(self) -> List[str]:
        species = list(self.nrc.keys())
        species.extend(name for name in EMBRAPA_ONLY_SPECIES if name not in species)
        return species

    def get_subtypes(self, species: str) -> List[str]:
        """NRC subtypes plus the EMBRAPA ones (forage as 'type_variety')."""
        species = normalize_species(species)
        subtypes = list(self.nrc.get(species, {}).keys())

        if species == 'forage':
            for forage_type, varieties in self.embrapa.get('forage', {}).items():
                subtypes.extend(f'{forage_type}_{variety}' for variety in varieties)
        elif species in SHEEP_GOAT_SUBTYPES:
            sheep_goat = self.embrapa.get('sheep_goat', {})
            subtypes.extend(
                aim for aim, key in SHEEP_GOAT_SUBTYPES[species].items() if key in sheep_goat
            )
        elif species == 'aquaculture':
            subtypes.extend(self.embrapa.get('aquaculture', {}).keys())
        elif species == 'bees':
            subtypes.extend(self.embrapa.get('bees', {}).keys())

        return list(dict.fromkeys(subtypes))


_default_service: Optional[ReferenceDataService] = None


def get_reference_service() -> ReferenceDataService:
    """Process-wide service over the bundled tables."""
    global _default_service
    if _default_service is None:
        _default_service = ReferenceDataService()
    return _default_service


def validate_metric(value: float, species: str, metric: str, subtype: Optional[str] = None) -> MetricComparison:
    return get_reference_service().validate_metric(value, species, metric, subtype)


def compare_multiple_metrics(data: Dict[str, Any], species: str, subtype: Optional[str] = None) -> MultiMetricComparison:
    return get_reference_service().compare_multiple_metrics(data, species, subtype)
