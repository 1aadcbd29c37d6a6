"""
Species normalisation and species/data consistency checks.

Users name species in Portuguese or English ('gado', 'bovinos', 'cattle');
the engine works with canonical ids ('bovine'). normalize_species maps
between the two.

validate_species_data scores a dataset's column names against the expected
fields of every configured species, so an upload of poultry data under
'bovine' can be caught before any analysis runs.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from zootech_analysis.core.constants import (
    SPECIES_MISMATCH_MIN_GAP,
    SPECIES_MISMATCH_MAX_SELECTED_SCORE,
    SPECIES_MISMATCH_MIN_DETECTED_SCORE,
)
from zootech_analysis.metrics.registry import MetricRegistry, get_registry, normalize_key
from zootech_analysis.reference_data.loader import ReferenceDataLoader

logger = logging.getLogger(__name__)

SPECIES_ALIASES: Dict[str, str] = {
    'gado': 'bovine',
    'bovino': 'bovine',
    'bovinos': 'bovine',
    'boi': 'bovine',
    'vaca': 'bovine',
    'cattle': 'bovine',
    'suino': 'swine',
    'suinos': 'swine',
    'porco': 'swine',
    'pig': 'swine',
    'aves': 'poultry',
    'frango': 'poultry',
    'galinha': 'poultry',
    'chicken': 'poultry',
    'ovino': 'sheep',
    'ovinos': 'sheep',
    'ovelha': 'sheep',
    'caprino': 'goat',
    'caprinos': 'goat',
    'cabra': 'goat',
    'peixe': 'aquaculture',
    'peixes': 'aquaculture',
    'aquicultura': 'aquaculture',
    'fish': 'aquaculture',
    'forragem': 'forage',
    'pastagem': 'forage',
    'capim': 'forage',
    'grass': 'forage',
}

SPECIES_NAMES_PT: Dict[str, str] = {
    'bovine': 'Bovinos',
    'swine': 'Suinos',
    'poultry': 'Aves',
    'sheep': 'Ovinos',
    'goat': 'Caprinos',
    'forage': 'Forragem',
    'aquaculture': 'Aquicultura',
    'bees': 'Abelhas',
}


def normalize_species(raw: Optional[str]) -> str:
    """Canonical species id for a Portuguese or English name; unknown names are lower-cased."""
    name = (raw or '').strip().lower()
    return SPECIES_ALIASES.get(name, name)


@dataclass
class SpeciesDataCheck:
    """
    Outcome of validate_species_data.

    Attributes:
        is_valid: False only when the data clearly belongs to another species
        selected_species: Canonical id of the selected species
        detected_species: Best-scoring species (None when nothing is configured)
        match_score: Percentage of columns matching the selected species
        detected_match_score: Percentage of columns matching the detected species
        error_message: Portuguese explanation when is_valid is False
        selected_species_matches: Columns recognised for the selected species
        detected_species_matches: Columns recognised for the detected species
        all_scores: Score per configured species, rounded to 2 decimals
    """
    is_valid: bool
    selected_species: str
    detected_species: Optional[str] = None
    match_score: float = 0.0
    detected_match_score: float = 0.0
    error_message: Optional[str] = None
    selected_species_matches: List[str] = field(default_factory=list)
    detected_species_matches: List[str] = field(default_factory=list)
    all_scores: Dict[str, float] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "selected_species": self.selected_species,
            "detected_species": self.detected_species,
            "match_score": self.match_score,
            "detected_match_score": self.detected_match_score,
            "error_message": self.error_message,
            "details": {
                "selected_species_matches": list(self.selected_species_matches),
                "detected_species_matches": list(self.detected_species_matches),
                "all_scores": dict(self.all_scores),
            },
        }


def _column_matches_field(column: str, expected_fields: List[str]) -> bool:
    name = normalize_key(column)
    if not name:
        return False
    for expected in expected_fields:
        field_name = normalize_key(expected)
        if name == field_name or field_name in name or name in field_name:
            return True
    return False


class SpeciesDataValidator:
    """
    Scores column names against species configurations.

    Args:
        species_configs: Correlation configurations with expected_fields and
            additional_metrics; defaults to the bundled table
        registry: Metric registry used for columns the field lists miss
    """

    def __init__(
        self,
        species_configs: Optional[Dict[str, Dict[str, Any]]] = None,
        registry: Optional[MetricRegistry] = None
    ):
        self.species_configs = (
            species_configs if species_configs is not None
            else ReferenceDataLoader.get_species_correlations()
        )
        self.registry = registry or get_registry()

    def calculate_match_score(self, columns: List[str], species: str) -> Tuple[float, List[str]]:
        """Percentage of columns recognised for a species, and the columns themselves."""
        config = self.species_configs.get(species)
        if config is None:
            return 0.0, []

        expected = list(config.get('expected_fields', [])) + list(config.get('additional_metrics', []))
        matches = [
            column for column in columns
            if _column_matches_field(column, expected) or self.registry.resolve_metric(column, species)
        ]
        score = len(matches) / len(columns) * 100 if columns else 0.0
        return score, matches

    def validate(self, columns: List[str], selected_species: str) -> SpeciesDataCheck:
        selected = normalize_species(selected_species)
        selected_score, selected_matches = self.calculate_match_score(columns, selected)

        check = SpeciesDataCheck(
            is_valid=True,
            selected_species=selected,
            match_score=selected_score,
            selected_species_matches=selected_matches,
        )

        best: Optional[Tuple[str, float, List[str]]] = None
        for species in self.species_configs:
            score, matches = self.calculate_match_score(columns, species)
            check.all_scores[species] = round(score, 2)
            if best is None or score > best[1]:
                best = (species, score, matches)

        if best is None:
            return check

        detected, detected_score, detected_matches = best
        check.detected_species = detected
        check.detected_match_score = detected_score
        check.detected_species_matches = detected_matches

        if (
            detected != selected
            and detected_score - selected_score >= SPECIES_MISMATCH_MIN_GAP
            and selected_score < SPECIES_MISMATCH_MAX_SELECTED_SCORE
            and detected_score >= SPECIES_MISMATCH_MIN_DETECTED_SCORE
        ):
            selected_name = SPECIES_NAMES_PT.get(selected, selected)
            detected_name = SPECIES_NAMES_PT.get(detected, detected)
            check.is_valid = False
            check.error_message = (
                f'Selecao de cultura errada: voce selecionou "{selected_name}" mas os dados parecem ser de '
                f'"{detected_name}". Por favor, selecione a especie correta ou verifique seu arquivo CSV.'
            )
            logger.warning(
                f"Species mismatch: selected '{selected}' ({selected_score:.1f}%), "
                f"data looks like '{detected}' ({detected_score:.1f}%)"
            )

        return check


def validate_species_data(columns: List[str], selected_species: str) -> SpeciesDataCheck:
    return SpeciesDataValidator().validate(list(columns), selected_species)
