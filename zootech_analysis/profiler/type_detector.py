"""
Variable Type Detector - semantic classification of zootechnical columns.

Classifies a named column of raw values into one of the VariableType
categories and flags whether the column belongs to the zootechnical
vocabulary (weights, gains, conversion, breed, ...).

Architecture:
    Classification runs in fixed precedence, first match wins:
    1. TEMPORAL      every value is an ISO-like date, or the name has a date token
    2. IDENTIFIER    identifier name token, or unique alphanumeric codes
    3. QUANTITATIVE  more than 90% of values parse as numbers
                     (DISCRETE / CONTINUOUS split on integer repetition)
    4. QUALITATIVE   ORDINAL by name hint or ordered vocabulary, else NOMINAL

Design Decisions:
    - Column names are matched after accent stripping and lower-casing, so
      'Conversão' and 'conversao' behave the same
    - Date and identifier hints match whole name tokens: 'idade' is not an
      identifier and 'data_nascimento' is temporal
    - Numbers are parsed strictly here: '12 animais' is text, not 12
    - Never raises; an empty column is nominal qualitative

Usage:
    detector = VariableTypeDetector()
    info = detector.detect_variable_type("peso_desmame", [180.5, 192.0, 175.3])
    info.type        # VariableType.QUANTITATIVE_CONTINUOUS
    info.unit        # 'kg'
"""

import logging
import re
from typing import Any, Dict, List, Tuple

from zootech_analysis.core.constants import (
    NUMERIC_MIN_RATIO,
    DISCRETE_MAX_DISTINCT,
    DISCRETE_MAX_UNIQUE_RATIO,
    IDENTIFIER_MAX_NUMERIC_RATIO,
)
from zootech_analysis.metrics.registry import normalize_key
from zootech_analysis.profiler.profile_result import RawType, VariableType, VariableTypeInfo
from zootech_analysis.utils.number_utils import is_missing_value, parse_lenient_number

logger = logging.getLogger(__name__)


# Zootechnical vocabulary, grouped by concept. Keywords are accent-free.
ZOOTECHNICAL_KEYWORDS: Dict[str, Tuple[str, ...]] = {
    # Identification and classification
    'raca': ('raca', 'breed', 'race'),
    'sexo': ('sexo', 'genero', 'sex', 'gender'),
    'idade': ('idade', 'era', 'age', 'meses', 'months', 'dias', 'days'),
    # Weights and measures
    'peso': ('peso', 'weight', 'kg', 'quilos', 'kilos'),
    'altura': ('altura', 'height', 'cm', 'centimetros'),
    'perimetro': ('perimetro', 'perimeter', 'toracico'),
    # Performance
    'gpd': ('gpd', 'gmd', 'ganho', 'gain', 'diario', 'daily'),
    'conversao': ('conversao', 'alimentar', 'feed', 'conversion'),
    # Carcass and quality
    'rendimento': ('rendimento', 'yield', 'carcaca', 'carcass'),
    'aol': ('aol', 'olho', 'lombo', 'ribeye', 'eye'),
    'escore': ('escore', 'score', 'corporal', 'body', 'condicao'),
    'gordura': ('gordura', 'fat', 'acabamento', 'finishing', 'marbling'),
    'classificacao': ('classificacao', 'classification', 'grade'),
    # Health
    'vacinacao': ('vacinacao', 'vaccination', 'vaccine'),
    'vermifugacao': ('vermifugacao', 'deworming'),
    # Production and management
    'sistema': ('sistema', 'system', 'producao', 'production'),
    'dieta': ('dieta', 'diet', 'alimentacao'),
    'consumo': ('consumo', 'consumption', 'intake'),
    # Economics
    'valor': ('valor', 'value', 'preco', 'price', 'custo', 'cost'),
    'arroba': ('arroba', '@'),
    # Time
    'ano': ('ano', 'year'),
    'mes': ('mes', 'month'),
    'trimestre': ('trimestre', 'quarter'),
    # Geography
    'estado': ('estado', 'state', 'uf'),
    'regiao': ('regiao', 'region'),
    # Other
    'quantidade': ('quantidade', 'quantity', 'numero', 'number', 'animais', 'animals'),
}

# Name fragment -> unit, first match wins
UNIT_BY_NAME: Tuple[Tuple[str, str], ...] = (
    ('peso', 'kg'),
    ('weight', 'kg'),
    ('altura', 'cm'),
    ('height', 'cm'),
    ('rendimento', '%'),
    ('yield', '%'),
    ('gpd', 'kg/dia'),
    ('gmd', 'kg/dia'),
    ('temperatura', '°C'),
    ('temperature', '°C'),
    ('valor', 'R$'),
    ('preco', 'R$'),
    ('price', 'R$'),
    ('custo', 'R$'),
    ('cost', 'R$'),
    ('%', '%'),
    ('percent', '%'),
)

DESCRIPTION_BY_NAME: Tuple[Tuple[str, str], ...] = (
    ('peso', 'Peso do animal'),
    ('weight', 'Peso do animal'),
    ('idade', 'Idade do animal'),
    ('age', 'Idade do animal'),
    ('altura', 'Altura do animal'),
    ('height', 'Altura do animal'),
    ('rendimento', 'Rendimento de carcaça'),
    ('yield', 'Rendimento de carcaça'),
    ('gpd', 'Ganho de peso diário'),
    ('gmd', 'Ganho médio diário'),
    ('conversao', 'Conversão alimentar'),
    ('raca', 'Raça do animal'),
    ('breed', 'Raça do animal'),
    ('sexo', 'Sexo do animal'),
    ('sex', 'Sexo do animal'),
)

DATE_NAME_TOKENS = frozenset({'data', 'date', 'ano', 'year'})
IDENTIFIER_NAME_TOKENS = frozenset({'id', 'codigo', 'code', 'brinco', 'tag'})
ORDINAL_NAME_HINTS = ('escore', 'score', 'classificacao', 'classification', 'grade', 'nivel', 'level')

# Ordered vocabularies, compared after accent stripping and lower-casing
ORDINAL_VOCABULARIES: Tuple[frozenset, ...] = (
    frozenset({'baixo', 'medio', 'alto'}),
    frozenset({'baixa', 'media', 'alta'}),
    frozenset({'muito_baixo', 'baixo', 'medio', 'alto', 'muito_alto'}),
    frozenset({'low', 'medium', 'high'}),
    frozenset({'ruim', 'regular', 'bom', 'otimo'}),
    frozenset({'pessimo', 'ruim', 'regular', 'bom', 'excelente'}),
    frozenset({'poor', 'fair', 'good', 'excellent'}),
    frozenset({'pequeno', 'medio', 'grande'}),
    frozenset({'small', 'medium', 'large'}),
    frozenset({'leve', 'moderado', 'severo'}),
    frozenset({'mild', 'moderate', 'severe'}),
)

DATE_PATTERNS = (
    r'^\d{4}-\d{2}-\d{2}$',  # YYYY-MM-DD
    r'^\d{2}/\d{2}/\d{4}$',  # DD/MM/YYYY
    r'^\d{4}/\d{2}/\d{2}$',  # YYYY/MM/DD
    r'^\d{2}-\d{2}-\d{4}$',  # DD-MM-YYYY
)

# Alphanumeric code with at least one digit and no spaces ('A001', 'BR-1234')
_CODE_PATTERN = re.compile(r'^(?=.*\d)[A-Za-z0-9][A-Za-z0-9_\-./]*$')


class VariableTypeDetector:
    """
    Classifies columns into semantic variable types.

    The detector is stateless; one instance can classify any number of
    columns.

    Example:
        >>> detector = VariableTypeDetector()
        >>> detector.detect_variable_type("raca", ["Nelore", "Angus", "Nelore"]).type
        <VariableType.QUALITATIVE_NOMINAL: 'qualitative_nominal'>
    """

    def __init__(self):
        self._date_regexes = [re.compile(pattern) for pattern in DATE_PATTERNS]

    def detect_variable_type(self, column_name: str, values: List[Any]) -> VariableTypeInfo:
        """
        Classify a column.

        Args:
            column_name: Column header
            values: Raw column values, in any mix of types

        Returns:
            VariableTypeInfo for the column
        """
        name = normalize_key(column_name)
        tokens = set(name.split('_'))
        clean_values = [value for value in values if not is_missing_value(value)]

        variable_type, raw_type = self._classify(name, tokens, clean_values)
        logger.debug(f"Column '{column_name}' classified as {variable_type.value}")

        return VariableTypeInfo(
            name=column_name,
            type=variable_type,
            raw_type=raw_type,
            is_zootechnical=self.is_zootechnical(column_name),
            unit=self.infer_unit(column_name),
            description=self.infer_description(column_name),
        )

    def _classify(self, name: str, tokens: set, clean_values: List[Any]) -> Tuple[VariableType, RawType]:
        if not clean_values:
            return VariableType.QUALITATIVE_NOMINAL, RawType.STRING

        total = len(clean_values)
        texts = [str(value).strip() for value in clean_values]

        date_count = sum(1 for text in texts if self.is_date_string(text))
        if date_count == total or tokens & DATE_NAME_TOKENS:
            return VariableType.TEMPORAL, RawType.DATE

        numeric_values = [
            parsed for parsed in (parse_lenient_number(value, strict=True) for value in clean_values)
            if parsed is not None
        ]
        numeric_ratio = len(numeric_values) / total

        if tokens & IDENTIFIER_NAME_TOKENS or self._looks_like_codes(texts, numeric_ratio):
            return VariableType.IDENTIFIER, RawType.STRING

        if numeric_ratio > NUMERIC_MIN_RATIO:
            if self._is_discrete(numeric_values):
                return VariableType.QUANTITATIVE_DISCRETE, RawType.NUMERIC
            return VariableType.QUANTITATIVE_CONTINUOUS, RawType.NUMERIC

        if self._is_ordinal(name, texts):
            return VariableType.QUALITATIVE_ORDINAL, RawType.STRING
        return VariableType.QUALITATIVE_NOMINAL, RawType.STRING

    def is_date_string(self, text: str) -> bool:
        return any(regex.match(text) for regex in self._date_regexes)

    @staticmethod
    def _looks_like_codes(texts: List[str], numeric_ratio: float) -> bool:
        """Every value unique, mostly non-numeric, and shaped like a code."""
        if len(texts) < 2 or len(set(texts)) != len(texts):
            return False
        if numeric_ratio >= IDENTIFIER_MAX_NUMERIC_RATIO:
            return False
        return all(_CODE_PATTERN.match(text) for text in texts)

    @staticmethod
    def _is_discrete(numeric_values: List[float]) -> bool:
        if any(value != int(value) for value in numeric_values):
            return False
        distinct = len(set(numeric_values))
        total = len(numeric_values)
        if distinct / total < DISCRETE_MAX_UNIQUE_RATIO:
            return True
        return distinct < total and distinct <= DISCRETE_MAX_DISTINCT

    @staticmethod
    def _is_ordinal(name: str, texts: List[str]) -> bool:
        if any(hint in name for hint in ORDINAL_NAME_HINTS):
            return True
        categories = {normalize_key(text) for text in texts}
        return any(categories <= vocabulary for vocabulary in ORDINAL_VOCABULARIES)

    @staticmethod
    def is_zootechnical(column_name: str) -> bool:
        """Column name contains any zootechnical keyword."""
        name = normalize_key(column_name)
        return any(
            keyword in name
            for keywords in ZOOTECHNICAL_KEYWORDS.values()
            for keyword in keywords
        )

    @staticmethod
    def infer_unit(column_name: str) -> str:
        name = normalize_key(column_name)
        for fragment, unit in UNIT_BY_NAME:
            if fragment in name:
                return unit
        return ''

    @staticmethod
    def infer_description(column_name: str) -> str:
        name = normalize_key(column_name)
        for fragment, description in DESCRIPTION_BY_NAME:
            if fragment in name:
                return description
        return ''


_default_detector = VariableTypeDetector()


def detect_variable_type(column_name: str, values: List[Any]) -> VariableTypeInfo:
    """Classify a column with a shared stateless detector."""
    return _default_detector.detect_variable_type(column_name, values)
