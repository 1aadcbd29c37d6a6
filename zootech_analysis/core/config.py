"""Configuration parsing and validation."""

import os
from pathlib import Path
from typing import Dict, Any, List, Optional

import yaml

from zootech_analysis.core.exceptions import (
    ConfigError,
    YAMLSizeError,
    ConfigValidationError
)
from zootech_analysis.core.constants import (
    MAX_YAML_FILE_SIZE,
    MAX_YAML_NESTING_DEPTH,
    MAX_YAML_KEY_COUNT,
    DEFAULT_CONFIDENCE_LEVEL,
    SUPPORTED_CONFIDENCE_LEVELS,
    GPD_TOLERANCE,
    FCR_TOLERANCE,
    IEP_TOLERANCE,
    DEFAULT_MAX_CORRELATIONS,
    DEFAULT_MIN_RELEVANCE_SCORE,
    DEFAULT_MIN_DATA_POINTS,
    DEFAULT_ALPHA,
)


class AnalysisConfig:
    """
    Settings for an analysis run.

    Every section is optional; a missing file section falls back to the
    defaults from core.constants. Example YAML:

        analysis:
          species: bovine
          subtype: beef
          confidence_level: 0.95
        cross_validation:
          gpd_tolerance: 0.15
          fcr_tolerance: 0.15
          iep_tolerance: 0.10
        correlations:
          max_correlations: 20
          min_relevance_score: 5
          min_data_points: 10
          significance_level: 0.05
          allow_unknown_species_fallback: false
        logging:
          level: INFO
          file: logs/analysis.log
    """

    MAX_YAML_FILE_SIZE = MAX_YAML_FILE_SIZE
    MAX_YAML_NESTING_DEPTH = MAX_YAML_NESTING_DEPTH
    MAX_YAML_KEYS = MAX_YAML_KEY_COUNT

    KNOWN_SECTIONS = ('analysis', 'cross_validation', 'correlations', 'logging')

    def __init__(self, config_dict: Optional[Dict[str, Any]] = None):
        """
        Initialize from a configuration dictionary.

        Args:
            config_dict: Parsed configuration; None gives all defaults
        """
        self.raw_config = config_dict or {}
        self._parse_config()

    @classmethod
    def from_yaml(cls, config_path: str) -> "AnalysisConfig":
        """
        Load configuration from a YAML file.

        Args:
            config_path: Path to YAML configuration file

        Returns:
            AnalysisConfig instance

        Raises:
            ConfigError: If file not found or invalid
            YAMLSizeError: If file exceeds size limit
            ConfigValidationError: If structure or values are invalid
        """
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigError(f"Arquivo de configuração não encontrado: {config_path}")

        file_size = os.path.getsize(config_file)
        if file_size > cls.MAX_YAML_FILE_SIZE:
            raise YAMLSizeError(
                f"Arquivo de configuração muito grande: {file_size:,} bytes "
                f"(máximo {cls.MAX_YAML_FILE_SIZE:,} bytes)",
                file_size=file_size,
                max_size=cls.MAX_YAML_FILE_SIZE
            )

        try:
            with open(config_file, "r", encoding="utf-8") as f:
                config_dict = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Falha ao interpretar YAML: {str(e)}")
        except UnicodeDecodeError as e:
            raise ConfigError(f"Codificação inválida (esperado UTF-8): {str(e)}")

        if config_dict is None:
            return cls({})

        if not isinstance(config_dict, dict):
            raise ConfigValidationError(
                "A configuração deve ser um mapeamento YAML",
                expected="mapping",
                actual=type(config_dict).__name__
            )

        cls._validate_yaml_structure(config_dict)
        return cls(config_dict)

    @classmethod
    def _validate_yaml_structure(cls, obj: Any, current_depth: int = 0, total_keys: List[int] = None) -> None:
        """
        Reject overly deep or overly large YAML documents.

        Raises:
            ConfigValidationError: If structure is too complex
        """
        if total_keys is None:
            total_keys = [0]

        if current_depth > cls.MAX_YAML_NESTING_DEPTH:
            raise ConfigValidationError(
                f"Profundidade do YAML excede o máximo de {cls.MAX_YAML_NESTING_DEPTH} níveis"
            )

        if isinstance(obj, dict):
            total_keys[0] += len(obj)
            if total_keys[0] > cls.MAX_YAML_KEYS:
                raise ConfigValidationError(
                    f"YAML contém mais de {cls.MAX_YAML_KEYS:,} chaves"
                )
            for value in obj.values():
                cls._validate_yaml_structure(value, current_depth + 1, total_keys)

        elif isinstance(obj, list):
            total_keys[0] += len(obj)
            if total_keys[0] > cls.MAX_YAML_KEYS:
                raise ConfigValidationError(
                    f"YAML contém mais de {cls.MAX_YAML_KEYS:,} itens"
                )
            for item in obj:
                cls._validate_yaml_structure(item, current_depth + 1, total_keys)

    def _parse_config(self) -> None:
        """Parse and validate every section."""
        for section in self.raw_config:
            if section not in self.KNOWN_SECTIONS:
                raise ConfigValidationError(
                    f"Seção de configuração desconhecida: '{section}'",
                    field=str(section),
                    expected=", ".join(self.KNOWN_SECTIONS),
                    actual=str(section)
                )

        analysis = self._section('analysis')
        self.species: Optional[str] = analysis.get('species')
        self.subtype: Optional[str] = analysis.get('subtype')
        self.confidence_level: float = self._parse_confidence_level(
            analysis.get('confidence_level', DEFAULT_CONFIDENCE_LEVEL)
        )

        cross = self._section('cross_validation')
        self.gpd_tolerance: float = self._parse_fraction(cross, 'gpd_tolerance', GPD_TOLERANCE, 'cross_validation')
        self.fcr_tolerance: float = self._parse_fraction(cross, 'fcr_tolerance', FCR_TOLERANCE, 'cross_validation')
        self.iep_tolerance: float = self._parse_fraction(cross, 'iep_tolerance', IEP_TOLERANCE, 'cross_validation')

        corr = self._section('correlations')
        self.correlation_settings: Dict[str, Any] = {
            'max_correlations': self._parse_positive_int(corr, 'max_correlations', DEFAULT_MAX_CORRELATIONS),
            'min_relevance_score': self._parse_relevance(corr.get('min_relevance_score', DEFAULT_MIN_RELEVANCE_SCORE)),
            'min_data_points': self._parse_positive_int(corr, 'min_data_points', DEFAULT_MIN_DATA_POINTS),
            'significance_level': self._parse_fraction(corr, 'significance_level', DEFAULT_ALPHA, 'correlations'),
            'allow_unknown_species_fallback': bool(corr.get('allow_unknown_species_fallback', False)),
        }

        log_section = self._section('logging')
        self.log_level: str = str(log_section.get('level', 'WARNING')).upper()
        self.log_file: Optional[str] = log_section.get('file')

    def _section(self, name: str) -> Dict[str, Any]:
        section = self.raw_config.get(name) or {}
        if not isinstance(section, dict):
            raise ConfigValidationError(
                f"A seção '{name}' deve ser um mapeamento",
                field=name,
                expected="mapping",
                actual=type(section).__name__
            )
        return section

    @staticmethod
    def _parse_confidence_level(value: Any) -> float:
        try:
            level = float(value)
        except (TypeError, ValueError):
            raise ConfigValidationError(
                f"Nível de confiança inválido: {value!r}",
                field="analysis.confidence_level",
                expected="0.90, 0.95, 0.99",
                actual=str(value)
            )
        # Accept percentages (95) as well as fractions (0.95)
        if level > 1:
            level = level / 100
        if not any(abs(level - supported) < 1e-9 for supported in SUPPORTED_CONFIDENCE_LEVELS):
            raise ConfigValidationError(
                f"Nível de confiança não suportado: {value!r}",
                field="analysis.confidence_level",
                expected="0.90, 0.95, 0.99",
                actual=str(value)
            )
        return level

    @staticmethod
    def _parse_fraction(section: Dict[str, Any], key: str, default: float, section_name: str) -> float:
        value = section.get(key, default)
        try:
            fraction = float(value)
        except (TypeError, ValueError):
            fraction = -1.0
        if not 0 < fraction < 1:
            raise ConfigValidationError(
                f"'{key}' deve estar entre 0 e 1",
                field=f"{section_name}.{key}",
                expected="0 < value < 1",
                actual=str(value)
            )
        return fraction

    @staticmethod
    def _parse_positive_int(section: Dict[str, Any], key: str, default: int) -> int:
        value = section.get(key, default)
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ConfigValidationError(
                f"'{key}' deve ser um inteiro positivo",
                field=f"correlations.{key}",
                expected="integer >= 1",
                actual=str(value)
            )
        return value

    @staticmethod
    def _parse_relevance(value: Any) -> int:
        if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 10:
            raise ConfigValidationError(
                "'min_relevance_score' deve estar entre 0 e 10",
                field="correlations.min_relevance_score",
                expected="0..10",
                actual=str(value)
            )
        return value

    def to_dict(self) -> Dict[str, Any]:
        return {
            'analysis': {
                'species': self.species,
                'subtype': self.subtype,
                'confidence_level': self.confidence_level,
            },
            'cross_validation': {
                'gpd_tolerance': self.gpd_tolerance,
                'fcr_tolerance': self.fcr_tolerance,
                'iep_tolerance': self.iep_tolerance,
            },
            'correlations': dict(self.correlation_settings),
            'logging': {
                'level': self.log_level,
                'file': self.log_file,
            },
        }
