"""CSV loader producing the row records the analysis engine consumes."""

import csv
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import pandas as pd

from zootech_analysis.core.exceptions import DataLoadError, UnsupportedFormatError

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = ['.csv', '.tsv', '.txt']

ENCODINGS = ['utf-8', 'utf-8-sig', 'cp1252', 'latin-1']


def detect_delimiter(file_path: str, sample_size: int = 8192) -> str:
    """
    Auto-detect the delimiter used in a CSV file.

    Brazilian spreadsheets usually export with ';' because ',' is the
    decimal separator.

    Returns:
        Detected delimiter character, ',' if detection fails
    """
    for encoding in ENCODINGS:
        try:
            with open(file_path, 'r', newline='', encoding=encoding) as f:
                sample = f.read(sample_size)
        except UnicodeDecodeError:
            continue

        try:
            dialect = csv.Sniffer().sniff(sample, delimiters=',\t|;')
        except csv.Error:
            return ','
        return dialect.delimiter

    return ','


def detect_encoding(file_path: str) -> str:
    """First of the common encodings that decodes the file head."""
    for encoding in ENCODINGS:
        try:
            with open(file_path, 'r', encoding=encoding) as f:
                f.read(8192)
            return encoding
        except UnicodeDecodeError:
            continue

    return 'utf-8'


class CSVLoader:
    """
    Loads a delimited text file as a list of row dicts.

    Every cell is kept as text ('' for empty cells) so that Brazilian number
    formats such as '1.234,5' reach the lenient parser unchanged.

    Args:
        file_path: Path to the file
        delimiter: Column delimiter; auto-detected when None
        encoding: File encoding; auto-detected when None
    """

    def __init__(self, file_path: str, delimiter: Optional[str] = None, encoding: Optional[str] = None):
        self.file_path = Path(file_path)

        if self.file_path.suffix.lower() not in SUPPORTED_EXTENSIONS:
            raise UnsupportedFormatError(str(file_path), self.file_path.suffix or '(none)', SUPPORTED_EXTENSIONS)
        if not self.file_path.exists():
            raise DataLoadError(f"Arquivo não encontrado: {file_path}", str(file_path))

        self.delimiter = delimiter or detect_delimiter(str(self.file_path))
        if self.delimiter != ',':
            logger.info(f"Auto-detected delimiter: {repr(self.delimiter)}")

        self.encoding = encoding or detect_encoding(str(self.file_path))
        if self.encoding != 'utf-8':
            logger.info(f"Auto-detected encoding: {self.encoding}")

    def load_dataframe(self) -> pd.DataFrame:
        try:
            return pd.read_csv(
                self.file_path,
                delimiter=self.delimiter,
                encoding=self.encoding,
                dtype=str,
                keep_default_na=False,
                skipinitialspace=True,
            )
        except pd.errors.EmptyDataError:
            logger.warning(f"Empty CSV file: {self.file_path}")
            return pd.DataFrame()
        except pd.errors.ParserError as e:
            raise DataLoadError(
                f"Erro ao interpretar CSV {self.file_path}: número de colunas inconsistente. "
                f"Verifique o delimitador (atual: {repr(self.delimiter)}). Erro original: {e}",
                str(self.file_path),
                original_exception=e
            )
        except UnicodeDecodeError as e:
            raise DataLoadError(
                f"Erro de codificação em {self.file_path}: não foi possível ler com {self.encoding}",
                str(self.file_path),
                original_exception=e
            )

    def load(self) -> List[Dict[str, Any]]:
        """Rows as dicts keyed by column name."""
        df = self.load_dataframe()
        df.columns = [str(column).strip() for column in df.columns]
        logger.debug(f"Loaded {len(df)} rows, {len(df.columns)} columns from {self.file_path}")
        return df.to_dict('records')

    def get_metadata(self) -> Dict[str, Any]:
        return {
            "file_path": str(self.file_path),
            "file_size_bytes": self.file_path.stat().st_size,
            "delimiter": self.delimiter,
            "encoding": self.encoding,
        }


def load_rows(file_path: str, delimiter: Optional[str] = None, encoding: Optional[str] = None) -> List[Dict[str, Any]]:
    return CSVLoader(file_path, delimiter=delimiter, encoding=encoding).load()
