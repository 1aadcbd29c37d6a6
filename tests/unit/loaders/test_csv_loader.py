"""
Tests for the CSV loader.
"""

import pytest

from zootech_analysis.core.exceptions import DataLoadError, UnsupportedFormatError
from zootech_analysis.loaders.csv_loader import CSVLoader, detect_delimiter, detect_encoding, load_rows


@pytest.fixture
def write_file(tmp_path):
    def _write(name, content, encoding='utf-8'):
        path = tmp_path / name
        path.write_bytes(content.encode(encoding))
        return str(path)
    return _write


@pytest.mark.unit
class TestDelimiterAndEncoding:
    """Test auto-detection."""

    def test_semicolon_detected(self, write_file):
        """Semicolon exports are recognised."""
        path = write_file('dados.csv', 'a;b;c\n1;2;3\n4;5;6\n')
        assert detect_delimiter(path) == ';'

    def test_comma_default(self, write_file):
        """Undetectable samples fall back to a comma."""
        assert detect_delimiter(write_file('vazio.csv', '')) == ','

    def test_latin1_file(self, write_file):
        """Files that are not UTF-8 use the next encoding that decodes."""
        path = write_file('raca.csv', 'raça\nNelore\n', encoding='latin-1')
        assert detect_encoding(path) == 'cp1252'
        assert load_rows(path) == [{'raça': 'Nelore'}]


@pytest.mark.unit
class TestCSVLoader:
    """Test loading rows."""

    def test_values_kept_as_text(self, write_file):
        """Brazilian decimals reach the engine unchanged."""
        path = write_file('pesagens.csv', 'brinco;peso\nA1;450,5\nA2;480\n')
        assert load_rows(path, delimiter=';') == [{'brinco': 'A1', 'peso': '450,5'}, {'brinco': 'A2', 'peso': '480'}]

    def test_empty_cells_are_empty_strings(self, write_file):
        """Missing cells are '' rather than NaN."""
        path = write_file('falhas.csv', 'peso,raca\n450,\n,Angus\n')
        assert load_rows(path, delimiter=',') == [{'peso': '450', 'raca': ''}, {'peso': '', 'raca': 'Angus'}]

    def test_header_whitespace_stripped(self, write_file):
        """Column names are trimmed."""
        path = write_file('cabecalho.csv', ' peso , raca\n450,Nelore\n')
        assert list(load_rows(path, delimiter=',')[0]) == ['peso', 'raca']

    def test_empty_file(self, write_file):
        """An empty file gives no rows."""
        assert load_rows(write_file('vazio.csv', '')) == []

    def test_unsupported_extension(self):
        """Only delimited text files are accepted."""
        with pytest.raises(UnsupportedFormatError):
            CSVLoader('planilha.xlsx')

    def test_missing_file(self, tmp_path):
        """A missing file is a load error."""
        with pytest.raises(DataLoadError):
            CSVLoader(str(tmp_path / 'nao_existe.csv'))

    def test_inconsistent_columns(self, write_file):
        """Rows with too many fields are reported."""
        path = write_file('quebrado.csv', 'a,b\n1,2\n3,4,5,6\n')
        with pytest.raises(DataLoadError) as exc_info:
            CSVLoader(path, delimiter=',').load()
        assert 'número de colunas inconsistente' in exc_info.value.message

    def test_metadata(self, write_file):
        """Metadata reports what was detected."""
        loader = CSVLoader(write_file('meta.csv', 'a;b\n1;2\n3;4\n'))
        metadata = loader.get_metadata()
        assert metadata['delimiter'] == ';'
        assert metadata['encoding'] == 'utf-8'
        assert metadata['file_size_bytes'] > 0
