"""
Command-line interface for the zootechnical analysis engine.

Provides commands for:
- Dataset analysis (variable types and descriptive statistics)
- Cross-field validation of derived indices (GPD, FCR, IEP)
- Correlation discovery with biological relevance scoring
- Comparison of metric values against NRC/EMBRAPA references
- Checking that a dataset matches the selected species
"""

import json
import sys

import click

from zootech_analysis import __version__
from zootech_analysis.core.config import AnalysisConfig
from zootech_analysis.core.exceptions import ZootechAnalysisError
from zootech_analysis.core.logging_config import setup_logging, get_logger
from zootech_analysis.core.pretty_output import PrettyOutput as po
from zootech_analysis.loaders.csv_loader import load_rows
from zootech_analysis.profiler.correlation_discovery import CorrelationDiscoveryEngine, CorrelationOptions
from zootech_analysis.profiler.dataset_analyzer import DatasetAnalyzer
from zootech_analysis.references.service import ReferenceDataService
from zootech_analysis.species import normalize_species, validate_species_data
from zootech_analysis.validations.cross_field import CrossFieldValidator

logger = get_logger(__name__)

LOG_LEVELS = click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False)


def _write_json(payload, output_path=None):
    text = json.dumps(payload, indent=2, ensure_ascii=False, default=str)
    if output_path:
        with open(output_path, 'w', encoding='utf-8') as f:
            f.write(text)
        po.info(f"Relatório salvo em {output_path}")
    else:
        click.echo(text)


def _resolve_species(ctx, species):
    species = species or ctx.obj['config'].species
    if not species:
        raise click.UsageError("Informe a espécie com --species ou na seção 'analysis' da configuração")
    return normalize_species(species)


def _fail(error: ZootechAnalysisError):
    po.error(error.message)
    logger.debug(f"{error.__class__.__name__}: {error.to_dict()}")
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
@click.option('--config', '-c', 'config_path', type=click.Path(exists=True), help='YAML configuration file')
@click.option('--log-level', type=LOG_LEVELS, default=None, help='Logging level (overrides config)')
@click.option('--log-file', type=click.Path(), default=None, help='Optional log file path')
@click.pass_context
def cli(ctx, config_path, log_level, log_file):
    """
    Zootech Analysis - statistics and validation for animal-production data.

    Reads tabular zootechnical datasets (CSV), classifies their variables,
    computes descriptive and inferential statistics, checks derived indices
    against their formulas, discovers biologically relevant correlations and
    compares values with species reference ranges.
    """
    try:
        config = AnalysisConfig.from_yaml(config_path) if config_path else AnalysisConfig()
    except ZootechAnalysisError as e:
        po.error(f"Erro de configuração: {e.message}")
        sys.exit(1)

    setup_logging(level=log_level or config.log_level, log_file=log_file or config.log_file)
    ctx.obj = {'config': config}


@cli.command()
@click.argument('file', type=click.Path(exists=True))
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json']), default='text',
              help='Output format')
@click.option('--output', '-o', type=click.Path(), help='Write the JSON report to this file')
@click.option('--delimiter', '-d', default=None, help='Column delimiter (auto-detected by default)')
@click.pass_context
def analyze(ctx, file, output_format, output, delimiter):
    """
    Classify every column and compute descriptive statistics.

    Numeric means come with a confidence interval at the level set by
    analysis.confidence_level in the configuration (95% by default).

    FILE: CSV file with one animal (or lot) per row

    Examples:

    \b
    zootech analyze pesagens.csv
    zootech analyze pesagens.csv --format json -o resumo.json
    """
    try:
        rows = load_rows(file, delimiter=delimiter)
        analysis = DatasetAnalyzer(confidence_level=ctx.obj['config'].confidence_level).analyze(rows)
    except ZootechAnalysisError as e:
        _fail(e)

    if output_format == 'json' or output:
        _write_json(analysis.to_dict(), output)
        return

    po.header("Análise do Conjunto de Dados")
    po.key_value("Linhas", analysis.total_rows)
    po.key_value("Colunas", analysis.total_columns)

    po.section("Tipos de Variáveis")
    po.compact_table(
        ["Coluna", "Tipo", "Unidade", "Zootécnica"],
        [
            (name, info.type.value, info.unit or '-', 'sim' if info.is_zootechnical else 'não')
            for name, info in analysis.variables_info.items()
        ]
    )

    if analysis.numeric_stats:
        po.section("Estatísticas Numéricas")
        ci_header = f"IC {analysis.confidence_level * 100:.0f}%"
        intervals = analysis.confidence_intervals
        po.compact_table(
            ["Coluna", "n", "Média", ci_header, "DP", "Mín", "Máx", "CV%", "Outliers"],
            [
                (name, s.valid_count, f"{s.mean:.2f}",
                 f"[{intervals[name].lower:.2f}; {intervals[name].upper:.2f}]" if name in intervals else "-",
                 f"{s.std_dev:.2f}", f"{s.min:.2f}", f"{s.max:.2f}", f"{s.cv:.2f}", len(s.outliers))
                for name, s in analysis.numeric_stats.items()
            ]
        )

    if analysis.categorical_stats:
        po.section("Estatísticas Categóricas")
        po.compact_table(
            ["Coluna", "n", "Categorias", "Mais comum", "Entropia"],
            [
                (name, s.valid_count, s.unique_values, s.most_common, f"{s.entropy:.3f}")
                for name, s in analysis.categorical_stats.items()
            ]
        )


@cli.command('cross-validate')
@click.argument('file', type=click.Path(exists=True))
@click.option('--species', '-s', default=None, help='Species (bovine, swine, poultry, ... or Portuguese name)')
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json']), default='text',
              help='Output format')
@click.option('--output', '-o', type=click.Path(), help='Write the JSON report to this file')
@click.option('--delimiter', '-d', default=None, help='Column delimiter (auto-detected by default)')
@click.pass_context
def cross_validate(ctx, file, species, output_format, output, delimiter):
    """
    Recalculate GPD, feed conversion and IEP and compare with reported values.

    Exits with status 1 when any row has errors.
    """
    species = _resolve_species(ctx, species)
    config = ctx.obj['config']

    try:
        rows = load_rows(file, delimiter=delimiter)
    except ZootechAnalysisError as e:
        _fail(e)

    validator = CrossFieldValidator(
        gpd_tolerance=config.gpd_tolerance,
        fcr_tolerance=config.fcr_tolerance,
        iep_tolerance=config.iep_tolerance,
    )
    report = validator.perform_cross_validation(rows, species)

    if output_format == 'json' or output:
        _write_json(report.to_dict(), output)
    else:
        po.header(f"Validação Cruzada ({species})")
        for row in report.results:
            for rule, result in row.validations.items():
                for message in result.errors:
                    po.error(f"Linha {row.row} [{rule}]: {message}")
                for message in result.warnings:
                    po.warning(f"Linha {row.row} [{rule}]: {message}")
        po.validation_result(report.overall_valid, report.total_errors, report.total_warnings)

    if not report.overall_valid:
        sys.exit(1)


@cli.command()
@click.argument('file', type=click.Path(exists=True))
@click.option('--species', '-s', default=None, help='Species (bovine, swine, poultry, ... or Portuguese name)')
@click.option('--min-relevance', type=click.IntRange(0, 10), default=None, help='Minimum biological relevance')
@click.option('--max', 'max_correlations', type=click.IntRange(min=1), default=None,
              help='Maximum number of correlations reported')
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json']), default='text',
              help='Output format')
@click.option('--output', '-o', type=click.Path(), help='Write the JSON report to this file')
@click.option('--delimiter', '-d', default=None, help='Column delimiter (auto-detected by default)')
@click.pass_context
def correlations(ctx, file, species, min_relevance, max_correlations, output_format, output, delimiter):
    """Discover biologically relevant correlations between numeric columns."""
    species = _resolve_species(ctx, species)
    options = CorrelationOptions.from_dict(ctx.obj['config'].correlation_settings)
    if min_relevance is not None:
        options.min_relevance_score = min_relevance
    if max_correlations is not None:
        options.max_correlations = max_correlations

    try:
        rows = load_rows(file, delimiter=delimiter)
    except ZootechAnalysisError as e:
        _fail(e)

    report = CorrelationDiscoveryEngine().analyze_correlations(rows, species, options)

    if output_format == 'json' or output:
        _write_json(report.to_dict(), output)
        return

    po.header(f"Correlações ({species})")
    po.key_value("Total", report.total_correlations)
    po.key_value("Significativas", report.significant_correlations)
    po.key_value("Alta relevância", report.high_relevance_correlations)

    if report.top_correlations:
        po.section("Principais Correlações")
        po.compact_table(
            ["Variável 1", "Variável 2", "r", "p", "Relevância", "Categoria"],
            [
                (c.var1, c.var2, f"{c.coefficient:.3f}", f"{c.p_value:.4f}", c.relevance_score, c.category)
                for c in report.top_correlations
            ]
        )

    for message in report.warnings:
        po.warning(message)
    if report.recommendations:
        po.subsection("Recomendações")
        for message in report.recommendations:
            po.item(message, indent=2)


@cli.command()
@click.argument('values', nargs=-1, required=True)
@click.option('--species', '-s', default=None, help='Species (bovine, swine, poultry, ... or Portuguese name)')
@click.option('--subtype', '-t', default=None, help='Subtype (beef, dairy, broiler, meat, brachiaria_brizantha, ...)')
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json']), default='text',
              help='Output format')
@click.pass_context
def compare(ctx, values, species, subtype, output_format):
    """
    Compare metric values with reference ranges.

    VALUES: metric=value pairs

    \b
    zootech compare --species bovine --subtype beef gpd=1.2 peso_desmame=190
    """
    species = _resolve_species(ctx, species)
    subtype = subtype or ctx.obj['config'].subtype

    data = {}
    for pair in values:
        metric, sep, raw_value = pair.partition('=')
        if not sep or not metric.strip():
            raise click.BadParameter(f"'{pair}' não está no formato metrica=valor", param_hint='VALUES')
        data[metric.strip()] = raw_value.strip()

    result = ReferenceDataService().compare_multiple_metrics(data, species, subtype)

    if output_format == 'json':
        _write_json(result.to_dict())
    else:
        po.header(f"Comparação com Referências ({species}{'/' + subtype if subtype else ''})")
        for comparison in result.comparisons:
            validation = comparison.validation
            po.key_value(
                comparison.metric,
                f"{comparison.value} {po.colored_status(validation.status.value)} - {validation.message}",
                indent=2
            )
        po.summary_box("Resumo", [
            ("Excelente", result.summary['excellent'], po.SUCCESS),
            ("Bom", result.summary['good'], po.PRIMARY),
            ("Aceitável", result.summary['acceptable'], po.WARNING),
            ("Atenção", result.summary['attention'], po.ERROR),
            ("Sem referência", result.summary['no_reference'], po.DIM),
            ("Status geral", result.overall_status.value, po.HEADER),
        ])

    if result.summary['attention'] > 0:
        sys.exit(1)


@cli.command('species-check')
@click.argument('file', type=click.Path(exists=True))
@click.option('--species', '-s', default=None, help='Species selected for the dataset')
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json']), default='text',
              help='Output format')
@click.option('--delimiter', '-d', default=None, help='Column delimiter (auto-detected by default)')
@click.pass_context
def species_check(ctx, file, species, output_format, delimiter):
    """Check that the dataset columns match the selected species."""
    species = _resolve_species(ctx, species)

    try:
        rows = load_rows(file, delimiter=delimiter)
    except ZootechAnalysisError as e:
        _fail(e)

    columns = list(rows[0].keys()) if rows else []
    check = validate_species_data(columns, species)

    if output_format == 'json':
        _write_json(check.to_dict())
    elif check.is_valid:
        po.success(
            f"Dados compatíveis com '{check.selected_species}' "
            f"({check.match_score:.1f}% das colunas reconhecidas)"
        )
    else:
        po.error(check.error_message)

    if not check.is_valid:
        sys.exit(1)


def main():
    cli()


if __name__ == '__main__':
    main()
