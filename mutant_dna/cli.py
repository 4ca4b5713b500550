"""
Command-line interface for mutant_dna.

Author: Kevin R. Roy
"""

import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

import click

from . import __version__
from .config import DetectorConfig, StoreBackendType, load_grid_file, parse_grid_input


def _setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )


def _load_config(config, ledger, threads=None) -> DetectorConfig:
    """Build a DetectorConfig from --config, with --ledger/--threads overrides."""
    try:
        cfg = DetectorConfig.from_yaml(Path(config)) if config else DetectorConfig()
        if ledger:
            cfg = replace(cfg, store_backend=StoreBackendType.LEDGER, ledger_path=Path(ledger))
        if threads is not None:
            cfg = replace(cfg, threads=threads)
    except (OSError, ValueError) as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        sys.exit(1)
    return cfg


def _grid_argument(dna):
    """A single argument may be a joined grid or the path of a grid file."""
    if len(dna) == 1 and Path(dna[0]).is_file():
        try:
            return load_grid_file(Path(dna[0]))
        except OSError as e:
            click.echo(f"Error loading grid file: {e}", err=True)
            sys.exit(1)
    return dna[0] if len(dna) == 1 else list(dna)


def _build_detector(cfg: DetectorConfig):
    from .detector import MutantDetector
    from .errors import StorageUnavailableError

    try:
        return MutantDetector(config=cfg)
    except StorageUnavailableError as e:
        click.echo(f"Error opening store: {e}", err=True)
        sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def cli():
    """mutant-dna: detect mutant DNA grids and track distinct-sample statistics."""
    pass


@cli.command()
@click.argument('dna', nargs=-1, required=True)
@click.option('--config', '-c', type=click.Path(exists=True),
              help='YAML configuration file')
@click.option('--ledger', '-l', type=click.Path(),
              help='Ledger file for persistent statistics (default: in-memory)')
@click.option('--verbose', '-v', is_flag=True, help='Debug logging')
def check(dna, config, ledger, verbose):
    """
    Classify one grid as mutant or human.

    DNA can be the rows as separate arguments, one comma-separated string,
    or a path to a grid file.

    \b
    Example:
      mutant-dna check ATGCGA CAGTGC TTATGT AGAAGG CCCCTA TCACTG
      mutant-dna check ATGC,CAGT,TTAT,AGAC --ledger stats.tsv
    """
    _setup_logging(verbose)
    cfg = _load_config(config, ledger)
    grid_input = _grid_argument(dna)
    detector = _build_detector(cfg)

    try:
        result = detector.is_mutant(grid_input)
    finally:
        detector.close()

    if not result.ok:
        click.echo(f"Error ({result.error.kind.value}): {result.error.message}", err=True)
        sys.exit(1)

    click.echo(result.outcome.value)


@cli.command()
@click.argument('dna', nargs=-1, required=True)
def explain(dna):
    """
    List every qualifying run in a grid.

    Unlike check, the scan does not stop at the mutant threshold and
    nothing is recorded.
    """
    from .core.classification import MUTANT_RUN_THRESHOLD
    from .core.grid import parse_grid
    from .core.scanner import iter_qualifying_runs

    try:
        rows = parse_grid_input(_grid_argument(dna))
    except ValueError as e:
        click.echo(f"Error loading grid: {e}", err=True)
        sys.exit(1)

    grid, error = parse_grid(rows)
    if error is not None:
        click.echo(f"Error ({error.kind.value}): {error.message}", err=True)
        sys.exit(1)

    runs = list(iter_qualifying_runs(grid))
    for run in runs:
        click.echo(f"  * {run}")

    verdict = 'mutant' if len(runs) >= MUTANT_RUN_THRESHOLD else 'human'
    click.echo(f"{len(runs)} qualifying run(s) in {grid.size}x{grid.size} grid: {verdict}")


@cli.command()
@click.option('--sample-key', '-s', type=click.Path(exists=True), required=True,
              help='Sample key TSV (sample_id, dna columns)')
@click.option('--output', '-o', type=click.Path(), required=True,
              help='Output directory')
@click.option('--config', '-c', type=click.Path(exists=True),
              help='YAML configuration file')
@click.option('--ledger', '-l', type=click.Path(),
              help='Ledger file for persistent statistics (default: in-memory)')
@click.option('--threads', '-t', type=int, default=None,
              help='Number of threads (default: 4)')
def batch(sample_key, output, config, ledger, threads):
    """
    Classify every grid in a sample key.

    \b
    Example:
      mutant-dna batch -s samples.tsv -o results/ --ledger stats.tsv
    """
    from .io.output import generate_summary_report, write_results_tsv, write_stats_tsv
    from .io.sample_key import load_sample_key

    _setup_logging()
    cfg = _load_config(config, ledger, threads)

    try:
        samples = load_sample_key(Path(sample_key))
    except (OSError, ValueError) as e:
        click.echo(f"Error loading sample key: {e}", err=True)
        sys.exit(1)

    output_path = Path(output)
    output_path.mkdir(parents=True, exist_ok=True)

    detector = _build_detector(cfg)
    try:
        results = detector.process_batch(samples)
        snapshot = detector.stats()
    finally:
        detector.close()

    write_results_tsv(results, output_path / 'per_sample_results.tsv')
    write_stats_tsv(snapshot, output_path / 'stats.tsv')
    generate_summary_report(results, snapshot, output_path / 'summary_report.md')

    n_failed = sum(1 for r in results if r.error is not None)
    click.echo(f"\nProcessed {len(results)} samples ({n_failed} rejected)")
    click.echo(json.dumps(snapshot.to_dict()))
    click.echo(f"Results written to: {output_path / 'per_sample_results.tsv'}")


@cli.command()
@click.option('--ledger', '-l', type=click.Path(exists=True), required=True,
              help='Ledger file')
def stats(ledger):
    """Print statistics for a ledger."""
    cfg = _load_config(None, ledger)
    detector = _build_detector(cfg)
    try:
        snapshot = detector.stats()
    finally:
        detector.close()
    click.echo(json.dumps(snapshot.to_dict()))


@cli.command()
@click.option('--ledger', '-l', type=click.Path(exists=True), required=True,
              help='Ledger file')
@click.confirmation_option(prompt='Drop every stored classification?')
def reset(ledger):
    """Clear every record in a ledger."""
    from .errors import StorageUnavailableError

    cfg = _load_config(None, ledger)
    detector = _build_detector(cfg)
    try:
        detector.reset()
    except StorageUnavailableError as e:
        click.echo(f"Error clearing ledger: {e}", err=True)
        sys.exit(1)
    finally:
        detector.close()
    click.echo(f"Cleared {ledger}")


@cli.command()
@click.option('--output', '-o', type=click.Path(), default='mutant_dna.yaml',
              help='Output config file path')
def init(output):
    """Generate a template configuration file."""
    template = '''# mutant-dna configuration template

# Record store: memory (lost on exit) or ledger (append-only TSV file)
store_backend: ledger
ledger_path: mutant_dna_ledger.tsv   # relative to this file

# Flush each ledger line to disk before acknowledging it
fsync: false

# Dedup key hash: sha256, sha384, sha512, sha3_256, sha3_512 or blake2b
fingerprint_algorithm: sha256

# Largest accepted grid (N for an N x N grid)
max_grid_size: 1000

# Worker threads for batch runs
threads: 4
'''

    with open(output, 'w') as f:
        f.write(template)

    click.echo(f"Generated configuration template: {output}")
    click.echo("\nEdit this file and run:")
    click.echo(f"  mutant-dna batch --config {output} -s samples.tsv -o results/")


if __name__ == '__main__':
    cli()
