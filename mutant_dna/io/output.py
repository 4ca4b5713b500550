"""
Output generation for mutant_dna results.

Author: Kevin R. Roy
"""

from pathlib import Path
from typing import Dict, List, Optional
from dataclasses import dataclass
import pandas as pd
import logging

from ..core.classification import DnaOutcome
from ..core.grid import GridError
from ..store.stats import StatsSnapshot

logger = logging.getLogger(__name__)

RESULT_COLUMNS = ['sample', 'fingerprint', 'outcome', 'error_kind', 'error']


@dataclass
class SampleResult:
    """Result for a single sample in a batch."""
    sample_id: str
    fingerprint: Optional[str] = None
    is_mutant: Optional[bool] = None
    error: Optional[GridError] = None

    # Metadata
    metadata: Dict = None

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = {}

    @property
    def outcome(self) -> Optional[DnaOutcome]:
        if self.is_mutant is None:
            return None
        return DnaOutcome.from_flag(self.is_mutant)


def write_results_tsv(
    results: List[SampleResult],
    output_path: Path,
    include_metadata: bool = True,
) -> Path:
    """
    Write per-sample results to TSV file.

    Args:
        results: List of SampleResult objects
        output_path: Path for output TSV
        include_metadata: Include metadata columns

    Returns:
        Path to written file
    """
    rows = []

    for r in results:
        row = {
            'sample': r.sample_id,
            'fingerprint': r.fingerprint or '',
            'outcome': r.outcome.value if r.outcome else '',
            'error_kind': r.error.kind.value if r.error else '',
            'error': r.error.message if r.error else '',
        }

        if include_metadata and r.metadata:
            for k, v in r.metadata.items():
                if k not in row:
                    row[k] = v

        rows.append(row)

    df = pd.DataFrame(rows) if rows else pd.DataFrame(columns=RESULT_COLUMNS)
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, sep='\t', index=False)

    logger.info(f"Wrote {len(results)} results to {output_path}")
    return output_path


def write_stats_tsv(snapshot: StatsSnapshot, output_path: Path) -> Path:
    """Write a stats snapshot as a one-row TSV."""
    df = pd.DataFrame([snapshot.to_dict()])
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, sep='\t', index=False)
    return output_path


def generate_summary_report(
    results: List[SampleResult],
    snapshot: StatsSnapshot,
    output_path: Path,
) -> Path:
    """
    Generate a markdown summary of a batch run.

    Batch counts describe this batch only; store counts cover every
    distinct grid ever recorded.
    """
    n_mutant = sum(1 for r in results if r.is_mutant is True)
    n_human = sum(1 for r in results if r.is_mutant is False)
    failed = [r for r in results if r.error is not None]

    lines = [
        "# Mutant DNA Summary",
        "",
        "## Batch",
        "",
        f"- Samples: {len(results)}",
        f"- Mutant: {n_mutant}",
        f"- Human: {n_human}",
        f"- Rejected: {len(failed)}",
        "",
        "## Store",
        "",
        f"- count_mutant_dna: {snapshot.count_mutant}",
        f"- count_human_dna: {snapshot.count_human}",
        f"- ratio: {snapshot.ratio:.4f}",
        "",
    ]

    if failed:
        lines.extend(["## Rejected samples", "", "| Sample | Kind | Message |", "|---|---|---|"])
        for r in failed:
            lines.append(f"| {r.sample_id} | {r.error.kind.value} | {r.error.message} |")
        lines.append("")

    output_path = Path(output_path)
    with open(output_path, 'w') as f:
        f.write("\n".join(lines))

    logger.info(f"Summary report written to {output_path}")
    return output_path
