"""
Sample key parsing and validation.

Author: Kevin R. Roy
"""

from pathlib import Path
from typing import List, Dict, Optional
from dataclasses import dataclass
import pandas as pd
import logging

from ..config import split_grid_string

logger = logging.getLogger(__name__)


@dataclass
class Sample:
    """Represents a single submitted grid.

    Attributes:
        sample_id: Unique sample identifier
        dna: Grid rows as given in the sample key (not yet validated)
        metadata: Additional metadata columns from sample key
    """
    sample_id: str
    dna: Optional[List[str]]
    metadata: Dict = None

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = {}


def load_sample_key(path: Path) -> List[Sample]:
    """
    Load samples from a sample key TSV file.

    Required columns:
    - sample_id: Unique sample identifier
    - dna: Grid rows joined by commas (e.g. ATGC,CAGT,TTAT,AGAC)

    Additional columns are stored as metadata. Grids are not validated
    here; invalid ones are reported per sample by the detector.

    Args:
        path: Path to sample key TSV

    Returns:
        List of Sample objects
    """
    df = pd.read_csv(path, sep='\t', dtype=str, keep_default_na=False)

    if 'sample_id' not in df.columns:
        raise ValueError("Sample key must have 'sample_id' column")

    if 'dna' not in df.columns:
        raise ValueError("Sample key must have 'dna' column")

    standard_cols = {'sample_id', 'dna'}

    samples = []
    seen = set()
    for _, row in df.iterrows():
        sample_id = str(row['sample_id']).strip()
        if sample_id in seen:
            logger.warning(f"Duplicate sample_id in sample key: {sample_id}")
        seen.add(sample_id)

        dna_value = str(row['dna']).strip()
        dna = split_grid_string(dna_value) if dna_value else None

        metadata = {
            k: v for k, v in row.items()
            if k not in standard_cols and v != ''
        }

        samples.append(Sample(sample_id=sample_id, dna=dna, metadata=metadata))

    logger.info(f"Loaded {len(samples)} samples from {path}")
    return samples


def create_sample_key_template(output_path: Path):
    """Create a template sample key file.

    Args:
        output_path: Path to write template file
    """
    template = """sample_id\tdna\tsource
human_1\tATGC,CAGT,TTAT,AGAC\tcanonical
mutant_1\tATGCGA,CAGTGC,TTATGT,AGAAGG,CCCCTA,TCACTG\tcanonical
"""
    with open(output_path, 'w') as f:
        f.write(template)

    logger.info(f"Created sample key template: {output_path}")
