"""Tests for the mutant-dna command-line interface."""

import json

import pytest
from click.testing import CliRunner
from mutant_dna.cli import cli


HUMAN_DNA = ["ATGC", "CAGT", "TTAT", "AGAC"]
MUTANT_DNA = ["ATGCGA", "CAGTGC", "TTATGT", "AGAAGG", "CCCCTA", "TCACTG"]


@pytest.fixture
def runner():
    return CliRunner()


class TestCheck:
    """Test the check command."""

    def test_mutant(self, runner):
        """Test rows given as separate arguments."""
        result = runner.invoke(cli, ["check", *MUTANT_DNA])
        assert result.exit_code == 0
        assert "mutant" in result.output

    def test_human_joined(self, runner):
        """Test one comma-joined argument."""
        result = runner.invoke(cli, ["check", ",".join(HUMAN_DNA)])
        assert result.exit_code == 0
        assert "human" in result.output

    def test_invalid_alphabet(self, runner):
        """Test a rejected grid exits non-zero."""
        result = runner.invoke(cli, ["check", "ATXC", "CAGT", "TTAT", "AGAC"])
        assert result.exit_code == 1
        assert "invalid_alphabet" in result.output

    def test_grid_file(self, runner, tmp_path):
        """Test a single argument naming a file is read as a grid."""
        grid_file = tmp_path / "grid.txt"
        grid_file.write_text("# canonical mutant\n" + "\n".join(MUTANT_DNA) + "\n")

        result = runner.invoke(cli, ["check", str(grid_file)])
        assert result.exit_code == 0
        assert "mutant" in result.output

    def test_joined_bad_letter(self, runner):
        """Test a joined grid with a digit is an alphabet error."""
        result = runner.invoke(cli, ["check", "ATG1,CAGT,TTAT,AGAC"])
        assert result.exit_code == 1
        assert "invalid_alphabet" in result.output

    def test_ledger_records(self, runner, tmp_path):
        """Test check records into a ledger once per distinct grid."""
        ledger = tmp_path / "ledger.tsv"
        for _ in range(2):
            result = runner.invoke(cli, ["check", *MUTANT_DNA, "--ledger", str(ledger)])
            assert result.exit_code == 0

        lines = ledger.read_text().splitlines()
        assert len(lines) == 2
        assert lines[1].endswith("\t1")


class TestExplain:
    """Test the explain command."""

    def test_lists_runs(self, runner):
        """Test every run of the mutant grid is listed."""
        result = runner.invoke(cli, ["explain", *MUTANT_DNA])
        assert result.exit_code == 0
        assert "horizontal run of 4 x C" in result.output
        assert "3 qualifying run(s) in 6x6 grid: mutant" in result.output

    def test_invalid_shape(self, runner):
        """Test a ragged grid is rejected."""
        result = runner.invoke(cli, ["explain", "AT", "TTAT"])
        assert result.exit_code == 1
        assert "invalid_shape" in result.output


class TestBatch:
    """Test the batch command."""

    def test_batch(self, runner, tmp_path):
        """Test batch output files and summary line."""
        key = tmp_path / "samples.tsv"
        key.write_text(
            "sample_id\tdna\n"
            f"m1\t{','.join(MUTANT_DNA)}\n"
            f"m2\t{','.join(MUTANT_DNA)}\n"
            f"h1\t{','.join(HUMAN_DNA)}\n"
            "bad\tAT,TTAT\n"
        )
        out = tmp_path / "results"

        result = runner.invoke(cli, ["batch", "-s", str(key), "-o", str(out), "-t", "2"])

        assert result.exit_code == 0, result.output
        assert "Processed 4 samples (1 rejected)" in result.output
        assert '"count_mutant_dna": 1' in result.output
        assert (out / "per_sample_results.tsv").exists()
        assert (out / "stats.tsv").exists()
        assert (out / "summary_report.md").exists()


class TestStatsAndReset:
    """Test the stats and reset commands."""

    def test_stats_and_reset(self, runner, tmp_path):
        """Test stats reads a ledger and reset clears it."""
        ledger = tmp_path / "ledger.tsv"
        runner.invoke(cli, ["check", *MUTANT_DNA, "-l", str(ledger)])
        runner.invoke(cli, ["check", *HUMAN_DNA, "-l", str(ledger)])

        result = runner.invoke(cli, ["stats", "-l", str(ledger)])
        assert result.exit_code == 0
        assert json.loads(result.output.strip().splitlines()[-1]) == {
            "count_mutant_dna": 1,
            "count_human_dna": 1,
            "ratio": 0.5,
        }

        result = runner.invoke(cli, ["reset", "-l", str(ledger), "--yes"])
        assert result.exit_code == 0
        assert "Cleared" in result.output

        result = runner.invoke(cli, ["stats", "-l", str(ledger)])
        assert '"count_mutant_dna": 0' in result.output


class TestInit:
    """Test the init command."""

    def test_init_config_is_loadable(self, runner, tmp_path):
        """Test the generated template loads as a DetectorConfig."""
        from mutant_dna.config import DetectorConfig, StoreBackendType

        output = tmp_path / "mutant_dna.yaml"
        result = runner.invoke(cli, ["init", "-o", str(output)])
        assert result.exit_code == 0

        config = DetectorConfig.from_yaml(output)
        assert config.store_backend == StoreBackendType.LEDGER
        assert config.ledger_path == tmp_path / "mutant_dna_ledger.tsv"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
