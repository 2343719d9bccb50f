"""Tab-separated APOE genotype report.

Report format (tab-separated, header first):
SampleID    APOE_genotype
S1          APOE-3/3
S2          APOE_unknown

The report is the run history: samples already listed are skipped by later
runs, so it is rewritten atomically after each appended sample.
"""

import logging
from collections import Counter
from collections.abc import Iterator
from pathlib import Path

from apoe_genotyper.exceptions import DuplicateSampleError, ReportParseError
from apoe_genotyper.io_utils import atomic_write_text
from apoe_genotyper.models import ApoeGenotype

logger = logging.getLogger(__name__)

SAMPLE_COLUMN = "SampleID"
GENOTYPE_COLUMN = "APOE_genotype"
REPORT_HEADER = f"{SAMPLE_COLUMN}\t{GENOTYPE_COLUMN}"


def _split_row(line: str) -> list[str]:
    # Tab-separated; falls back to any whitespace for hand-edited files
    if "\t" in line:
        return [part.strip() for part in line.split("\t")]
    return line.split()


class GenotypeReport:
    """Insertion-ordered mapping of sample ID to APOE genotype.

    Usage:
        report = GenotypeReport.load(path)
        if sample_id not in report:
            report.append(sample_id, genotype)
            report.flush(path)
    """

    def __init__(self) -> None:
        self._genotypes: dict[str, ApoeGenotype] = {}

    @classmethod
    def load(cls, filepath: Path) -> "GenotypeReport":
        """Load an existing report, or return an empty one if the file is absent.

        Args:
            filepath: Path to the report TSV

        Returns:
            GenotypeReport with the rows of the file

        Raises:
            ReportParseError: If the file exists but its header is missing or
                its first column is not SampleID, or it is not UTF-8 text
        """
        report = cls()
        if not filepath.exists():
            return report

        try:
            with open(filepath, encoding="utf-8") as f:
                lines = [
                    (line_num, line.strip())
                    for line_num, line in enumerate(f, 1)
                    if line.strip()
                ]
        except UnicodeDecodeError as e:
            raise ReportParseError(f"Report {filepath} is not valid UTF-8 text: {e}") from e

        if not lines:
            raise ReportParseError(f"Report {filepath} has no header line")

        first_column = _split_row(lines[0][1])[0]
        if first_column != SAMPLE_COLUMN:
            raise ReportParseError(
                f"Malformed report header in {filepath}: expected first column "
                f"{SAMPLE_COLUMN!r}, got {first_column!r}"
            )

        for line_num, line in lines[1:]:
            parts = _split_row(line)
            sample_id = parts[0]
            label = parts[1] if len(parts) > 1 else ""

            try:
                genotype = ApoeGenotype.from_report_label(label)
            except ValueError:
                logger.warning(
                    f"{filepath.name}:{line_num}: unrecognized genotype {label!r} "
                    f"for {sample_id}; loading as unknown"
                )
                genotype = ApoeGenotype.UNKNOWN

            if sample_id in report:
                logger.warning(
                    f"{filepath.name}:{line_num}: duplicate sample {sample_id}; "
                    "keeping the first row"
                )
                continue
            report._genotypes[sample_id] = genotype

        logger.debug(f"Loaded {len(report)} samples from {filepath}")
        return report

    def contains(self, sample_id: str) -> bool:
        """Check if a sample is already in the report."""
        return sample_id in self._genotypes

    def __contains__(self, sample_id: object) -> bool:
        return sample_id in self._genotypes

    def __len__(self) -> int:
        return len(self._genotypes)

    def __iter__(self) -> Iterator[tuple[str, ApoeGenotype]]:
        return iter(self._genotypes.items())

    def get(self, sample_id: str) -> ApoeGenotype | None:
        """Genotype of a sample, or None if it is not in the report."""
        return self._genotypes.get(sample_id)

    def append(self, sample_id: str, genotype: ApoeGenotype) -> None:
        """Add a sample to the report.

        Raises:
            DuplicateSampleError: If the sample is already in the report
        """
        if sample_id in self._genotypes:
            raise DuplicateSampleError(f"Sample {sample_id} is already in the report")
        self._genotypes[sample_id] = genotype

    def to_tsv(self) -> str:
        """Render the report as TSV text, rows in insertion order."""
        rows = [REPORT_HEADER]
        rows.extend(
            f"{sample_id}\t{genotype.report_label}"
            for sample_id, genotype in self._genotypes.items()
        )
        return "\n".join(rows) + "\n"

    def flush(self, filepath: Path) -> None:
        """Atomically write the full report to a file."""
        atomic_write_text(filepath, self.to_tsv())

    def genotype_counts(self) -> Counter:
        """Number of samples per genotype."""
        return Counter(self._genotypes.values())
