"""Configuration dataclass for the APOE genotyper."""

import re
from dataclasses import dataclass
from pathlib import Path

REPORT_FILENAME = "APOE_genotype_report.tsv"
VARIANTS_FILENAME = "APOE_variants.tsv"


@dataclass
class Config:
    """Configuration for an APOE genotyping or inspection run.

    Attributes:
        input_dir: Directory searched for .vcf/.vcf.gz files
        output_dir: Directory for the report and logs (default: input_dir)
        pattern: Regular expression filtering the input file paths
        report_file: Genotype report path (default: {output_dir}/APOE_genotype_report.tsv)
        variants_file: Inspection output path (default: {output_dir}/APOE_variants.tsv)
        workers: Number of parallel worker processes (1 = sequential)
        recursive: Search input_dir recursively
        verbose: Enable verbose logging
        log_dir: Directory for log files (default: output_dir)
    """

    input_dir: Path
    output_dir: Path | None = None
    pattern: str | None = None

    # Output files
    report_file: Path | None = None
    variants_file: Path | None = None

    # Behavior
    workers: int = 1
    recursive: bool = True
    verbose: bool = False
    log_dir: Path | None = None

    def __post_init__(self) -> None:
        """Coerce paths and fill in defaults."""
        if isinstance(self.input_dir, str):
            self.input_dir = Path(self.input_dir)

        if self.output_dir is None:
            self.output_dir = self.input_dir
        elif isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)

        if self.report_file is None:
            self.report_file = self.output_dir / REPORT_FILENAME
        elif isinstance(self.report_file, str):
            self.report_file = Path(self.report_file)

        if self.variants_file is None:
            self.variants_file = self.output_dir / VARIANTS_FILENAME
        elif isinstance(self.variants_file, str):
            self.variants_file = Path(self.variants_file)

        if self.log_dir is None:
            self.log_dir = self.output_dir
        elif isinstance(self.log_dir, str):
            self.log_dir = Path(self.log_dir)

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors.

        Returns:
            List of error messages (empty if valid)
        """
        errors: list[str] = []

        if not self.input_dir.is_dir():
            errors.append(f"Input directory does not exist: {self.input_dir}")

        if self.workers < 1:
            errors.append(f"workers must be at least 1: {self.workers}")

        if self.pattern:
            try:
                re.compile(self.pattern)
            except re.error as e:
                errors.append(f"Invalid file pattern {self.pattern!r}: {e}")

        return errors
