"""Main orchestration for the APOE genotyper.

Implements run_genotyping(), which discovers the input VCFs, skips samples
already in the report, genotypes the rest and appends them to the report one
sample at a time, and run_inspect(), which dumps the raw APOE site records.
"""

import logging
from concurrent.futures import ProcessPoolExecutor, as_completed
from pathlib import Path

from rich.console import Console
from rich.progress import (
    BarColumn,
    Progress,
    SpinnerColumn,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
)

from apoe_genotyper.checks.extractor import extract_calls
from apoe_genotyper.checks.resolver import resolve_genotype
from apoe_genotyper.checks.zygosity import classify_call
from apoe_genotyper.config import Config
from apoe_genotyper.exceptions import (
    ApoeGenotyperError,
    NoInputFilesError,
    VariantFileError,
)
from apoe_genotyper.io_utils import discover_variant_files, sample_id_from_path
from apoe_genotyper.models import (
    SITE_RS429358,
    SITE_RS7412,
    ApoeGenotype,
    SampleResult,
    Statistics,
)
from apoe_genotyper.parsers.vcf import iter_site_records, read_chr19_records
from apoe_genotyper.writers.log import print_summary
from apoe_genotyper.writers.report import GenotypeReport
from apoe_genotyper.writers.variants import build_variants_table, write_variants_table

logger = logging.getLogger(__name__)

console = Console()


def genotype_sample(vcf_file: Path) -> SampleResult:
    """Determine the APOE genotype of one single-sample VCF.

    Read and extraction errors do not propagate: the sample resolves to
    UNKNOWN and the error message is kept on the result.

    Args:
        vcf_file: Path to .vcf or .vcf.gz file

    Returns:
        SampleResult for the file
    """
    sample_id = sample_id_from_path(vcf_file)

    try:
        records = read_chr19_records(vcf_file)
        calls = extract_calls(records)
    except ApoeGenotyperError as e:
        return SampleResult(
            sample_id=sample_id,
            source=str(vcf_file),
            genotype=ApoeGenotype.UNKNOWN,
            error=str(e),
        )

    zygosities = {site: classify_call(call) for site, call in calls.items()}
    genotype = resolve_genotype(
        rs7412=zygosities[SITE_RS7412],
        rs429358=zygosities[SITE_RS429358],
    )

    return SampleResult(
        sample_id=sample_id,
        source=str(vcf_file),
        genotype=genotype,
        calls={site.name: call.genotype_string for site, call in calls.items()},
        zygosities={site.name: zyg.name for site, zyg in zygosities.items()},
    )


def select_samples(
    vcf_files: list[Path],
    report: GenotypeReport,
    stats: Statistics,
) -> list[Path]:
    """Drop files whose sample is already reported, repeated or empty.

    Returns:
        Files to genotype, in discovery order
    """
    selected: list[Path] = []
    seen: set[str] = set()

    for vcf_file in vcf_files:
        sample_id = sample_id_from_path(vcf_file)

        if report.contains(sample_id):
            logger.info(f"{sample_id} has already been processed. Skipping...")
            stats.skipped_existing += 1
            continue

        if sample_id in seen:
            logger.warning(f"{vcf_file} repeats sample {sample_id}. Skipping...")
            stats.skipped_duplicate += 1
            continue

        if vcf_file.stat().st_size == 0:
            logger.warning(f"{vcf_file} is empty. Skipping...")
            stats.skipped_empty += 1
            continue

        seen.add(sample_id)
        selected.append(vcf_file)

    return selected


def _record_result(
    result: SampleResult,
    report: GenotypeReport,
    report_file: Path,
    stats: Statistics,
) -> None:
    if result.error is not None:
        logger.warning(
            f"{result.sample_id}: {result.error}; reporting {result.genotype.report_label}"
        )
    else:
        logger.info(
            f"{result.sample_id}: rs7412={result.calls.get(SITE_RS7412.name)} "
            f"rs429358={result.calls.get(SITE_RS429358.name)} -> {result.genotype.report_label}"
        )

    report.append(result.sample_id, result.genotype)
    report.flush(report_file)
    stats.record(result)


def run_genotyping(config: Config) -> Statistics:
    """Genotype every new sample in the input directory.

    Main entry point that coordinates:
    1. Loading the existing report (fatal if its header is malformed)
    2. Discovering VCF/VCF.gz files
    3. Skipping samples already in the report
    4. Genotyping the remaining samples, sequentially or in a process pool
    5. Appending each result to the report as soon as it is available

    Args:
        config: Configuration with input directory and output paths

    Returns:
        Statistics for the run

    Raises:
        ReportParseError: If the existing report cannot be trusted
        NoInputFilesError: If no VCF files are found
    """
    assert config.report_file is not None  # Set in Config.__post_init__

    stats = Statistics()

    # Step 1: Load the report history
    report = GenotypeReport.load(config.report_file)
    if report:
        console.print(f"Loaded {len(report):,} samples from {config.report_file.name}")
    if not config.report_file.exists():
        report.flush(config.report_file)

    # Step 2: Discover input files
    vcf_files = discover_variant_files(config.input_dir, config.pattern, config.recursive)
    stats.files_found = len(vcf_files)
    if not vcf_files:
        raise NoInputFilesError(f'No VCF files found in "{config.input_dir}"')
    console.print(f"Found {len(vcf_files):,} VCF files.")

    # Step 3: Skip known samples
    pending = select_samples(vcf_files, report, stats)
    if stats.skipped_existing:
        console.print(f"Skipping {stats.skipped_existing:,} samples already in the report")

    # Step 4: Genotype and append
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=console,
    ) as progress:
        task = progress.add_task("Genotyping samples...", total=len(pending))

        if config.workers == 1 or len(pending) <= 1:
            for vcf_file in pending:
                _record_result(genotype_sample(vcf_file), report, config.report_file, stats)
                progress.advance(task)
        else:
            executor = ProcessPoolExecutor(max_workers=min(config.workers, len(pending)))
            try:
                futures = {executor.submit(genotype_sample, f): f for f in pending}
                for future in as_completed(futures):
                    _record_result(future.result(), report, config.report_file, stats)
                    progress.advance(task)
            except BaseException:
                executor.shutdown(wait=False, cancel_futures=True)
                raise
            executor.shutdown()

    print_summary(stats, console)
    return stats


def run_inspect(config: Config) -> Path:
    """Write the raw records at rs7412 and rs429358 of every sample to a TSV.

    Args:
        config: Configuration with input directory and variants_file

    Returns:
        Path to the written TSV

    Raises:
        NoInputFilesError: If no VCF files are found
    """
    assert config.variants_file is not None  # Set in Config.__post_init__

    vcf_files = discover_variant_files(config.input_dir, config.pattern, config.recursive)
    if not vcf_files:
        raise NoInputFilesError(f'No VCF files found in "{config.input_dir}"')
    console.print(f"Found {len(vcf_files):,} VCF files.")

    rows_by_sample: dict[str, list[dict]] = {}
    for vcf_file in vcf_files:
        sample_id = sample_id_from_path(vcf_file)
        logger.info(f"Processing {sample_id}...")

        if vcf_file.stat().st_size == 0:
            logger.warning(f"{vcf_file} is empty. Skipping...")
            continue

        try:
            rows = list(iter_site_records(vcf_file))
        except VariantFileError as e:
            logger.warning(f"{sample_id}: {e}")
            rows = []
        rows_by_sample.setdefault(sample_id, []).extend(rows)

    df = build_variants_table(rows_by_sample)
    return write_variants_table(df, config.variants_file)
