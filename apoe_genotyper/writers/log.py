"""Run summary output."""

from rich.console import Console
from rich.table import Table

from apoe_genotyper.models import ApoeGenotype, Statistics


def print_summary(stats: Statistics, console: Console | None = None) -> None:
    """Print run statistics and the genotype distribution of this run.

    Args:
        stats: Statistics collected during processing
        console: Console to print to (default: new stdout console)
    """
    console = console or Console()

    console.print(f"\nVCF files found          {stats.files_found}")
    console.print(f"Genotyped                {stats.processed}")
    console.print(f"Already in report        {stats.skipped_existing}")
    console.print(f"Empty files skipped      {stats.skipped_empty}")
    console.print(f"Repeated samples skipped {stats.skipped_duplicate}")
    console.print(f"Errors (APOE_unknown)    {stats.errors}")

    if not stats.processed:
        return

    table = Table(title="APOE genotypes")
    table.add_column("Genotype")
    table.add_column("Samples", justify="right")
    for genotype in ApoeGenotype:
        count = stats.genotype_counts[genotype]
        if count:
            table.add_row(genotype.report_label, str(count))
    console.print(table)
