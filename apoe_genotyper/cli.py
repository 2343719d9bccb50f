"""Typer CLI for the APOE genotyper.

Usage:
    # Genotype every VCF/VCF.gz under a directory, report next to the inputs
    apoe-genotyper genotype /data/vcfs

    # Separate output directory, only files matching a regex, 8 workers
    apoe-genotyper genotype /data/vcfs -o results -p "batch1_.*" -j 8

    # Dump the raw rs7412/rs429358 records for manual inspection
    apoe-genotyper inspect /data/vcfs -o results
"""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from apoe_genotyper import __version__
from apoe_genotyper.config import Config

app = typer.Typer(
    name="apoe-genotyper",
    help="Determine APOE genotypes (rs7412/rs429358, GRCh38) from single-sample VCF files",
    add_completion=False,
)

console = Console()

InputDir = Annotated[
    Path,
    typer.Argument(
        help="Directory containing the VCF/VCF.gz files",
        file_okay=False,
        dir_okay=True,
    ),
]
OutputDir = Annotated[
    Path | None,
    typer.Option(
        "--output-dir", "-o",
        help="Output directory (default: the input directory)",
        file_okay=False,
        dir_okay=True,
    ),
]
Pattern = Annotated[
    str | None,
    typer.Option(
        "--pattern", "-p",
        help="Regular expression to filter VCF file paths (default: all VCF files)",
    ),
]
Verbose = Annotated[
    bool,
    typer.Option(
        "--verbose", "-v",
        help="Enable verbose logging",
    ),
]


def _init_logging(config: Config) -> None:
    from apoe_genotyper.logging_config import setup_logging

    setup_logging(
        log_dir=config.log_dir,
        console_level=logging.INFO if config.verbose else logging.WARNING,
    )


def _check_config(config: Config) -> None:
    errors = config.validate()
    if errors:
        for error in errors:
            console.print(f"[red]ERROR:[/red] {error}")
        raise typer.Exit(code=1)


@app.command()
def genotype(
    input_dir: InputDir,
    output_dir: OutputDir = None,
    pattern: Pattern = None,
    report_file: Annotated[
        Path | None,
        typer.Option(
            "--report-file",
            help="Genotype report path (default: {output_dir}/APOE_genotype_report.tsv)",
            dir_okay=False,
        ),
    ] = None,
    workers: Annotated[
        int,
        typer.Option(
            "--workers", "-j",
            help="Number of parallel worker processes",
            min=1,
        ),
    ] = 1,
    no_recursive: Annotated[
        bool,
        typer.Option(
            "--no-recursive",
            help="Only look for VCF files directly inside INPUT_DIR",
        ),
    ] = False,
    verbose: Verbose = False,
    log_dir: Annotated[
        Path | None,
        typer.Option(
            "--log-dir",
            help="Directory for log files (default: output directory)",
            file_okay=False,
        ),
    ] = None,
) -> None:
    """Genotype APOE for every sample and append the results to the report.

    Samples already present in the report are skipped, so the command can be
    re-run on a growing directory.
    """
    from apoe_genotyper.main import run_genotyping

    console.print(f"\n[bold]APOE Genotyping Tool[/bold] v{__version__}\n", style="blue")

    config = Config(
        input_dir=input_dir,
        output_dir=output_dir,
        pattern=pattern,
        report_file=report_file,
        workers=workers,
        recursive=not no_recursive,
        verbose=verbose,
        log_dir=log_dir,
    )
    _check_config(config)

    assert config.output_dir is not None  # Set in Config.__post_init__
    config.output_dir.mkdir(parents=True, exist_ok=True)
    _init_logging(config)

    console.print(f"Input directory:  {config.input_dir}")
    console.print(f"Report file:      {config.report_file}")
    if config.pattern:
        console.print(f"File pattern:     {config.pattern}")
    if config.workers > 1:
        console.print(f"Workers:          {config.workers}")
    console.print("")

    try:
        run_genotyping(config)
    except Exception as e:
        console.print(f"[red]ERROR:[/red] {e}")
        if verbose:
            import traceback
            console.print(traceback.format_exc())
        raise typer.Exit(code=1)

    console.print(f"\n[green]Done![/green] Report: {config.report_file}\n")


@app.command()
def inspect(
    input_dir: InputDir,
    output_dir: OutputDir = None,
    pattern: Pattern = None,
    output_file: Annotated[
        Path | None,
        typer.Option(
            "--output-file",
            help="Output TSV path (default: {output_dir}/APOE_variants.tsv)",
            dir_okay=False,
        ),
    ] = None,
    verbose: Verbose = False,
) -> None:
    """Write the raw rs7412/rs429358 records of every sample for manual inspection."""
    from apoe_genotyper.main import run_inspect

    config = Config(
        input_dir=input_dir,
        output_dir=output_dir,
        pattern=pattern,
        variants_file=output_file,
        verbose=verbose,
    )
    _check_config(config)

    assert config.output_dir is not None  # Set in Config.__post_init__
    config.output_dir.mkdir(parents=True, exist_ok=True)
    _init_logging(config)

    try:
        output_path = run_inspect(config)
    except Exception as e:
        console.print(f"[red]ERROR:[/red] {e}")
        raise typer.Exit(code=1)

    console.print(f"[green]Done![/green] APOE variants written to {output_path}")


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
