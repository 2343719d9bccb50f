"""Output writers for the genotype report, the APOE variant dump and the run summary."""

from apoe_genotyper.writers.log import print_summary
from apoe_genotyper.writers.report import GenotypeReport
from apoe_genotyper.writers.variants import build_variants_table, write_variants_table

__all__ = [
    "GenotypeReport",
    "build_variants_table",
    "write_variants_table",
    "print_summary",
]
