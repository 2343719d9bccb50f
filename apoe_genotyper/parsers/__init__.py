"""Variant file readers."""

from apoe_genotyper.parsers.vcf import (
    iter_site_records,
    normalize_chromosome,
    read_chr19_records,
    split_genotype,
)

__all__ = [
    "read_chr19_records",
    "iter_site_records",
    "normalize_chromosome",
    "split_genotype",
]
