"""Genotype inference: site extraction, zygosity classification and APOE resolution."""

from apoe_genotyper.checks.extractor import extract_calls, extract_site_call
from apoe_genotyper.checks.resolver import GENOTYPE_RULES, resolve_genotype
from apoe_genotyper.checks.zygosity import classify_call, classify_zygosity

__all__ = [
    "extract_calls",
    "extract_site_call",
    "classify_call",
    "classify_zygosity",
    "resolve_genotype",
    "GENOTYPE_RULES",
]
