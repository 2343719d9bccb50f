"""Single-sample VCF reader built on pysam.

Reads .vcf and .vcf.gz files and returns the sample's chromosome 19 records
with the "chr" prefix stripped. Multi-allelic records are split into one
record per alternate allele, remapping GT indices the way
`bcftools norm -m -` does:

    ALT being emitted -> 1
    REF               -> 0
    any other ALT     -> 0
    missing           -> missing

Example:
    19  44908822  .  C  T,G  ...  GT  1/2

becomes two records, C>T with GT 1/0 and C>G with GT 0/1.
"""

from collections.abc import Iterable, Iterator
from pathlib import Path

import pysam

from apoe_genotyper.exceptions import VariantFileError
from apoe_genotyper.models import APOE_SITES, GenomicSite, VariantRecord

TARGET_CHROMOSOMES = {"19", "chr19"}


def normalize_chromosome(chrom: str) -> str:
    """Strip a leading "chr" from a chromosome name.

    Example:
        >>> normalize_chromosome("chr19")
        "19"
    """
    if chrom.lower().startswith("chr"):
        return chrom[3:]
    return chrom


def split_genotype(gt: tuple[int | None, ...], alt_index: int) -> tuple[int | None, ...]:
    """Remap GT indices for the record of a single ALT (1-based alt_index).

    Example:
        >>> split_genotype((1, 2), alt_index=2)
        (0, 1)
    """
    return tuple(
        None if allele is None else (1 if allele == alt_index else 0)
        for allele in gt
    )


def _single_sample(vcf: pysam.VariantFile, filepath: Path) -> str:
    samples = list(vcf.header.samples)
    if len(samples) != 1:
        raise VariantFileError(
            f"Expected 1 sample in {filepath.name}, found {len(samples)}"
        )
    return samples[0]


def _sample_gt(record: pysam.VariantRecord, sample: str) -> tuple[int | None, ...]:
    gt = record.samples[sample].get("GT")
    if gt is None:
        return (None,)
    return tuple(gt)


def read_chr19_records(filepath: Path) -> list[VariantRecord]:
    """Read the chromosome 19 records of a single-sample VCF.

    Args:
        filepath: Path to .vcf or .vcf.gz file

    Returns:
        Single-ALT VariantRecords for chromosome 19, in file order

    Raises:
        FileNotFoundError: If the file doesn't exist
        VariantFileError: If the file cannot be parsed or does not hold
            exactly one sample
    """
    if not filepath.exists():
        raise FileNotFoundError(f"VCF file not found: {filepath}")

    records: list[VariantRecord] = []
    try:
        with pysam.VariantFile(str(filepath)) as vcf:
            sample = _single_sample(vcf, filepath)

            for rec in vcf:
                if rec.chrom not in TARGET_CHROMOSOMES:
                    continue

                chrom = normalize_chromosome(rec.chrom)
                gt = _sample_gt(rec, sample)
                alts = rec.alts or (".",)

                if len(alts) == 1:
                    records.append(
                        VariantRecord(chrom=chrom, pos=rec.pos, ref=rec.ref, alt=alts[0], gt=gt)
                    )
                    continue

                for alt_index, alt in enumerate(alts, 1):
                    records.append(
                        VariantRecord(
                            chrom=chrom,
                            pos=rec.pos,
                            ref=rec.ref,
                            alt=alt,
                            gt=split_genotype(gt, alt_index),
                        )
                    )
    except (OSError, ValueError) as e:
        raise VariantFileError(f"Failed to read VCF {filepath}: {e}") from e

    return records


def iter_site_records(
    filepath: Path,
    sites: Iterable[GenomicSite] = APOE_SITES,
) -> Iterator[dict]:
    """Yield the raw (unsplit) records at the given site positions.

    Used for manual inspection of the APOE region. Records are matched on
    chromosome 19 and position only, so records with unexpected alleles are
    reported too.

    Yields:
        Dict with site, chrom, pos, id, ref, alt and gt (VCF-style string)

    Raises:
        VariantFileError: If the file cannot be parsed or does not hold
            exactly one sample
    """
    site_by_pos = {site.pos: site for site in sites}

    try:
        with pysam.VariantFile(str(filepath)) as vcf:
            sample = _single_sample(vcf, filepath)

            for rec in vcf:
                if rec.chrom not in TARGET_CHROMOSOMES or rec.pos not in site_by_pos:
                    continue
                gt = _sample_gt(rec, sample)
                yield {
                    "site": site_by_pos[rec.pos].name,
                    "chrom": normalize_chromosome(rec.chrom),
                    "pos": rec.pos,
                    "id": rec.id or ".",
                    "ref": rec.ref,
                    "alt": ",".join(rec.alts or (".",)),
                    "gt": "/".join("." if a is None else str(a) for a in gt),
                }
    except (OSError, ValueError) as e:
        raise VariantFileError(f"Failed to read VCF {filepath}: {e}") from e
