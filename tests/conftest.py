"""Pytest fixtures for apoe_genotyper tests."""

from collections.abc import Callable
from pathlib import Path

import pytest

from apoe_genotyper.models import VariantRecord

VCF_HEADER = (
    "##fileformat=VCFv4.2\n"
    "##contig=<ID={chr19},length=58617616>\n"
    "##contig=<ID={chr1},length=248956422>\n"
    '##FORMAT=<ID=GT,Number=1,Type=String,Description="Genotype">\n'
    "#CHROM\tPOS\tID\tREF\tALT\tQUAL\tFILTER\tINFO\tFORMAT\t{samples}\n"
)


def vcf_text(
    rows: list[tuple],
    samples: tuple[str, ...] = ("SAMPLE",),
    chr_prefix: bool = False,
) -> str:
    """Render a minimal VCF.

    Args:
        rows: (chrom, pos, ref, alt, gt) tuples; one gt string per sample,
            multiple samples joined with a tab
        samples: Sample column names
        chr_prefix: Name contigs chr19/chr1 in the header
    """
    prefix = "chr" if chr_prefix else ""
    text = VCF_HEADER.format(
        chr19=f"{prefix}19", chr1=f"{prefix}1", samples="\t".join(samples)
    )
    for chrom, pos, ref, alt, gt in rows:
        text += f"{chrom}\t{pos}\t.\t{ref}\t{alt}\t50\tPASS\t.\tGT\t{gt}\n"
    return text


@pytest.fixture
def write_vcf(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing a VCF into tmp_path/vcfs and returning its path."""

    def _write(name: str, rows: list[tuple], **kwargs) -> Path:
        vcf_dir = tmp_path / "vcfs"
        vcf_dir.mkdir(exist_ok=True)
        path = vcf_dir / name
        path.write_text(vcf_text(rows, **kwargs))
        return path

    return _write


@pytest.fixture
def vcf_dir(tmp_path: Path) -> Path:
    """Input directory used by write_vcf."""
    path = tmp_path / "vcfs"
    path.mkdir(exist_ok=True)
    return path


@pytest.fixture
def record() -> Callable[..., VariantRecord]:
    """Factory for chromosome 19 VariantRecords."""

    def _record(pos: int, ref: str, alt: str, gt: tuple = (0, 1)) -> VariantRecord:
        return VariantRecord(chrom="19", pos=pos, ref=ref, alt=alt, gt=gt)

    return _record

