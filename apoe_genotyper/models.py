"""Data models for APOE genotyping.

Defines the two GRCh38 APOE sites, the per-sample variant call and zygosity
states, the APOE genotype labels, and the run statistics.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum, auto


@dataclass(frozen=True, slots=True)
class GenomicSite:
    """A fixed biallelic SNP position.

    Attributes:
        name: rsID of the site
        chrom: Chromosome without "chr" prefix
        pos: 1-based GRCh38 position
        ref: Reference allele
        alt: Alternate allele
    """

    name: str
    chrom: str
    pos: int
    ref: str
    alt: str

    @property
    def key(self) -> str:
        """CHR-POS-REF-ALT identifier, e.g. 19-44908822-C-T."""
        return f"{self.chrom}-{self.pos}-{self.ref}-{self.alt}"


SITE_RS7412 = GenomicSite(name="rs7412", chrom="19", pos=44908822, ref="C", alt="T")
SITE_RS429358 = GenomicSite(name="rs429358", chrom="19", pos=44908684, ref="T", alt="C")

APOE_SITES: tuple[GenomicSite, GenomicSite] = (SITE_RS7412, SITE_RS429358)


class AlleleTag(Enum):
    """Allele observed in one copy of a genotype call."""

    REF = auto()
    ALT = auto()
    MISSING = auto()


class Zygosity(Enum):
    """Zygosity of a sample at a single site."""

    HOM_REF = auto()
    HET = auto()
    HOM_ALT = auto()
    UNRECOGNIZED = auto()


class ApoeGenotype(Enum):
    """APOE allele pair reported for a sample."""

    E2_E3 = "2/3"
    E2_E4 = "2/4"
    E1_E1 = "1/1"
    E1_E2 = "1/2"
    E1_E3 = "1/3"
    E1_E4 = "1/4"
    E3_E3 = "3/3"
    E3_E4 = "3/4"
    E4_E4 = "4/4"
    UNKNOWN = "unknown"

    @property
    def report_label(self) -> str:
        """Label written to the report, e.g. APOE-3/4 or APOE_unknown."""
        if self is ApoeGenotype.UNKNOWN:
            return "APOE_unknown"
        return f"APOE-{self.value}"

    @classmethod
    def from_report_label(cls, label: str) -> "ApoeGenotype":
        """Parse a report label back into a genotype.

        Raises:
            ValueError: If the label is not a known report label
        """
        label = label.strip()
        if label == "APOE_unknown":
            return cls.UNKNOWN
        if label.startswith("APOE-"):
            value = label[len("APOE-"):]
            if value != cls.UNKNOWN.value:
                return cls(value)
        raise ValueError(f"Unrecognized APOE genotype label: {label!r}")


@dataclass(slots=True)
class VariantRecord:
    """Single-ALT variant record for one sample, as produced by the VCF reader.

    Attributes:
        chrom: Chromosome without "chr" prefix
        pos: 1-based position
        ref: Reference allele
        alt: The single alternate allele of this record
        gt: Allele indices of the sample's GT field (None for a missing allele)
    """

    chrom: str
    pos: int
    ref: str
    alt: str
    gt: tuple[int | None, ...]


@dataclass(frozen=True, slots=True)
class VariantCall:
    """Observed alleles of one sample at one APOE site.

    Attributes:
        site: The APOE site
        alleles: Allele tags in GT order
        observed: False when no record matched the site (no-call)
    """

    site: GenomicSite
    alleles: tuple[AlleleTag, ...]
    observed: bool = True

    @property
    def genotype_string(self) -> str:
        """VCF-style rendering of the call, e.g. 0/1 or ./."""
        codes = {AlleleTag.REF: "0", AlleleTag.ALT: "1", AlleleTag.MISSING: "."}
        return "/".join(codes[a] for a in self.alleles)


@dataclass
class SampleResult:
    """Outcome of genotyping one input file.

    Attributes:
        sample_id: Sample identifier (file name without .vcf/.vcf.gz)
        source: Path of the input file, as a string
        genotype: Resolved APOE genotype
        calls: rs name -> VCF-style call string, e.g. {"rs7412": "0/1"}
        zygosities: rs name -> zygosity name
        error: Error message if the sample could not be genotyped
    """

    sample_id: str
    source: str
    genotype: ApoeGenotype
    calls: dict[str, str] = field(default_factory=dict)
    zygosities: dict[str, str] = field(default_factory=dict)
    error: str | None = None


@dataclass
class Statistics:
    """Running statistics for a genotyping run."""

    files_found: int = 0
    processed: int = 0
    skipped_existing: int = 0
    skipped_empty: int = 0
    skipped_duplicate: int = 0
    errors: int = 0
    genotype_counts: Counter = field(default_factory=Counter)

    def record(self, result: SampleResult) -> None:
        """Count a processed sample."""
        self.processed += 1
        self.genotype_counts[result.genotype] += 1
        if result.error is not None:
            self.errors += 1

    @property
    def unknown(self) -> int:
        """Samples resolved to APOE_unknown in this run."""
        return self.genotype_counts[ApoeGenotype.UNKNOWN]
