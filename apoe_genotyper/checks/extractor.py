"""Extraction of the rs7412 and rs429358 calls from a sample's records.

A record matches a site only on exact position, reference and alternate
allele. Records are expected to be restricted to chromosome 19 and split to a
single ALT per record by the VCF reader.

No-call rule: when no record matches a site the sample is homozygous
reference there. Single-sample VCFs from the variant caller only list
positions where an alternate allele was observed, and multi-allelic sites are
already split, so an absent record cannot hide an alternate call at the site.
"""

import logging
from collections.abc import Iterable

from apoe_genotyper.exceptions import ExtractionError
from apoe_genotyper.models import (
    APOE_SITES,
    AlleleTag,
    GenomicSite,
    VariantCall,
    VariantRecord,
)

logger = logging.getLogger(__name__)

ALLELE_TAG_BY_INDEX: dict[int | None, AlleleTag] = {
    0: AlleleTag.REF,
    1: AlleleTag.ALT,
    None: AlleleTag.MISSING,
}


def gt_to_alleles(gt: tuple[int | None, ...]) -> tuple[AlleleTag, ...]:
    """Translate GT allele indices into allele tags, keeping their order.

    Indices other than 0 and 1 cannot occur on a split record and are
    treated as missing.

    Example:
        >>> gt_to_alleles((0, 1))
        (<AlleleTag.REF: 1>, <AlleleTag.ALT: 2>)
    """
    return tuple(ALLELE_TAG_BY_INDEX.get(index, AlleleTag.MISSING) for index in gt)


def no_call(site: GenomicSite) -> VariantCall:
    """Homozygous-reference call for a site with no matching record."""
    return VariantCall(site=site, alleles=(AlleleTag.REF, AlleleTag.REF), observed=False)


def extract_site_call(records: Iterable[VariantRecord], site: GenomicSite) -> VariantCall:
    """Find the call of one site in a sample's chromosome 19 records.

    Args:
        records: Single-ALT chromosome 19 records of one sample
        site: APOE site to look up

    Returns:
        VariantCall with the observed alleles, or the homozygous-reference
        no-call if no record matches

    Raises:
        ExtractionError: If more than one record matches the site
    """
    matches: list[VariantRecord] = []
    mismatched = 0

    for record in records:
        if record.pos != site.pos:
            continue
        if record.ref == site.ref and record.alt == site.alt:
            matches.append(record)
        else:
            mismatched += 1

    if len(matches) > 1:
        raise ExtractionError(
            f"{len(matches)} records match {site.name} ({site.key}); expected at most 1"
        )

    if matches:
        return VariantCall(site=site, alleles=gt_to_alleles(matches[0].gt))

    if mismatched:
        # Position present with other alleles; still treated as homozygous reference
        logger.warning(
            f"{mismatched} record(s) at {site.name} position {site.chrom}:{site.pos} "
            f"do not match {site.ref}>{site.alt}; assuming homozygous reference"
        )
    return no_call(site)


def extract_calls(
    records: Iterable[VariantRecord],
    sites: Iterable[GenomicSite] = APOE_SITES,
) -> dict[GenomicSite, VariantCall]:
    """Extract the call of every site from a sample's records.

    Raises:
        ExtractionError: If any site has more than one matching record
    """
    records = list(records)
    return {site: extract_site_call(records, site) for site in sites}
