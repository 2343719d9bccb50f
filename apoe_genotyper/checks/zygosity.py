"""Zygosity classification of a genotype call at one site.

Calls are unphased, so REF/ALT and ALT/REF are both heterozygous. Anything
other than a diploid pair of REF/ALT tags (missing alleles, haploid or
polyploid calls) cannot be classified.
"""

from apoe_genotyper.models import AlleleTag, VariantCall, Zygosity

ZYGOSITY_BY_ALLELES: dict[tuple[AlleleTag, AlleleTag], Zygosity] = {
    (AlleleTag.REF, AlleleTag.REF): Zygosity.HOM_REF,
    (AlleleTag.ALT, AlleleTag.ALT): Zygosity.HOM_ALT,
    (AlleleTag.REF, AlleleTag.ALT): Zygosity.HET,
    (AlleleTag.ALT, AlleleTag.REF): Zygosity.HET,
}


def classify_zygosity(alleles: object) -> Zygosity:
    """Classify an observed allele pair.

    Args:
        alleles: Tuple of AlleleTag values in GT order

    Returns:
        HOM_REF, HET or HOM_ALT for a diploid REF/ALT pair,
        UNRECOGNIZED for anything else

    Example:
        >>> classify_zygosity((AlleleTag.ALT, AlleleTag.REF))
        <Zygosity.HET: 2>
    """
    if not isinstance(alleles, tuple):
        return Zygosity.UNRECOGNIZED
    return ZYGOSITY_BY_ALLELES.get(alleles, Zygosity.UNRECOGNIZED)


def classify_call(call: VariantCall) -> Zygosity:
    """Classify the alleles of a VariantCall."""
    return classify_zygosity(call.alleles)
