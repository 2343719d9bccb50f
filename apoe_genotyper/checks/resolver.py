"""Resolution of rs429358/rs7412 zygosities to an APOE genotype.

The rules are evaluated top-down and the first match wins, so the list is
order-sensitive:

 #  rs429358  rs7412   genotype
 1  HOM_REF   HOM_REF  3/3
 2  HOM_ALT   HOM_REF  4/4
 3  HET       HOM_REF  3/4
 4  HOM_REF   HOM_ALT  1/1
 5  HOM_REF   HET      2/3
 6  HET       HET      1/3
 7  HET       HOM_ALT  1/4
 8  HOM_ALT   HET      1/2
 9  HET       HET      2/4   (never reached, rule 6 matches first)
10  HOM_ALT   HOM_ALT  1/1

Any other combination, including an UNRECOGNIZED zygosity at either site,
resolves to UNKNOWN.
"""

from apoe_genotyper.models import ApoeGenotype, Zygosity

# (rs429358, rs7412, genotype) in priority order
GENOTYPE_RULES: list[tuple[Zygosity, Zygosity, ApoeGenotype]] = [
    (Zygosity.HOM_REF, Zygosity.HOM_REF, ApoeGenotype.E3_E3),
    (Zygosity.HOM_ALT, Zygosity.HOM_REF, ApoeGenotype.E4_E4),
    (Zygosity.HET, Zygosity.HOM_REF, ApoeGenotype.E3_E4),
    (Zygosity.HOM_REF, Zygosity.HOM_ALT, ApoeGenotype.E1_E1),
    (Zygosity.HOM_REF, Zygosity.HET, ApoeGenotype.E2_E3),
    (Zygosity.HET, Zygosity.HET, ApoeGenotype.E1_E3),
    (Zygosity.HET, Zygosity.HOM_ALT, ApoeGenotype.E1_E4),
    (Zygosity.HOM_ALT, Zygosity.HET, ApoeGenotype.E1_E2),
    # TODO: confirm whether this rule was meant to test another pair; as
    # written it duplicates rule 6 and can never match
    (Zygosity.HET, Zygosity.HET, ApoeGenotype.E2_E4),
    (Zygosity.HOM_ALT, Zygosity.HOM_ALT, ApoeGenotype.E1_E1),
]


def resolve_genotype(rs7412: Zygosity, rs429358: Zygosity) -> ApoeGenotype:
    """Resolve the APOE genotype from the zygosity at both sites.

    Args:
        rs7412: Zygosity at rs7412
        rs429358: Zygosity at rs429358

    Returns:
        Genotype of the first matching rule, or UNKNOWN if none matches

    Example:
        >>> resolve_genotype(Zygosity.HOM_REF, Zygosity.HET)
        <ApoeGenotype.E3_E4: '3/4'>
    """
    for rule_rs429358, rule_rs7412, genotype in GENOTYPE_RULES:
        if rs429358 is rule_rs429358 and rs7412 is rule_rs7412:
            return genotype
    return ApoeGenotype.UNKNOWN
