"""APOE site variant dump for manual inspection.

Collects the raw records at rs7412 and rs429358 for every sample into one
TSV, one row per record. Samples without any record at either site get a
single row with empty record columns so they remain visible.
"""

from pathlib import Path

import pandas as pd

VARIANT_COLUMNS = ["SampleID", "site", "chrom", "pos", "id", "ref", "alt", "gt"]


def build_variants_table(rows_by_sample: dict[str, list[dict]]) -> pd.DataFrame:
    """Build the inspection table from the site records of each sample.

    Args:
        rows_by_sample: Sample ID -> records yielded by iter_site_records()

    Returns:
        DataFrame with VARIANT_COLUMNS, samples in the given order
    """
    rows = []
    for sample_id, records in rows_by_sample.items():
        if not records:
            rows.append({"SampleID": sample_id})
            continue
        for record in records:
            rows.append({"SampleID": sample_id, **record})

    df = pd.DataFrame(rows, columns=VARIANT_COLUMNS)
    df["pos"] = df["pos"].astype("Int64")
    return df


def write_variants_table(df: pd.DataFrame, output_path: Path) -> Path:
    """Write the inspection table as TSV.

    Returns:
        Path to the written file
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(output_path, sep="\t", index=False, na_rep="")
    return output_path
