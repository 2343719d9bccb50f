"""I/O utilities for input discovery and atomic report writes.

Example:
    for vcf in discover_variant_files(Path("vcfs"), pattern="^.*/batch1_"):
        print(sample_id_from_path(vcf))
"""

import re
import tempfile
from pathlib import Path

VCF_SUFFIXES = (".vcf.gz", ".vcf")


def is_variant_file(filepath: Path) -> bool:
    """Check if a path names a .vcf or .vcf.gz file."""
    return filepath.name.endswith(VCF_SUFFIXES)


def sample_id_from_path(filepath: Path) -> str:
    """Derive the sample ID from a VCF file name.

    Example:
        >>> sample_id_from_path(Path("/data/S1.vcf.gz"))
        "S1"
    """
    name = filepath.name
    for suffix in VCF_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return filepath.stem


def discover_variant_files(
    directory: Path,
    pattern: str | None = None,
    recursive: bool = True,
) -> list[Path]:
    """Find VCF/VCF.gz files in a directory.

    Args:
        directory: Directory to search
        pattern: Optional regular expression; only paths where it matches
            (anywhere in the full path) are kept
        recursive: Search subdirectories too

    Returns:
        Sorted list of matching files

    Raises:
        FileNotFoundError: If the directory doesn't exist
        re.error: If the pattern is not a valid regular expression
    """
    if not directory.is_dir():
        raise FileNotFoundError(f"Input directory not found: {directory}")

    regex = re.compile(pattern) if pattern else None
    candidates = directory.rglob("*") if recursive else directory.iterdir()

    files = [
        path for path in candidates
        if path.is_file()
        and is_variant_file(path)
        and (regex is None or regex.search(str(path)))
    ]
    return sorted(files)


def atomic_write_text(filepath: Path, text: str) -> None:
    """Write text to a file by replacing it atomically.

    The text is written to a temporary file in the same directory and renamed
    over the target, so readers never see a partially written file.
    """
    filepath.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="w",
        dir=filepath.parent,
        prefix=f".{filepath.name}.",
        suffix=".tmp",
        delete=False,
        encoding="utf-8",
    ) as tmp:
        tmp.write(text)
        tmp_path = Path(tmp.name)

    # Atomic rename
    tmp_path.replace(filepath)
