"""
Custom exceptions for APOE genotyping.
Kept minimal - only what's needed for clear error handling.
"""


class ApoeGenotyperError(Exception):
    """Base exception for APOE genotyping errors."""
    pass


class ExtractionError(ApoeGenotyperError):
    """Raised when more than one record matches an APOE site in one sample."""
    pass


class VariantFileError(ApoeGenotyperError):
    """Raised when a variant file cannot be read or holds an unexpected number of samples."""
    pass


class ReportParseError(ApoeGenotyperError):
    """Raised when an existing genotype report has a malformed header."""
    pass


class DuplicateSampleError(ApoeGenotyperError):
    """Raised when appending a sample ID that is already in the report."""
    pass


class NoInputFilesError(ApoeGenotyperError):
    """Raised when no VCF/VCF.gz files are found in the input directory."""
    pass
