"""
APOE Genotyping Tool.

Determines the APOE genotype (e.g. APOE-3/4) of each sample in a directory of
single-sample VCF files from the calls at rs7412 and rs429358, and collects
the results in a tab-separated report.
"""

__version__ = "1.0.0"
__author__ = "Data Tecnica International"
