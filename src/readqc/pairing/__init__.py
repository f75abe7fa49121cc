# src/readqc/pairing/__init__.py
from readqc.pairing.discover import discover_samples, find_read_files, read_sample_list
from readqc.pairing.schemes import classify, mate_path
from readqc.pairing.types import DiscoveryResult, NamingScheme, ReadName, SampleRecord

__all__ = [
    "DiscoveryResult",
    "NamingScheme",
    "ReadName",
    "SampleRecord",
    "classify",
    "discover_samples",
    "find_read_files",
    "mate_path",
    "read_sample_list",
]
