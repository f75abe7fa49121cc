# src/readqc/pairing/types.py
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple


class NamingScheme(Enum):
    SCHEME_A = "_R1/_R2"
    SCHEME_B = "_1/_2"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class ReadName:
    """What a basename says about itself: scheme, which mate, and the sample id."""
    scheme: NamingScheme
    read: Optional[int]       # 1 or 2; None when scheme is UNKNOWN
    sample_id: str            # text before the marker ("" when UNKNOWN)
    extension: str            # ".fastq.gz", ".fq", ...


@dataclass(frozen=True)
class SampleRecord:
    id: str
    mate1: Path
    mate2: Optional[Path]     # set iff paired-end and the mate was found
    scheme: NamingScheme
    complete: bool

    @property
    def pattern(self) -> str:
        return self.scheme.label

    @property
    def inputs(self) -> Tuple[Path, ...]:
        if self.mate2 is None:
            return (self.mate1,)
        return (self.mate1, self.mate2)


@dataclass
class DiscoveryResult:
    mode: str                 # "directory" or "sample-list"
    paired_end: bool
    samples: List[SampleRecord] = field(default_factory=list)      # complete, in processing order
    incomplete: List[SampleRecord] = field(default_factory=list)
    missing_ids: List[str] = field(default_factory=list)           # sample-list ids with no file
    unknown_files: List[Path] = field(default_factory=list)
    orphan_mates: List[Path] = field(default_factory=list)         # mate2 files nobody claimed
    duplicates: List[Path] = field(default_factory=list)
    n_files: int = 0

    @property
    def n_complete(self) -> int:
        return len(self.samples)

    @property
    def n_incomplete(self) -> int:
        return len(self.incomplete)

    def counts(self) -> Dict[str, int]:
        return {
            "files": self.n_files,
            "complete": self.n_complete,
            "incomplete": self.n_incomplete,
            "missing": len(self.missing_ids),
            "unknown": len(self.unknown_files),
            "duplicates": len(self.duplicates),
        }
