# src/readqc/pairing/schemes.py
from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Pattern, Tuple

from readqc.pairing.types import NamingScheme, ReadName

READ_EXTENSIONS: Tuple[str, ...] = (".fastq.gz", ".fq.gz", ".fastq", ".fq")


@dataclass(frozen=True)
class _Rule:
    scheme: NamingScheme
    prefix: str                                # "_R" or "_"
    marker: Pattern[str]                       # group 1 is the read number
    substitutions: Tuple[Tuple[str, str], ...]  # applied in order, every occurrence

    def mate1_name(self, sample_id: str, extension: str) -> str:
        return f"{sample_id}{self.prefix}1{extension}"


# Precedence is the tuple order: a name that fits both is SCHEME_A.
# Markers are looked up on the stem (extension removed) and must be followed
# by "." / "_" or end the stem, so "_R10" is not "_R1".
_RULES: Tuple[_Rule, ...] = (
    _Rule(
        NamingScheme.SCHEME_A,
        "_R",
        re.compile(r"_R([12])(?=[._]|$)"),
        (("_R1", "_R2"),),
    ),
    _Rule(
        NamingScheme.SCHEME_B,
        "_",
        re.compile(r"_([12])(?=[._]|$)"),
        (("_1.", "_2."), ("_1_", "_2_")),
    ),
)


def split_extension(name: str) -> Tuple[str, str]:
    """'s1_R1.fastq.gz' -> ('s1_R1', '.fastq.gz'); ext is '' when unrecognized."""
    for ext in READ_EXTENSIONS:
        if name.endswith(ext) and len(name) > len(ext):
            return name[: -len(ext)], ext
    return name, ""


def has_read_extension(name: str) -> bool:
    return bool(split_extension(name)[1])


def _rule_for(scheme: NamingScheme) -> Optional[_Rule]:
    for rule in _RULES:
        if rule.scheme is scheme:
            return rule
    return None


def classify(name: str) -> ReadName:
    """
    Detect the naming scheme of a read file basename.

    The first rule whose marker occurs in the stem wins. Within that rule the
    rightmost marker decides the mate number and the sample id is the stem up
    to that marker, verbatim.
    """
    stem, ext = split_extension(name)
    for rule in _RULES:
        matches = list(rule.marker.finditer(stem))
        if not matches:
            continue
        last = matches[-1]
        sample_id = stem[: last.start()]
        if not sample_id:
            continue
        return ReadName(rule.scheme, int(last.group(1)), sample_id, ext)
    return ReadName(NamingScheme.UNKNOWN, None, "", ext)


def mate_name(name: str, scheme: NamingScheme) -> Optional[str]:
    rule = _rule_for(scheme)
    if rule is None:
        return None
    out = name
    for old, new in rule.substitutions:
        out = out.replace(old, new)
    return out


def mate_path(mate1: Path, scheme: NamingScheme) -> Optional[Path]:
    """Expected mate2 path: substitution on the basename only, same directory."""
    name = mate_name(mate1.name, scheme)
    if name is None or name == mate1.name:
        return None
    return mate1.with_name(name)


def mate1_name(sample_id: str, scheme: NamingScheme, extension: str) -> str:
    """Inverse of classify() for mate1 files: ('s1', SCHEME_B, '.fq') -> 's1_1.fq'."""
    rule = _rule_for(scheme)
    if rule is None:
        raise ValueError(f"no mate1 naming for scheme {scheme}")
    return rule.mate1_name(sample_id, extension)
