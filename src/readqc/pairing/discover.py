# src/readqc/pairing/discover.py
from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set

from readqc.errors import ConfigError, NoInputError
from readqc.pairing.schemes import classify, has_read_extension, mate_path, split_extension
from readqc.pairing.types import DiscoveryResult, NamingScheme, SampleRecord
from readqc.utils.logger import get_logger

LOG = get_logger("pairing")

_PE_PATTERNS = "*_R1*.fastq, *_R1*.fq, *_1.fastq, *_1.fq (and .gz versions)"


def _is_under(path: Path, root: Path) -> bool:
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True


def find_read_files(root: Path, *, exclude: Optional[Path] = None) -> List[Path]:
    """All recognized read files below `root`, sorted by path. `exclude` prunes a subtree."""
    if not root.is_dir():
        raise ConfigError(f"Input directory does not exist: {root}")
    paths = [
        p for p in root.rglob("*")
        if p.is_file() and has_read_extension(p.name)
        and not (exclude is not None and _is_under(p, exclude))
    ]
    return sorted(paths)


def read_sample_list(path: Path) -> List[str]:
    """Ids in file order; blank and '#' lines skipped, repeated ids dropped."""
    try:
        lines = path.read_text(encoding="utf-8").splitlines()
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Sample file not found or unreadable: {path} ({e})") from e

    ids: List[str] = []
    seen: Set[str] = set()
    for ln in lines:
        sid = ln.strip()
        if not sid or sid.startswith("#"):
            continue
        if sid in seen:
            LOG.warning("Sample %s listed more than once in %s; using the first entry.", sid, path)
            continue
        seen.add(sid)
        ids.append(sid)
    return ids


# -------- paired-end ----------------------------------------------------------

def _pair(sample_id: str, mate1: Path, scheme: NamingScheme, result: DiscoveryResult) -> Optional[Path]:
    """Resolve and check the mate of `mate1`, recording a complete or incomplete sample."""
    mate2 = mate_path(mate1, scheme)
    if mate2 is not None and mate2.is_file():
        result.samples.append(SampleRecord(sample_id, mate1, mate2, scheme, True))
        return mate2

    LOG.warning(
        "R2 file not found for %s (expected pattern: %s). "
        "This usually means an incomplete pair. Skipping...",
        mate1, scheme.label,
    )
    result.incomplete.append(SampleRecord(sample_id, mate1, None, scheme, False))
    return None


def _scan_paired(files: Sequence[Path], result: DiscoveryResult, input_dir: Path) -> None:
    candidates: List[Path] = []
    mate2_files: List[Path] = []
    for f in files:
        rn = classify(f.name)
        if rn.scheme is NamingScheme.UNKNOWN:
            LOG.warning("Unrecognized naming (not _R1/_R2 or _1/_2): %s. Excluded.", f)
            result.unknown_files.append(f)
        elif rn.read == 1:
            candidates.append(f)
        else:
            mate2_files.append(f)

    if not candidates:
        raise NoInputError(
            f"No paired-end FASTQ files found in {input_dir}. Looking for files with patterns: {_PE_PATTERNS}"
        )

    seen: Dict[str, Path] = {}
    claimed: Set[Path] = set()
    for f in candidates:
        rn = classify(f.name)
        if rn.sample_id in seen:
            LOG.warning("Duplicate sample id %s from %s (already taken by %s). Excluded.",
                        rn.sample_id, f, seen[rn.sample_id])
            result.duplicates.append(f)
            continue
        seen[rn.sample_id] = f
        mate2 = _pair(rn.sample_id, f, rn.scheme, result)
        if mate2 is not None:
            claimed.add(mate2)

    for f in mate2_files:
        if f not in claimed:
            LOG.warning("No matching R1 file for %s. Excluded.", f)
            result.orphan_mates.append(f)


def _pick_mate1(sample_id: str, files: Sequence[Path], paired_end: bool) -> Optional[Path]:
    """
    First sorted file whose basename starts with `sample_id` (and is mate1-shaped
    in paired-end mode). A file whose derived id equals `sample_id` exactly is
    preferred, so 's1' does not pick up 's10_R1.fq'.
    """
    prefixed = [f for f in files if f.name.startswith(sample_id)]
    if paired_end:
        prefixed = [f for f in prefixed if classify(f.name).read == 1]
        exact = [f for f in prefixed if classify(f.name).sample_id == sample_id]
    else:
        exact = [f for f in prefixed if split_extension(f.name)[0] == sample_id]
    if exact:
        return exact[0]
    return prefixed[0] if prefixed else None


# -------- entry point ---------------------------------------------------------

def discover_samples(
    input_dir: Path,
    *,
    paired_end: bool = True,
    sample_ids: Optional[Sequence[str]] = None,
    exclude: Optional[Path] = None,
) -> DiscoveryResult:
    """
    Resolve `input_dir` (or an explicit id list) into sample records.

    Directory scan raises NoInputError when there is nothing to work with at
    all: no recognized files, or (paired-end) no mate1-shaped file. Sample-list
    mode only warns, even when nothing is found. Incomplete pairs are never
    fatal; they are reported and excluded.
    """
    files = find_read_files(input_dir, exclude=exclude)
    mode = "directory" if sample_ids is None else "sample-list"
    result = DiscoveryResult(mode=mode, paired_end=paired_end, n_files=len(files))
    LOG.debug("Found %d read files under %s", len(files), input_dir)

    if sample_ids is None:
        if not files:
            raise NoInputError(f"No FASTQ files found in {input_dir}")
        if paired_end:
            _scan_paired(files, result, input_dir)
        else:
            seen: Dict[str, Path] = {}
            for f in files:
                sid = split_extension(f.name)[0]
                if sid in seen:
                    LOG.warning("Duplicate sample id %s from %s (already taken by %s). Excluded.", sid, f, seen[sid])
                    result.duplicates.append(f)
                    continue
                seen[sid] = f
                result.samples.append(SampleRecord(sid, f, None, classify(f.name).scheme, True))
    else:
        for sid in sample_ids:
            mate1 = _pick_mate1(sid, files, paired_end)
            if mate1 is None:
                LOG.warning("%s file not found for sample: %s", "R1" if paired_end else "Input", sid)
                result.missing_ids.append(sid)
                continue
            if paired_end:
                _pair(sid, mate1, classify(mate1.name).scheme, result)
            else:
                result.samples.append(SampleRecord(sid, mate1, None, classify(mate1.name).scheme, True))

    if paired_end and not result.samples:
        LOG.warning("No complete paired-end samples found (all R1 files lacked a matching R2, or none were listed).")
        LOG.warning("If you moved files manually, restore pairs or use --resume instead of moving input FASTQs.")

    LOG.info(
        "Discovery (%s): %d complete, %d incomplete, %d missing",
        mode, result.n_complete, result.n_incomplete, len(result.missing_ids),
    )
    return result
