# src/run_megahit/assembly/pairing.py

"""
Sort a batch of read files into paired-end samples and leftover single reads.

Sample name and mate direction come from the file name alone. The pattern is
built per batch from whatever extensions are present, so odd suffixes like
``.fq.gz`` or ``.fna`` work without being listed anywhere. Any sample that ends
up with only one mate is broken up again and its file goes back to the singles.
"""

from __future__ import annotations
import logging
import re
from enum import Enum
from os import PathLike
from pathlib import Path
from typing import Sequence, Union

L = logging.getLogger(__name__)


class Direction(str, Enum):
    """Which mate of a paired-end fragment a read file holds."""
    FORWARD = "forward"
    REVERSE = "reverse"


ReadPair = dict[Direction, str]          # {Direction.FORWARD: path, Direction.REVERSE: path}
PairLookup = dict[str, ReadPair]         # sample name -> ReadPair
SingleReads = list[str]

# extension plus an optional trailing ".gz" (foo.fasta.gz -> fasta.gz)
_EXT_RX = re.compile(r"\.([^.]+(?:\.gz)?)$")


def _basename(path: Union[str, PathLike]) -> str:
    return Path(path).name


def get_extension(path: Union[str, PathLike]) -> str | None:
    """Return the extension of the base name (no leading dot), or None."""
    if m := _EXT_RX.search(_basename(path)):
        return m[1]
    return None


def build_pattern(paths: Sequence[Union[str, PathLike]]) -> re.Pattern[str] | None:
    """
    Build the sample/mate regex for this batch of files.

    Groups: 1 = sample name, 2 = mate digit ("1", "2" or None).
    Returns None when no file in the batch has an extension.
    """
    exts: list[str] = []
    for p in paths:
        ext = get_extension(p)
        if ext is not None and ext not in exts:
            exts.append(ext)

    if not exts:
        return None

    alternation = "|".join(re.escape(e) for e in exts)
    return re.compile(rf"(.+)[_-][Rr]?([12])?\.(?:{alternation})$")


def classify(paths: Sequence[Union[str, PathLike]]) -> tuple[PairLookup, SingleReads]:
    """
    Split ``paths`` into complete pairs and single reads.

    A mate digit of "1" means forward; anything else that matched (a "2", or no
    digit at all) counts as reverse. A repeated sample/direction slot keeps the
    last file seen. Incomplete samples are dropped from the lookup and their
    files appended to the singles, after the files that never matched.
    """
    pattern = build_pattern(paths)
    pairs: PairLookup = {}
    singles: SingleReads = []

    for p in paths:
        path_str = str(p)
        m = pattern.match(_basename(p)) if pattern is not None else None
        if m is None:
            singles.append(path_str)
            continue

        sample, mate = m[1], m[2]
        direction = Direction.FORWARD if mate == "1" else Direction.REVERSE

        pair = pairs.setdefault(sample, {})
        if direction in pair:
            L.warning("Duplicate %s read for sample %s: %s replaces %s",
                      direction.value, sample, path_str, pair[direction])
        pair[direction] = path_str

    both = {Direction.FORWARD, Direction.REVERSE}
    incomplete = [s for s, pair in pairs.items() if not both <= pair.keys()]
    for sample in incomplete:
        orphans = list(pairs.pop(sample).values())
        L.info("Sample %s has no mate, treating as single: %s", sample, ", ".join(orphans))
        singles.extend(orphans)

    return pairs, singles
