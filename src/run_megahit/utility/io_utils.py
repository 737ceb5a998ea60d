from __future__ import annotations
import logging
import os
from importlib import import_module
from pathlib import Path
from typing import Sequence

L = logging.getLogger(__name__)

__all__ = ["find_files"]


def _expand(path: str) -> list[str]:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"No such file or directory: {path}")
    if p.is_file():
        return [path]
    # one level only, sub-directories are not searched
    return [str(entry) for entry in sorted(p.iterdir()) if entry.is_file()]


def find_files(paths: Sequence[str | Path]) -> list[str]:
    """
    Resolve query paths into a flat list of read files.

    Files are kept as given; directories contribute their regular files
    (non-recursive, sorted by name). A file reached twice, e.g. named on its
    own and through its directory, is kept once at its first position.
    """
    if not paths:
        raise ValueError("No input files")

    # late-bind so tests can swap stage_bar
    prog = import_module("run_megahit.utility.progress")
    files: list[str] = []
    seen: set[str] = set()
    with prog.stage_bar(len(paths), desc="inputs", unit="path") as bar:
        for path in paths:
            found = _expand(str(path))
            L.debug("%s -> %d file(s)", path, len(found))
            for f in found:
                # symlinks keep their own name, it may carry the mate marker
                key = os.path.abspath(f)
                if key in seen:
                    L.debug("Skipping repeated input %s", f)
                    continue
                seen.add(key)
                files.append(f)
            bar.update(1)

    if not files:
        raise ValueError(f"No input files found in {', '.join(str(p) for p in paths)}")

    L.info("Found %d input file(s)", len(files))
    return files
