# src/run_megahit/assembly/jobs.py

"""
Turn classified reads into one MEGAHIT command line per sample or single file.
"""
from __future__ import annotations
import logging
import shlex
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence, Union

import pandas as pd

from .pairing import Direction, PairLookup, SingleReads, get_extension

L = logging.getLogger(__name__)

PathLike = Union[str, Path]

MANIFEST_COLUMNS = ["name", "layout", "forward", "reverse", "reads", "out_dir", "command"]
MANIFEST_NAME = "jobs.tsv"
LOG_DIR_NAME = "logs"
# entries the pipeline itself creates under out_dir
RESERVED_NAMES = frozenset({LOG_DIR_NAME, MANIFEST_NAME})


@dataclass
class MegahitOptions:
    """Optional MEGAHIT tuning values. ``None`` means leave MEGAHIT's own default."""
    min_count: int | None = None
    k_min: int | None = None
    k_max: int | None = None
    k_step: int | None = None
    k_list: str | None = None
    min_contig_len: int | None = None
    memory: float | None = None
    extra_args: list[str] = field(default_factory=list)


@dataclass
class Job:
    name: str
    layout: str                 # "paired" | "single"
    inputs: tuple[str, ...]
    out_dir: Path
    argv: list[str]

    @property
    def command(self) -> str:
        return shlex.join(self.argv)


def _fmt_number(value: float) -> str:
    # 1e9 must come out as "1000000000", not "1000000000.0"
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def megahit_args(options: MegahitOptions | None) -> list[str]:
    """Render the set options as MEGAHIT flags."""
    if options is None:
        return []

    args: list[str] = []
    if options.min_count is not None:
        args += ["--min-count", str(options.min_count)]

    if options.k_list:
        # --k-list overrides the min/max/step trio in MEGAHIT
        if any(v is not None for v in (options.k_min, options.k_max, options.k_step)):
            L.warning("--k-list given, ignoring --k-min/--k-max/--k-step")
        args += ["--k-list", options.k_list]
    else:
        for flag, value in (("--k-min", options.k_min),
                            ("--k-max", options.k_max),
                            ("--k-step", options.k_step)):
            if value is not None:
                args += [flag, str(value)]

    if options.min_contig_len is not None:
        args += ["--min-contig-len", str(options.min_contig_len)]
    if options.memory is not None:
        args += ["--memory", _fmt_number(options.memory)]

    args.extend(options.extra_args)
    return args


def _single_name(path: str) -> str:
    name = Path(path).name
    ext = get_extension(name)
    if ext:
        name = name[: -(len(ext) + 1)]
    return name or "reads"


def _unique(name: str, taken: set[str]) -> str:
    if name in ("", ".", ".."):
        name = "reads"
    candidate, n = name, 1
    while candidate in taken:
        n += 1
        candidate = f"{name}_{n}"
    taken.add(candidate)
    return candidate


def make_jobs(
    pairs: PairLookup,
    singles: SingleReads,
    out_dir: PathLike,
    *,
    options: MegahitOptions | None = None,
    megahit_exe: str = "megahit",
) -> list[Job]:
    """
    Build one job per complete pair (sorted by sample) then one per single file.

    Each job gets its own ``out_dir/<name>`` since MEGAHIT will not write into
    an existing directory. Names never shadow the log directory or manifest,
    and "." or ".." become "reads" so no job escapes ``out_dir``.
    """
    out_root = Path(out_dir)
    extra = megahit_args(options)
    taken: set[str] = set(RESERVED_NAMES)
    jobs: list[Job] = []

    for i, sample in enumerate(sorted(pairs), start=1):
        pair = pairs[sample]
        fwd, rev = pair.get(Direction.FORWARD), pair.get(Direction.REVERSE)
        if fwd is None or rev is None:
            L.warning("Skipping incomplete pair %s", sample)
            continue

        name = _unique(sample, taken)
        job_dir = out_root / name
        L.debug("%3d: Pair %s", i, sample)
        jobs.append(Job(
            name=name,
            layout="paired",
            inputs=(fwd, rev),
            out_dir=job_dir,
            argv=[megahit_exe, "-1", fwd, "-2", rev, "-o", str(job_dir), *extra],
        ))

    for i, path in enumerate(singles, start=1):
        name = _unique(_single_name(path), taken)
        job_dir = out_root / name
        L.debug("%3d: Single %s", i, Path(path).name)
        jobs.append(Job(
            name=name,
            layout="single",
            inputs=(path,),
            out_dir=job_dir,
            argv=[megahit_exe, "-r", path, "-o", str(job_dir), *extra],
        ))

    return jobs


def write_manifest(jobs: Sequence[Job], path: PathLike) -> Path:
    """Write a TSV describing every job; returns the absolute path."""
    rows = []
    for job in jobs:
        paired = job.layout == "paired"
        rows.append({
            "name": job.name,
            "layout": job.layout,
            "forward": job.inputs[0] if paired else "",
            "reverse": job.inputs[1] if paired else "",
            "reads": "" if paired else job.inputs[0],
            "out_dir": str(job.out_dir),
            "command": job.command,
        })

    out = Path(path).expanduser().resolve()
    out.parent.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(rows, columns=MANIFEST_COLUMNS).to_csv(out, sep="\t", index=False)
    L.info("Wrote job manifest for %d job(s) -> %s", len(rows), out)
    return out
