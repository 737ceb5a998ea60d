"""
run_megahit.pipeline
Resolve inputs -> pair reads -> build MEGAHIT jobs -> hand them to parallel.
Returns an int exit-code (0 = success) & raises on fatal errors.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from pathlib import Path

from run_megahit.assembly.jobs import MANIFEST_NAME, MegahitOptions, make_jobs, write_manifest
from run_megahit.assembly.pairing import classify
from run_megahit.assembly.runner import run_jobs
from run_megahit.utility.io_utils import find_files

__all__ = ["RunConfig", "run_assembly"]

L = logging.getLogger(__name__)

@dataclass
class RunConfig:
    query: list[str]
    out_dir: Path = field(default_factory=lambda: Path.cwd() / "megahit-out")
    num_concurrent_jobs: int = 8
    num_halt: int = 0
    options: MegahitOptions = field(default_factory=MegahitOptions)
    megahit_exe: str = "megahit"
    parallel_exe: str = "parallel"
    dry_run: bool = False


def run_assembly(config: RunConfig) -> int:
    """Run MEGAHIT once per paired sample and once per single read file.

    With ``dry_run`` the job lines are printed and the manifest written, but
    nothing is executed.
    """
    files = find_files(config.query)

    pairs, singles = classify(files)
    print(f"Processing {len(pairs)} pair{'' if len(pairs) == 1 else 's'}, "
          f"{len(singles)} single.")

    out_dir = Path(config.out_dir)
    jobs = make_jobs(
        pairs,
        singles,
        out_dir,
        options=config.options,
        megahit_exe=config.megahit_exe,
    )
    for i, job in enumerate(jobs, start=1):
        print(f"{i:3}: {'Pair' if job.layout == 'paired' else 'Single'} {job.name}")

    out_dir.mkdir(parents=True, exist_ok=True)
    write_manifest(jobs, out_dir / MANIFEST_NAME)

    if config.dry_run:
        for job in jobs:
            print(job.command)
        L.info("Dry run, %d job(s) not started", len(jobs))
        return 0

    rc = run_jobs(
        jobs,
        "Running Megahit",
        config.num_concurrent_jobs,
        config.num_halt,
        parallel_exe=config.parallel_exe,
    )
    print(f'Done, see output in "{out_dir}"')
    return rc
