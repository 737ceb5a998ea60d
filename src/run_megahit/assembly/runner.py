# src/run_megahit/assembly/runner.py

"""
Hand job command lines to GNU parallel, which does the actual scheduling.
"""
from __future__ import annotations
import logging
import shutil
import subprocess
from typing import Sequence

from .jobs import Job

L = logging.getLogger(__name__)


def parallel_args(num_concurrent_jobs: int = 8, num_halt: int = 0) -> list[str]:
    args = ["-j", str(num_concurrent_jobs)]
    if num_halt > 0:
        args += ["--halt", f"soon,fail={num_halt}"]
    return args


def run_jobs(
    jobs: Sequence[Job | str],
    msg: str,
    num_concurrent_jobs: int = 8,
    num_halt: int = 0,
    *,
    parallel_exe: str = "parallel",
) -> int:
    """
    Run ``jobs`` through ``parallel -j num_concurrent_jobs``.

    ``num_halt`` > 0 stops the batch soon after that many jobs fail. A non-zero
    exit from parallel raises :class:`subprocess.CalledProcessError`. Returns 0.
    """
    if not jobs:
        L.info("No jobs to run")
        return 0

    exe = shutil.which(parallel_exe)
    if exe is None:
        raise FileNotFoundError(f"'{parallel_exe}' not found on PATH - install GNU parallel")

    n = len(jobs)
    banner = f"{msg} (# {n} job{'' if n == 1 else 's'} @ {num_concurrent_jobs})"
    print(banner)
    L.info(banner)

    lines = [j.command if isinstance(j, Job) else j for j in jobs]
    cmd = [exe, *parallel_args(num_concurrent_jobs, num_halt)]
    L.debug("RUN parallel: %s", " ".join(cmd))

    try:
        subprocess.run(
            cmd,
            input="\n".join(lines) + "\n",
            check=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.PIPE,
            text=True,
        )
    except subprocess.CalledProcessError as exc:
        L.error("parallel failed (exit %s):\n%s", exc.returncode, exc.stderr)
        raise

    L.info("All %d job(s) finished", n)
    return 0
