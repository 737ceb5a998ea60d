"""Read pairing, job building and job running exposed for external callers."""

from .jobs import Job, MegahitOptions, make_jobs, write_manifest
from .pairing import Direction, classify, get_extension
from .runner import run_jobs

__all__ = [
    "Direction",
    "Job",
    "MegahitOptions",
    "classify",
    "get_extension",
    "make_jobs",
    "run_jobs",
    "write_manifest",
]
