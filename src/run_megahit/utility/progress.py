# src/run_megahit/utility/progress.py

from __future__ import annotations
from contextlib import contextmanager
from typing import Iterator
import threading

from tqdm import tqdm

_tls = threading.local()  # module-level, one per thread


@contextmanager
def stage_bar(total: int, *, desc: str = "", unit: str = "") -> Iterator[tqdm]:
    """
    Yield a tqdm bar for one stage. The innermost bar is kept in a
    thread-local so nested stages restore their parent on exit.
    """
    outer = getattr(_tls, "current", None)
    bar = tqdm(total=total, desc=desc, unit=unit, leave=False, ncols=80,
               bar_format="{l_bar}{bar}| {n_fmt}/{total_fmt} [elapsed: {elapsed}]")
    _tls.current = bar
    try:
        yield bar
    finally:
        bar.close()
        _tls.current = outer

