# ── src/run_megahit/utility/utils.py ───────────────────────────────────
from __future__ import annotations

import datetime as dt
import errno
import logging
import logging.handlers
import os
import secrets
import sys
from pathlib import Path

import yaml

L = logging.getLogger(__name__)

# ── locate repo root & default paths  ──────────────────────────────────
def _find_repo_root(start: Path | None = None) -> Path:
    """Walk parents until we see pyproject.toml or .git."""
    here = start or Path(__file__).resolve()
    for p in [here, *here.parents]:
        if (p / "pyproject.toml").exists() or (p / ".git").exists():
            return p
    return Path(__file__).resolve().parents[1]       # site-packages wheel

ROOT      = _find_repo_root()
LOG_ROOT  = ROOT / "logs"
CONF_PATH = ROOT / "config" / "config.yaml"

LOG_PREFIX = "run_megahit"

# ── config  ────────────────────────────────────────────────────────────
def load_config(path: str | Path | None = None) -> dict:
    """
    Read the YAML config.

    Lookup order: *path*, then $RUN_MEGAHIT_CONFIG, then config/config.yaml in
    the repo. Only the last one is allowed to be missing (gives ``{}``).
    """
    if path is None:
        path = os.getenv("RUN_MEGAHIT_CONFIG")
    if path is None:
        if not CONF_PATH.exists():
            L.debug("No config at %s, using built-in defaults", CONF_PATH)
            return {}
        path = CONF_PATH

    with Path(path).expanduser().open() as fh:
        return yaml.safe_load(fh) or {}

def config_value(cfg: dict, section: str, key: str, default=None):
    """``cfg[section][key]`` or *default* when either level is missing/None."""
    value = (cfg.get(section) or {}).get(key)
    return default if value is None else value

# ── logging  ───────────────────────────────────────────────────────────
def _session_id(session_env: str, warn_if_generated: bool) -> str:
    sess_id = os.getenv(session_env)
    if sess_id:
        return sess_id
    ts = dt.datetime.now().strftime("%Y%m%d-%H%M%S")
    sess_id = f"{ts}-{secrets.token_hex(2)}"
    if warn_if_generated:
        sys.stderr.write(
            f"{session_env} not set – using auto session ID {sess_id}\n"
        )
    return sess_id

def setup_logging(
    log_dir: str | Path | None = LOG_ROOT,
    *,
    level: int | None = None,
    console: bool = True,
    force: bool = False,
    max_bytes: int | None = None,
    backup_count: int = 0,
    session_env: str = "RUN_MEGAHIT_SESSION_ID",
    warn_if_generated: bool = True,
    log_file_prefix: str = LOG_PREFIX,
) -> Path:
    """
    Log to '<log_dir>/<prefix>_<SESSION_ID>.log' (and stderr when *console*).

    $RUN_MEGAHIT_LOG_FILE pins the exact file and wins over *log_dir*.
    With *max_bytes* the file handler rotates, keeping *backup_count* old files.
    An already-configured root logger is left alone unless *force*.
    """
    pinned = os.getenv("RUN_MEGAHIT_LOG_FILE")
    if pinned:
        logfile = Path(pinned).expanduser()
        logfile.parent.mkdir(parents=True, exist_ok=True)
    else:
        root_dir = Path(
            log_dir if log_dir is not None else os.getenv("RUN_MEGAHIT_LOG_DIR", LOG_ROOT)
        ).expanduser()
        root_dir.mkdir(parents=True, exist_ok=True)
        sess_id = _session_id(session_env, warn_if_generated)
        logfile = root_dir / f"{log_file_prefix}_{sess_id}.log"

    root_logger = logging.getLogger()
    if root_logger.handlers and not force:
        return logfile

    root_logger.handlers.clear()
    root_logger.setLevel(level or logging.INFO)
    fmt = logging.Formatter("%(asctime)s  %(levelname)-7s  %(name)s:  %(message)s")

    if max_bytes:
        fh = logging.handlers.RotatingFileHandler(
            logfile, maxBytes=max_bytes, backupCount=backup_count,
            encoding="utf-8", delay=True,
        )
    else:
        fh = logging.FileHandler(logfile, mode="a", encoding="utf-8", delay=True)
    fh.setFormatter(fmt)
    root_logger.addHandler(fh)

    if console:
        ch = logging.StreamHandler(sys.stderr)
        ch.setFormatter(fmt)
        root_logger.addHandler(ch)

    # _latest symlink is a convenience only
    latest = logfile.parent / f"{log_file_prefix}_latest.log"
    try:
        if latest.is_symlink() or latest.exists():
            latest.unlink()
        latest.symlink_to(logfile.name)
    except OSError as e:
        if e.errno not in (errno.EPERM, errno.EACCES, errno.EEXIST):
            raise

    root_logger.info("Logging to %s", logfile)
    return logfile
