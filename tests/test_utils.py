from __future__ import annotations
import logging, pathlib
import pytest

from run_megahit.utility import utils
from run_megahit.utility.utils import config_value, load_config, setup_logging

REPO = pathlib.Path(__file__).resolve().parents[1]


def test_load_repo_config():
    cfg = load_config(REPO / "config" / "config.yaml")
    assert cfg["tools"]["megahit"] == "megahit"
    assert cfg["defaults"]["num_concurrent_jobs"] == 8


def test_load_config_from_env(tmp_path: pathlib.Path, monkeypatch):
    conf = tmp_path / "alt.yaml"
    conf.write_text("tools:\n  parallel: /opt/parallel\n")
    monkeypatch.setenv("RUN_MEGAHIT_CONFIG", str(conf))
    assert load_config() == {"tools": {"parallel": "/opt/parallel"}}


def test_missing_default_config_is_empty(tmp_path: pathlib.Path, monkeypatch):
    monkeypatch.delenv("RUN_MEGAHIT_CONFIG", raising=False)
    monkeypatch.setattr(utils, "CONF_PATH", tmp_path / "absent.yaml")
    assert load_config() == {}


def test_missing_named_config_raises(tmp_path: pathlib.Path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "absent.yaml")


def test_config_value_fallbacks():
    cfg = {"defaults": {"num_halt": None, "num_concurrent_jobs": 4}, "tools": None}
    assert config_value(cfg, "defaults", "num_concurrent_jobs", 8) == 4
    assert config_value(cfg, "defaults", "num_halt", 0) == 0
    assert config_value(cfg, "tools", "megahit", "megahit") == "megahit"
    assert config_value({}, "defaults", "out_dir") is None


def test_setup_logging(tmp_path: pathlib.Path, monkeypatch):
    """
    tmp_path is a pytest fixture that yields a fresh, auto-cleaned path.
    """
    monkeypatch.delenv("RUN_MEGAHIT_LOG_FILE", raising=False)
    monkeypatch.setenv("RUN_MEGAHIT_SESSION_ID", "unit")
    log_file = setup_logging(log_dir=tmp_path, log_file_prefix="test", force=True, console=False)
    logging.info("hello")
    logging.getLogger().handlers[0].flush()

    assert log_file == tmp_path / "test_unit.log"
    assert "hello" in log_file.read_text()
    assert (tmp_path / "test_latest.log").is_symlink()


def test_setup_logging_rotates(tmp_path: pathlib.Path, monkeypatch):
    monkeypatch.delenv("RUN_MEGAHIT_LOG_FILE", raising=False)
    monkeypatch.setenv("RUN_MEGAHIT_SESSION_ID", "rot")
    log_file = setup_logging(
            log_dir=tmp_path,
            force=True,
            console=False,
            max_bytes=1_000,
            backup_count=1,
            )
    root = logging.getLogger()
    assert len(root.handlers) == 1
    root.info("x" * 2_000)  # exceed 1 kb
    root.handlers[0].flush()
    assert log_file.exists()
    assert log_file.with_suffix(".log.1").exists()


def test_log_file_env_wins(tmp_path: pathlib.Path, monkeypatch):
    pinned = tmp_path / "pinned" / "run.log"
    monkeypatch.setenv("RUN_MEGAHIT_LOG_FILE", str(pinned))
    assert setup_logging(tmp_path / "ignored", force=True, console=False) == pinned
    assert not (tmp_path / "ignored").exists()
