import sys

from loguru import logger
import pytest

from crop_straighten import logger as log_module


@pytest.fixture
def fresh_logging(monkeypatch):
    monkeypatch.setattr(log_module, "_CONFIGURED", False)
    yield
    logger.remove()
    logger.add(sys.stderr)


def test_configure_logging_writes_debug_to_file(tmp_path, fresh_logging) -> None:
    log_module.configure_logging(log_dir=tmp_path)
    logger.debug("clamp pass detail")
    logger.complete()

    log_file = tmp_path / "logs" / "crop_straighten.log"
    text = log_file.read_text(encoding="utf-8")
    assert "DEBUG" in text
    assert "clamp pass detail" in text


def test_configure_logging_is_idempotent(tmp_path, fresh_logging) -> None:
    log_module.configure_logging(log_dir=tmp_path)
    log_module.configure_logging(log_dir=tmp_path / "other")
    assert not (tmp_path / "other").exists()
