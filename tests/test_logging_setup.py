import logging

import pytest

from bebe_ai import logging_setup


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


def test_logs_go_to_console_and_a_fresh_file(monkeypatch, tmp_path, restore_root_logger):
    log_path = tmp_path / "run.log"
    log_path.write_text("previous run\n", encoding="utf-8")
    monkeypatch.setitem(logging_setup.STORAGE, "log_path", str(log_path))

    logging_setup.configure_logging("DEBUG")
    logging.getLogger("bebe_ai.test").debug("page fetched")
    for handler in logging.getLogger().handlers:
        handler.flush()

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert {type(h) for h in root.handlers} == {logging.StreamHandler, logging.FileHandler}
    assert logging.getLogger("httpx").level == logging.WARNING
    content = log_path.read_text(encoding="utf-8")
    assert "previous run" not in content
    assert "[DEBUG] bebe_ai.test - page fetched" in content


def test_unknown_level_falls_back_to_info(monkeypatch, tmp_path, restore_root_logger):
    monkeypatch.setitem(logging_setup.STORAGE, "log_path", str(tmp_path / "run.log"))

    logging_setup.configure_logging("VERBOSE")

    assert logging.getLogger().level == logging.INFO
