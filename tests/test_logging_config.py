import logging

import pytest

from spotrate.core.config import settings
from spotrate.core.logging_config import configure_logging


@pytest.fixture()
def restore_logging():
    yield
    configure_logging(log_dir=settings.log_dir, level=settings.log_level)


def _own_handlers(root):
    return [h for h in root.handlers if (h.get_name() or "").startswith("spotrate.")]


def test_configure_logging_writes_to_rotating_file(tmp_path, restore_logging):
    log_dir = tmp_path / "logs"
    root = configure_logging(log_dir=str(log_dir), level="info", filename="reconcile.log")

    logging.getLogger("spotrate.test").info("spot spot-1 reconciled")
    for handler in _own_handlers(root):
        handler.flush()

    assert root.level == logging.INFO
    assert "spot spot-1 reconciled" in (log_dir / "reconcile.log").read_text(encoding="utf-8")


def test_reconfiguring_replaces_own_handlers_only(tmp_path, restore_logging):
    root = logging.getLogger()
    foreign = logging.NullHandler()
    root.addHandler(foreign)
    try:
        configure_logging(log_dir=str(tmp_path), level="INFO")
        configure_logging(log_dir=str(tmp_path), level="INFO")

        assert sorted(h.get_name() for h in _own_handlers(root)) == ["spotrate.console", "spotrate.file"]
        assert foreign in root.handlers
    finally:
        root.removeHandler(foreign)


@pytest.mark.parametrize(
    "level, expected",
    [("INFO", logging.WARNING), ("DEBUG", logging.DEBUG), ("bogus", logging.WARNING)],
)
def test_statement_echo_follows_debug_only(tmp_path, restore_logging, level, expected):
    configure_logging(log_dir=str(tmp_path), level=level)
    assert logging.getLogger("sqlalchemy.engine").level == expected
