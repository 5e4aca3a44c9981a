import logging

from sexpreader import logconfig
from sexpreader import main as main
from sexpreader import reader as reader


def test_trace_level_name():
    assert "TRACE" == logging.getLevelName(logconfig.TRACE)


def test_get_level(monkeypatch):
    monkeypatch.delenv("SEXPREADER_LOGGING_LEVEL", raising=False)
    assert "WARNING" == logconfig.get_level()

    monkeypatch.setenv("SEXPREADER_LOGGING_LEVEL", "DEBUG")
    assert "DEBUG" == logconfig.get_level()


def test_get_handler(monkeypatch):
    monkeypatch.delenv("SEXPREADER_USE_DEV_LOGGER", raising=False)
    handler = logconfig.get_handler(level="INFO")
    assert isinstance(handler, logging.NullHandler)
    assert logging.INFO == handler.level

    monkeypatch.setenv("SEXPREADER_USE_DEV_LOGGER", "true")
    assert isinstance(logconfig.get_handler(), logging.StreamHandler)


def test_configure_root_logger(monkeypatch, sexpreader_logger):
    monkeypatch.delenv("SEXPREADER_USE_DEV_LOGGER", raising=False)
    monkeypatch.setenv("SEXPREADER_LOGGING_LEVEL", "DEBUG")
    logconfig.configure_root_logger()
    assert logging.DEBUG == sexpreader_logger.level
    assert isinstance(sexpreader_logger.handlers[-1], logging.NullHandler)


def test_init_is_idempotent(monkeypatch, sexpreader_logger):
    monkeypatch.setattr(main, "_is_initialized", False)
    main.init()
    count = len(sexpreader_logger.handlers)
    main.init()
    assert count == len(sexpreader_logger.handlers)
    main.init(force_reload=True)
    assert count + 1 == len(sexpreader_logger.handlers)


def test_read_file_logs(caplog, tmp_path, sexpreader_logger):
    path = tmp_path / "logged.lisp"
    path.write_text("(a)")
    sexpreader_logger.setLevel(logging.DEBUG)
    with caplog.at_level(logging.DEBUG, logger="sexpreader.reader"):
        list(reader.read_file(str(path)))
    assert f"Reading forms from '{path}'" in caplog.messages
    assert any(m.startswith(f"Read forms from '{path}' in ") for m in caplog.messages)
