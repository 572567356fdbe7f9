import logging
from pathlib import Path

from evaporative_cooling.logging_config import ColoredFormatter, LoggingConfigurator


def test_logger_creation(tmp_path):
    try:
        config = {'logging': {'level': 'DEBUG', 'log_to_file': True, 'log_dir': str(tmp_path / "logs")}}
        lc = LoggingConfigurator(config)
        lc.setup()

        logger = lc.get_logger('test_mod')
        logger.info("Test message")

        log_file = Path(tmp_path / "logs" / "evaporative_cooling.log")
        assert log_file.exists()
        assert "Test message" in log_file.read_text()
    finally:
        for handler in logging.getLogger().handlers:
            handler.close()
        logging.getLogger().handlers = []


def test_console_only(tmp_path):
    config = {'logging': {'level': 'warning', 'log_to_file': False, 'log_dir': str(tmp_path / "logs")}}
    lc = LoggingConfigurator(config)
    lc.setup()
    try:
        root = logging.getLogger()
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert not (tmp_path / "logs").exists()
    finally:
        logging.getLogger().handlers = []


def test_colored_formatter_restores_levelname():
    record = logging.LogRecord("ec", logging.ERROR, __file__, 1, "boom", None, None)
    formatted = ColoredFormatter('%(levelname)s %(message)s').format(record)

    assert "ERROR" in formatted
    assert formatted != "ERROR boom"
    assert record.levelname == "ERROR"
