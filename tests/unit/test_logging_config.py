import logging
import os

from translation_extractor.logging_config import LOGGER_NAME, TqdmLoggingHandler, setup_logger


def _reset(logger):
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def test_setup_logger_writes_to_file_and_console(tmp_path):
    log_file = tmp_path / "logs" / "extraction.log"
    logger = setup_logger("debug", str(log_file), True)
    try:
        assert logger.name == LOGGER_NAME
        assert logger.level == logging.DEBUG
        assert any(isinstance(h, TqdmLoggingHandler) for h in logger.handlers)

        logging.getLogger(f"{LOGGER_NAME}.extractor").info("hello from a module")
        for handler in logger.handlers:
            handler.flush()

        content = log_file.read_text(encoding='utf-8')
        assert "INFO - hello from a module" in content
    finally:
        _reset(logger)


def test_setup_logger_is_idempotent(tmp_path):
    log_file = os.path.join(str(tmp_path), "extraction.log")
    setup_logger("INFO", log_file, False)
    logger = setup_logger("INFO", log_file, False)
    try:
        assert len(logger.handlers) == 1
        assert not any(isinstance(h, TqdmLoggingHandler) for h in logger.handlers)
    finally:
        _reset(logger)


def test_unknown_level_defaults_to_info(tmp_path):
    logger = setup_logger("chatty", os.path.join(str(tmp_path), "x.log"), False)
    try:
        assert logger.level == logging.INFO
    finally:
        _reset(logger)


def test_empty_log_path_disables_file_logging():
    logger = setup_logger("INFO", "", True)
    try:
        assert [type(h) for h in logger.handlers] == [TqdmLoggingHandler]
    finally:
        _reset(logger)
