import logging

from roster_reconcile import setup_logging
from roster_reconcile.logs import LOGGER_NAME


def test_setup_logging_writes_file(tmp_path):
    logger = logging.getLogger(LOGGER_NAME)
    for h in list(logger.handlers):
        logger.removeHandler(h)
    try:
        log_path = tmp_path / "logs" / "roster.log"
        logger = setup_logging(debug=True, log_path=log_path)
        assert len(logger.handlers) == 2
        # second call does not stack handlers
        assert setup_logging() is logger
        assert len(logger.handlers) == 2

        logging.getLogger(LOGGER_NAME + ".processors").info("hello roster")
        for h in logger.handlers:
            h.flush()
        assert "hello roster" in log_path.read_text(encoding="utf-8")
    finally:
        for h in list(logger.handlers):
            h.close()
            logger.removeHandler(h)
