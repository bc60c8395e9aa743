import logging
from loguru import logger

from dinewithus.core.logger import setup_logging


def test_stdlib_records_reach_loguru(tmp_path):
    error_log = tmp_path / "errors.log"
    setup_logging(level="INFO", error_log_path=str(error_log))
    messages = []
    sink_id = logger.add(messages.append, level="INFO")
    try:
        logging.getLogger("uvicorn.error").warning("Backend slow to answer")
        logger.error("❌ Backend Error 500 (GET /bookings/host/h_1): boom")
    finally:
        logger.remove(sink_id)
        setup_logging()

    assert any("Backend slow to answer" in m for m in messages)
    # Errors also land in the error file
    assert "Backend Error 500" in error_log.read_text(encoding="utf-8")
    assert "Backend slow to answer" not in error_log.read_text(encoding="utf-8")
