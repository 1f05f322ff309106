"""Process-wide logging setup."""

import logging


class HealthCheckFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        msg = record.getMessage()
        return "/health" not in msg


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )
    for logger_name in ["uvicorn.access"]:
        logger = logging.getLogger(logger_name)
        logger.addFilter(HealthCheckFilter())
