import logging
import sys
from pythonjsonlogger import jsonlogger

SERVICE_NAME = "journey-engine"
LOG_FORMAT = '%(timestamp)s %(level)s %(name)s %(message)s'


class JourneyJsonFormatter(jsonlogger.JsonFormatter):
    """
    JSON log lines tagged with the service name. A `session_id` passed through
    `extra=` is kept as a top-level field so one visitor's journey can be
    filtered out of the stream.
    """

    def __init__(self, *args, service: str = SERVICE_NAME, **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service

    def add_fields(self, log_record, record, message_dict):
        super(JourneyJsonFormatter, self).add_fields(log_record, record, message_dict)
        if not log_record.get('timestamp'):
            log_record['timestamp'] = record.created
        log_record['level'] = record.levelname
        log_record['service'] = self.service
        log_record['location'] = f"{record.module}:{record.lineno}"
        session_id = getattr(record, 'session_id', None)
        if session_id is not None:
            log_record['session_id'] = session_id


def setup_logging(log_level_str: str = "INFO", service: str = SERVICE_NAME) -> logging.Handler:
    """
    Routes all logging to stdout as JSON.

    Calling it again only changes the level; the handler is installed once.
    Returns the installed handler.
    """
    log_level = getattr(logging, log_level_str.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    # Per-request access lines would drown the journey events
    logging.getLogger("uvicorn.access").setLevel(max(log_level, logging.WARNING))

    for handler in root_logger.handlers:
        if isinstance(handler.formatter, JourneyJsonFormatter):
            root_logger.info(f"JSON logging already configured; level now {logging.getLevelName(log_level)}")
            return handler

    log_handler = logging.StreamHandler(sys.stdout)
    log_handler.setFormatter(JourneyJsonFormatter(LOG_FORMAT, service=service))
    root_logger.addHandler(log_handler)
    root_logger.info(f"JSON logging configured with level {logging.getLevelName(log_level)}")
    return log_handler
