import logging
import sys
from pythonjsonlogger import jsonlogger

# Keys CompassSession passes through ``extra``; every record carries them, null when absent.
SESSION_FIELDS = ("session_state", "answered_total", "skipped_total", "category")


class SessionJsonFormatter(jsonlogger.JsonFormatter):
    """JSON records with a fixed envelope plus the session's progress at the time of the log call."""

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        log_record['timestamp'] = record.created
        log_record['level'] = record.levelname
        log_record['logger'] = record.name
        for field in SESSION_FIELDS:
            log_record[field] = getattr(record, field, None)


def setup_logging(log_level_str: str = "INFO") -> logging.Logger:
    """
    Routes the compass engine's logs to stdout as JSON.

    Only one JSON handler is ever attached; calling again just changes the level.
    Returns the root logger.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level_str.upper(), logging.INFO))

    already_installed = any(isinstance(h.formatter, SessionJsonFormatter) for h in root_logger.handlers)
    if not already_installed:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(SessionJsonFormatter('%(message)s'))
        root_logger.addHandler(handler)
    return root_logger
