import logging
import sys

from pythonjsonlogger import jsonlogger

_EXTRA_FIELDS = ("action", "error_code", "status_code")


class CustomJsonFormatter(jsonlogger.JsonFormatter):
    def __init__(self, *args, service: str = "transferto-client", **kwargs):
        super().__init__(*args, **kwargs)
        self.service = service

    def add_fields(self, log_record, record, message_dict):
        super().add_fields(log_record, record, message_dict)
        if not log_record.get('service'):
            log_record['service'] = self.service
        if not log_record.get('level'):
            log_record['level'] = record.levelname
        if not log_record.get('timestamp'):
            log_record['timestamp'] = self.formatTime(record, self.datefmt)
        if 'message' not in log_record:
            log_record['message'] = record.getMessage()

        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                log_record[name] = getattr(record, name)


def setup_logging(level: str = "INFO", service: str = "transferto-client", stream=None) -> logging.Handler:
    logger = logging.getLogger()
    logger.setLevel(level)

    # Replace existing handlers so repeated setup does not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(CustomJsonFormatter('%(timestamp)s %(level)s %(service)s %(message)s', service=service))
    logger.addHandler(handler)
    return handler
