import asyncio
import logging
from datetime import datetime, timezone
from typing import Any

import click
from pythonjsonlogger import jsonlogger

from beacon_metrics.config.settings import LOG_DATE_FORMAT, settings

logger = logging.getLogger(__name__)


def log_verbose(e: Exception) -> None:
    if settings.verbose:
        logger.exception(e)
    else:
        logger.error(format_error(e))


def format_error(e: BaseException) -> str:
    if isinstance(e, asyncio.TimeoutError):
        # str(e) returns empty string
        return repr(e)

    if isinstance(e.__cause__, asyncio.TimeoutError) and not str(e):
        return repr(e.__cause__)

    return str(e)


def greenify(value: Any) -> str:
    return click.style(value, bold=True, fg='green')


class JsonFormatter(jsonlogger.JsonFormatter):
    def add_fields(self, log_record, record, message_dict):  # type: ignore
        super().add_fields(log_record, record, message_dict)
        if not log_record.get('timestamp'):
            date = datetime.fromtimestamp(record.created, tz=timezone.utc)
            log_record['timestamp'] = date.strftime(LOG_DATE_FORMAT)
        if log_record.get('level'):
            log_record['level'] = log_record['level'].upper()
        else:
            log_record['level'] = record.levelname
