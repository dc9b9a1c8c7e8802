from __future__ import annotations

import logging
import logging.config
from typing import Any, Dict, Optional

from .config import Settings, get_settings


class NodeContextFilter(logging.Filter):
    """
    Stamp the node identity on every record so json output can be grouped per node.
    Records that already carry the fields (set via ``extra``) keep their values.
    """

    def __init__(self, datacenter_id: int = 0, machine_id: int = 0) -> None:
        super().__init__()
        self.datacenter_id = datacenter_id
        self.machine_id = machine_id

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        if not hasattr(record, "datacenter_id"):
            record.datacenter_id = self.datacenter_id
        if not hasattr(record, "machine_id"):
            record.machine_id = self.machine_id
        return True


def build_logging_config(settings: Optional[Settings] = None) -> Dict[str, Any]:
    settings = settings or get_settings()
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "node_context": {
                "()": "flakeid.logging_config.NodeContextFilter",
                "datacenter_id": settings.datacenter_id,
                "machine_id": settings.machine_id,
            }
        },
        "formatters": {
            "console": {
                "format": "%(levelname)s %(name)s %(message)s",
            },
            "json": {
                "()": "pythonjsonlogger.jsonlogger.JsonFormatter",
                "fmt": "%(levelname)s %(name)s %(message)s %(asctime)s %(datacenter_id)s %(machine_id)s",
            },
        },
        "handlers": {
            "default": {
                "class": "logging.StreamHandler",
                "formatter": settings.log_format,
                "filters": ["node_context"],
            },
        },
        "loggers": {
            "flakeid": {
                "handlers": ["default"],
                "level": settings.log_level,
                "propagate": False,
            },
        },
    }


def configure_logging(settings: Optional[Settings] = None) -> None:
    logging.config.dictConfig(build_logging_config(settings))
