import logging
import logging.config
import os
import yaml
import json
from datetime import datetime, timezone
from typing import Optional
import contextvars

from .config import LOG_FORMAT, LOG_LEVEL, LOG_SAMPLE_RATE, LOG_EXCLUDE_PATHS

# Context variable for trace ID
trace_id_var = contextvars.ContextVar('trace_id', default=None)

def get_trace_id() -> Optional[str]:
    """Get the current trace ID from context"""
    return trace_id_var.get()

_RESERVED_ATTRS = {
    'name', 'msg', 'args', 'levelname', 'levelno', 'pathname', 'filename',
    'module', 'lineno', 'funcName', 'created', 'msecs', 'relativeCreated',
    'thread', 'threadName', 'processName', 'process', 'getMessage', 'exc_info',
    'exc_text', 'stack_info', 'taskName', 'method', 'path', 'status',
    'latency_ms', 'client_ip', 'tenant_id', 'component',
}

class JsonFormatter(logging.Formatter):
    """JSON formatter with request-scoped structured fields"""

    def format(self, record: logging.LogRecord) -> str:
        log_entry = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "trace_id": get_trace_id(),
            "method": getattr(record, 'method', None),
            "path": getattr(record, 'path', None),
            "status": getattr(record, 'status', None),
            "latency_ms": getattr(record, 'latency_ms', None),
            "client_ip": getattr(record, 'client_ip', None),
            "tenant_id": getattr(record, 'tenant_id', None),
            "component": getattr(record, 'component', 'api'),
        }

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        # Anything passed through `extra=` that is not a stock attribute
        for key, value in record.__dict__.items():
            if key not in _RESERVED_ATTRS and key not in log_entry:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)

def _default_config(log_format: str, log_level: str) -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {"()": JsonFormatter},
            "text": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                "datefmt": "%Y-%m-%d %H:%M:%S"
            }
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": log_level,
                "formatter": log_format,
                "stream": "ext://sys.stdout"
            }
        },
        "loggers": {
            "sitebuilder": {"level": log_level, "handlers": ["console"], "propagate": False},
            "uvicorn": {"level": log_level, "handlers": ["console"], "propagate": False},
            "uvicorn.error": {"level": log_level, "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": log_level, "handlers": ["console"], "propagate": False},
        },
        "root": {"level": log_level, "handlers": ["console"]}
    }

def setup_logging(config_path: str = "LOGGING.yaml") -> dict:
    """Setup logging configuration from a YAML file or environment"""
    log_format = LOG_FORMAT if LOG_FORMAT in ("json", "text") else "json"
    log_level = LOG_LEVEL

    config = None
    if os.path.exists(config_path):
        try:
            with open(config_path, 'r') as f:
                config = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            print(f"Warning: Could not load {config_path}: {e}")

    if not config:
        config = _default_config(log_format, log_level)

    # Environment overrides win over the file
    if log_format == "text":
        for handler in config.get("handlers", {}).values():
            if "formatter" in handler:
                handler["formatter"] = "text"
    for logger in config.get("loggers", {}).values():
        logger["level"] = log_level

    logging.config.dictConfig(config)

    # Read by TracingMiddleware
    logging._config = {
        "exclude_paths": LOG_EXCLUDE_PATHS,
        "sample_rate": LOG_SAMPLE_RATE,
    }

    return config
