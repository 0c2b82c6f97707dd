# =============================================================================
# Structured Logging Setup (JSONL format)
# =============================================================================

import json
import sys
import traceback
from contextvars import ContextVar
from pathlib import Path

import platformdirs
from loguru import logger

LOG_APP_NAME = "powertabs"

# Correlation ID for one redraw pass in the host adapter
trace_id_var: ContextVar[str] = ContextVar('trace_id', default=None)


def format_record(record) -> dict:
    """Turn a loguru record into the JSONL log entry."""
    log_entry = {
        "timestamp": record["time"].strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z",
        "level": record["level"].name.lower(),
        "component": record["function"],
        "operation": record["extra"].get("operation", "unknown"),
        "operation_status": record["extra"].get("status", None),
        "trace_id": record["extra"].get("trace_id") or trace_id_var.get(),
        "message": record["message"],
        "context": {k: v for k, v in record["extra"].items()
                   if k not in ("operation", "status", "trace_id", "metrics")},
        "metrics": record["extra"].get("metrics", {}),
        "error": None
    }

    if record["exception"]:
        exc_type, exc_value, exc_tb = record["exception"]
        tb_lines = []
        if exc_tb:
            tb_lines = traceback.format_tb(exc_tb)

        log_entry["error"] = {
            "type": exc_type.__name__ if exc_type else "Unknown",
            "message": str(exc_value) if exc_value else "Unknown error",
            "traceback_lines": tb_lines
        }

    return log_entry


def json_sink(message):
    """JSONL sink - writes to stderr."""
    entry = format_record(message.record)
    sys.stderr.write(json.dumps(entry, default=str) + "\n")


def setup_logger(level: str = "INFO", log_to_file: bool = True):
    """Configure Loguru for machine-readable JSONL output.

    Args:
        level: Minimum level for the stderr sink.
        log_to_file: Also write a rotated JSONL file under the user log dir.
    """
    logger.remove()

    logger.add(
        json_sink,
        level=level
    )

    if log_to_file:
        # macOS: ~/Library/Logs/powertabs/
        # Linux: ~/.local/state/powertabs/log/
        log_dir = Path(platformdirs.user_log_dir(
            appname=LOG_APP_NAME,
            ensure_exists=True
        ))

        logger.add(
            str(log_dir / "powertabs.jsonl"),
            format="{message}",
            serialize=True,
            rotation="10 MB",
            retention="7 days",
            compression="gz",
            level="DEBUG"
        )

    return logger
