"""JSON logging with stable schema."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from healthadvisor.common.constants import JSON_LOG_FIELDS
from healthadvisor.common.fs import ensure_dir
from healthadvisor.common.time_utils import utc_timestamp_iso


class JsonLineFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": utc_timestamp_iso(),
            "level": record.levelname,
            "run_id": getattr(record, "run_id", None),
            "event": getattr(record, "event", None),
            "status": getattr(record, "status", None),
            "row": getattr(record, "row", None),
            "doc_id": getattr(record, "doc_id", None),
            "address": getattr(record, "address", None),
            "index": getattr(record, "index", None),
            "error_code": getattr(record, "error_code", None),
            "duration_ms": getattr(record, "duration_ms", None),
            "attempted": getattr(record, "attempted", None),
            "indexed": getattr(record, "indexed", None),
            "failed": getattr(record, "failed", None),
            "message": record.getMessage(),
        }
        for field in JSON_LOG_FIELDS:
            payload.setdefault(field, None)
        return json.dumps(payload, ensure_ascii=False, default=str)


def build_logger(run_id: str, log_dir: Path | None = None, level: str = "INFO") -> logging.Logger:
    logger = logging.getLogger(f"healthadvisor.{run_id}")
    logger.setLevel(level.upper())
    logger.handlers.clear()
    logger.propagate = False

    stream = logging.StreamHandler()
    stream.setFormatter(JsonLineFormatter())
    logger.addHandler(stream)

    if log_dir is not None:
        log_path = log_dir / f"{run_id}.log.jsonl"
        ensure_dir(log_path.parent)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(JsonLineFormatter())
        logger.addHandler(file_handler)

    return logger


def log_event(logger: logging.Logger, message: str, *, level: int = logging.INFO, **event_fields: Any) -> None:
    logger.log(level, message, extra=event_fields)
