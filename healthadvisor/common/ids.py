"""Run and document identifier helpers."""

from __future__ import annotations

from datetime import datetime, timezone


def generate_run_id() -> str:
    now = datetime.now(tz=timezone.utc)
    return now.strftime("run-%Y%m%dT%H%M%S%fZ")


def document_id(iteration: int) -> str:
    # Loop position, not record content: repeated runs overwrite the same ids.
    return str(iteration)
