"""Per-record enrichment: read, parse, geocode, index.

Each iteration is independent. A row that fails to read, parse, geocode or
index is logged and dropped; the loop always runs ``record_budget`` times,
so a short input file simply produces fewer documents. Only failures of the
index itself (existence check, creation call, final flush) stop the run.
"""

from __future__ import annotations

import logging
import time
from dataclasses import asdict, dataclass
from typing import Any, Iterator, Protocol

from healthadvisor.common.constants import DOCUMENT_TYPE, INDEX_NAME
from healthadvisor.common.errors import (
    GeocodeError,
    InfrastructureError,
    RecordParseError,
    RowReadError,
    SearchIndexError,
)
from healthadvisor.common.ids import document_id
from healthadvisor.common.logging import log_event
from healthadvisor.common.time_utils import elapsed_ms
from healthadvisor.pipeline.records import parse_service_record, read_next_row


class Geocoder(Protocol):
    def geocode(self, address: str) -> tuple[float, float]: ...


class SearchIndex(Protocol):
    def index_exists(self, name: str) -> bool: ...

    def create_index(self, name: str) -> bool: ...

    def index_document(self, name: str, doc_type: str, doc_id: str, document: dict[str, Any]) -> dict[str, Any]: ...

    def flush(self, name: str) -> dict[str, Any]: ...


@dataclass
class EnrichmentSummary:
    attempted: int = 0
    indexed: int = 0
    read_failures: int = 0
    parse_failures: int = 0
    geocode_failures: int = 0
    index_failures: int = 0

    @property
    def failed(self) -> int:
        return self.read_failures + self.parse_failures + self.geocode_failures + self.index_failures

    def to_dict(self) -> dict[str, int]:
        out = asdict(self)
        out["failed"] = self.failed
        return out


def ensure_index(search_index: SearchIndex, name: str, logger: logging.Logger, *, run_id: str) -> bool:
    """Create ``name`` when it does not exist yet.

    Returns True when the index was created during this call. An
    unacknowledged create is logged as a warning and the run carries on.
    """
    try:
        exists = search_index.index_exists(name)
    except SearchIndexError as exc:
        raise InfrastructureError(str(exc)) from exc
    log_event(logger, f"index {name} exists={exists}", run_id=run_id, index=name, event="INDEX_CHECK", status="ok")
    if exists:
        return False

    log_event(logger, f"will create index {name}", run_id=run_id, index=name, event="INDEX_CREATE", status="start")
    try:
        acknowledged = search_index.create_index(name)
    except SearchIndexError as exc:
        raise InfrastructureError(str(exc)) from exc
    if not acknowledged:
        log_event(
            logger,
            f"the index {name} has not been acknowledged",
            level=logging.WARNING,
            run_id=run_id,
            index=name,
            event="INDEX_CREATE",
            status="warning",
        )
    return True


def flush_index(search_index: SearchIndex, name: str, logger: logging.Logger, *, run_id: str) -> dict[str, Any]:
    try:
        result = search_index.flush(name)
    except SearchIndexError as exc:
        raise InfrastructureError(str(exc)) from exc
    log_event(logger, f"flushed index {name}: {result}", run_id=run_id, index=name, event="INDEX_FLUSH", status="ok")
    return result


def _log_record_failure(
    logger: logging.Logger,
    message: str,
    exc: Exception,
    *,
    run_id: str,
    row: int,
    event: str,
    **fields: Any,
) -> None:
    log_event(
        logger,
        f"{message}: {exc}",
        level=logging.WARNING,
        run_id=run_id,
        row=row,
        doc_id=document_id(row),
        event=event,
        status="error",
        error_code=getattr(exc, "error_code", type(exc).__name__),
        **fields,
    )


def enrich_rows(
    rows: Iterator[list[str]],
    record_budget: int,
    geocoder: Geocoder,
    search_index: SearchIndex,
    logger: logging.Logger,
    *,
    run_id: str,
    index_name: str = INDEX_NAME,
    document_type: str = DOCUMENT_TYPE,
) -> EnrichmentSummary:
    summary = EnrichmentSummary()

    for i in range(record_budget):
        summary.attempted += 1
        started = time.monotonic()

        try:
            row = read_next_row(rows)
        except RowReadError as exc:
            summary.read_failures += 1
            _log_record_failure(logger, "error trying to read record", exc, run_id=run_id, row=i, event="RECORD_READ_FAIL")
            continue

        try:
            record = parse_service_record(row)
        except RecordParseError as exc:
            summary.parse_failures += 1
            _log_record_failure(
                logger, "could not parse record as an outpatient service", exc, run_id=run_id, row=i, event="RECORD_PARSE_FAIL"
            )
            continue

        address = record.address()
        try:
            latitude, longitude = geocoder.geocode(address)
        except GeocodeError as exc:
            summary.geocode_failures += 1
            _log_record_failure(
                logger,
                f"error retrieving GPS information for {address}",
                exc,
                run_id=run_id,
                row=i,
                event="GEOCODE_FAIL",
                address=address,
            )
            continue
        record.set_coordinates(latitude, longitude)

        doc_id = document_id(i)
        try:
            result = search_index.index_document(index_name, document_type, doc_id, record.to_document())
        except SearchIndexError as exc:
            summary.index_failures += 1
            _log_record_failure(
                logger, f"could not index {record}", exc, run_id=run_id, row=i, event="INDEX_WRITE_FAIL", index=index_name
            )
            continue

        summary.indexed += 1
        log_event(
            logger,
            f"indexed document: {result}",
            run_id=run_id,
            row=i,
            doc_id=doc_id,
            index=index_name,
            event="INDEX_WRITE",
            status="ok",
            duration_ms=elapsed_ms(started),
        )

    return summary


def run_enrichment(
    rows: Iterator[list[str]],
    record_budget: int,
    geocoder: Geocoder,
    search_index: SearchIndex,
    logger: logging.Logger,
    *,
    run_id: str,
    index_name: str = INDEX_NAME,
    document_type: str = DOCUMENT_TYPE,
) -> EnrichmentSummary:
    """Ensure the index, enrich ``record_budget`` rows, then flush once.

    ``rows`` must already be positioned past the header row.
    """
    if record_budget < 1:
        raise ValueError("record_budget must be a positive integer")

    ensure_index(search_index, index_name, logger, run_id=run_id)
    summary = enrich_rows(
        rows,
        record_budget,
        geocoder,
        search_index,
        logger,
        run_id=run_id,
        index_name=index_name,
        document_type=document_type,
    )
    flush_index(search_index, index_name, logger, run_id=run_id)
    return summary
