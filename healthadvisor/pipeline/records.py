"""Outpatient CSV row reading and parsing."""

from __future__ import annotations

import csv
import re
from typing import Iterator, Sequence

from healthadvisor.common.constants import MIN_RECORD_FIELDS
from healthadvisor.common.errors import (
    IncompleteRecordError,
    InvalidEstimatedCharge,
    InvalidServiceCount,
    InvalidTotalPayment,
    RecordParseError,
    RowReadError,
)
from healthadvisor.common.models import ServiceRecord

_BASE10_INT_RE = re.compile(r"[+-]?[0-9]+")

COL_APC = 0
COL_PROVIDER_ID = 1
COL_PROVIDER_NAME = 2
COL_STREET = 3
COL_CITY = 4
COL_STATE = 5
COL_ZIP = 6
COL_REGION = 7
COL_SERVICE_COUNT = 8
COL_ESTIMATED_CHARGE = 9
COL_TOTAL_PAYMENT = 10


def _parse_int(value: str, error_cls: type[RecordParseError]) -> int:
    if not _BASE10_INT_RE.fullmatch(value):
        raise error_cls(f"Unable to parse {error_cls.field_name} value {value!r}", value=value)
    return int(value)


def _parse_float(value: str, error_cls: type[RecordParseError]) -> float:
    # float() tolerates padding and digit separators; the source format does not.
    if value != value.strip() or "_" in value:
        raise error_cls(f"Unable to parse {error_cls.field_name} value {value!r}", value=value)
    try:
        return float(value)
    except ValueError as exc:
        raise error_cls(f"Unable to parse {error_cls.field_name} value {value!r}", value=value) from exc


def parse_service_record(record: Sequence[str]) -> ServiceRecord:
    if len(record) < MIN_RECORD_FIELDS:
        raise IncompleteRecordError(
            f"Expected at least {MIN_RECORD_FIELDS} fields, got {len(record)}",
            value=None,
        )

    service_count = _parse_int(record[COL_SERVICE_COUNT], InvalidServiceCount)
    estimated_charge = _parse_float(record[COL_ESTIMATED_CHARGE], InvalidEstimatedCharge)
    total_payment = _parse_float(record[COL_TOTAL_PAYMENT], InvalidTotalPayment)

    return ServiceRecord(
        apc_code=record[COL_APC],
        provider_id=record[COL_PROVIDER_ID],
        provider_name=record[COL_PROVIDER_NAME],
        provider_street_address=record[COL_STREET],
        provider_city=record[COL_CITY],
        provider_state=record[COL_STATE],
        provider_zip_code=record[COL_ZIP],
        provider_region=record[COL_REGION],
        service_count=service_count,
        average_estimated_charge=estimated_charge,
        average_total_payment=total_payment,
    )


def read_next_row(rows: Iterator[list[str]]) -> list[str]:
    try:
        return next(rows)
    except StopIteration as exc:
        raise RowReadError("End of input reached") from exc
    except (csv.Error, UnicodeDecodeError) as exc:
        raise RowReadError(f"Malformed CSV row: {exc}") from exc


def skip_header(rows: Iterator[list[str]]) -> list[str] | None:
    try:
        return next(rows)
    except (StopIteration, csv.Error, UnicodeDecodeError):
        return None
