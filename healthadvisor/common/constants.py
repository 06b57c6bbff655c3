"""Application constants."""

USER_AGENT = "healthadvisor-indexer/0.3 (+outpatient-charges; contact: configured-email)"
INDEX_NAME = "healthadvisor"
DOCUMENT_TYPE = "service"
MIN_RECORD_FIELDS = 11
EXIT_SUCCESS = 0
EXIT_EARLY_RETURN = 2
EXIT_HARD_FAIL = 20
JSON_LOG_FIELDS = (
    "timestamp",
    "level",
    "run_id",
    "event",
    "status",
    "row",
    "doc_id",
    "address",
    "index",
    "error_code",
    "duration_ms",
    "attempted",
    "indexed",
    "failed",
    "message",
)
