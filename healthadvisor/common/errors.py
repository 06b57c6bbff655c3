"""Domain errors and failure typing."""


class PipelineError(Exception):
    """Base class for pipeline failures."""

    error_code = "PIPELINE_ERROR"


class ConfigError(PipelineError):
    """Raised for invalid or missing configuration."""

    error_code = "CONFIG_ERROR"


class StageError(PipelineError):
    """Raised when a call to an external service fails."""

    error_code = "STAGE_ERROR"


class InfrastructureError(PipelineError):
    """Raised when the search service is unusable; always fatal."""

    error_code = "INFRASTRUCTURE_ERROR"


class RecordError(PipelineError):
    """Base class for failures scoped to a single input row."""

    error_code = "RECORD_ERROR"


class RowReadError(RecordError):
    error_code = "ROW_READ_ERROR"


class RecordParseError(RecordError):
    """A row could not be turned into a ServiceRecord."""

    error_code = "RECORD_PARSE_ERROR"
    field_name: str | None = None

    def __init__(self, message: str, value: str | None = None) -> None:
        super().__init__(message)
        self.value = value


class IncompleteRecordError(RecordParseError):
    error_code = "INCOMPLETE_RECORD"


class InvalidServiceCount(RecordParseError):
    error_code = "INVALID_SERVICE_COUNT"
    field_name = "service_count"


class InvalidEstimatedCharge(RecordParseError):
    error_code = "INVALID_ESTIMATED_CHARGE"
    field_name = "average_estimated_charge"


class InvalidTotalPayment(RecordParseError):
    error_code = "INVALID_TOTAL_PAYMENT"
    field_name = "average_total_payment"


class GeocodeError(RecordError):
    """Raised when an address cannot be resolved to coordinates."""

    error_code = "GEOCODE_ERROR"

    def __init__(self, message: str, address: str) -> None:
        super().__init__(message)
        self.address = address


class SearchIndexError(RecordError):
    """Raised when the search service rejects a request."""

    error_code = "SEARCH_INDEX_ERROR"
