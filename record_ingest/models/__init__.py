"""Domain models for the CSV record ingestion tool."""

from .batch_summary import BatchSummary
from .config_models import DatabaseConfig, IngestConfig
from .record import InvalidRecordError, RawLine, Record
from .rejection import Rejection, RejectionReason
from .result import Accepted, Rejected, ValidationResult

__all__ = [
    # Configuration models
    "DatabaseConfig",
    "IngestConfig",
    # Record models
    "InvalidRecordError",
    "RawLine",
    "Record",
    # Outcome models
    "Accepted",
    "Rejected",
    "Rejection",
    "RejectionReason",
    "ValidationResult",
    "BatchSummary",
]
