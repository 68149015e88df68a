"""Operation provenance tracking for audit.

Every lifecycle operation is stamped with a provenance record answering:
- "Which entity was touched, and how?"
- "Did it succeed, and if not, why?"
- "What version of the provider ran it?"

Records are emitted through the structured logger so they land in the
same JSON stream as the rest of the provider's logs.
"""

from __future__ import annotations

import logging
import os
import time
from dataclasses import asdict, dataclass, field
from datetime import UTC, datetime
from typing import Any

logger = logging.getLogger(__name__)

# Version is set at build time or falls back to dev
PROVIDER_VERSION = os.environ.get("PROVIDER_VERSION", "dev")


@dataclass
class OperationProvenance:
    """Provenance record for a single lifecycle operation."""

    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    operation: str = ""
    resource_guid: str | None = None
    resource_name: str | None = None
    provider_version: str = PROVIDER_VERSION

    # Outcome
    succeeded: bool = False
    duration_seconds: float = 0.0
    error: str | None = None
    error_type: str | None = None

    _started: float = field(default_factory=time.monotonic, repr=False)

    def finish(self, error: BaseException | None = None) -> None:
        """Mark the operation complete, recording the error if any."""
        self.duration_seconds = time.monotonic() - self._started
        if error is None:
            self.succeeded = True
            return
        self.succeeded = False
        self.error = str(error)
        self.error_type = type(error).__name__

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result = asdict(self)
        result.pop("_started")
        result["timestamp"] = self.timestamp.isoformat()
        return result


class ProvenanceLogger:
    """Logs provenance records for audit."""

    def create_provenance(
        self,
        operation: str,
        resource_guid: str | None = None,
        resource_name: str | None = None,
    ) -> OperationProvenance:
        """Create a new provenance record for an operation about to start."""
        return OperationProvenance(
            operation=operation,
            resource_guid=resource_guid,
            resource_name=resource_name,
            provider_version=PROVIDER_VERSION,
        )

    def log_provenance(self, provenance: OperationProvenance) -> None:
        """Log a completed provenance record."""
        log_level = logging.INFO if provenance.succeeded else logging.ERROR
        logger.log(
            log_level,
            "Resource group operation provenance",
            extra={
                "provenance": provenance.to_dict(),
                # Flatten key fields for easier querying
                "operation": provenance.operation,
                "resource_guid": provenance.resource_guid,
                "succeeded": provenance.succeeded,
                "duration_seconds": provenance.duration_seconds,
            },
        )


# Global singleton for provenance logging
_provenance_logger: ProvenanceLogger | None = None


def get_provenance_logger() -> ProvenanceLogger:
    """Get the global provenance logger instance."""
    global _provenance_logger
    if _provenance_logger is None:
        _provenance_logger = ProvenanceLogger()
    return _provenance_logger
