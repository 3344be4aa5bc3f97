from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for the JSON Lines error log.

One record is written per failed run. ``file`` is the primary file name,
``stage`` tells which step failed (LOAD_PRIMARY, LOAD_SECONDARY, SAVE_OUTPUT,
...). Column resolution errors are not logged here; they are reported to the
user directly.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: File name the failing step was working on
        stage: Step that failed, UPPER_SNAKE_CASE
        error_type: Exception class name
        message: Exception message
    """
    timestamp: str
    file: str
    stage: str
    error_type: str
    message: str

    @staticmethod
    def create(file: str, stage: str, error: BaseException) -> ErrorRecord:
        """Create a record for ``error`` stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            stage=stage,
            error_type=type(error).__name__,
            message=str(error),
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
