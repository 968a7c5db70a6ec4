# src/api/models.py — v1
"""API-level models: UploadRequest, UploadReceipt."""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from soilsense.core.models import ReportRecord, Season

UPLOAD_ACCEPTED_MESSAGE = (
    "Report uploaded successfully. AI analysis is in progress and will be completed shortly."
)


class UploadValidationError(ValueError):
    """The uploaded file does not meet the upload rules."""


class UploadRequest(BaseModel):
    """A report upload as received from the caller.

    Location fields are trimmed and must be non-empty; the season must be
    one of the cropping seasons.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    owner_id: str = Field(min_length=1)
    file_path: Path
    district: str = Field(min_length=1)
    state: str = Field(min_length=1)
    area: str = Field(min_length=1)
    season: Season

    def check_file(self, allowed_extensions: list[str], max_size_bytes: int) -> None:
        """Check the file type and size.

        Raises:
            UploadValidationError: Disallowed extension, missing file, or
                file larger than max_size_bytes.
        """
        suffix = self.file_path.suffix.lower()
        if suffix not in allowed_extensions:
            raise UploadValidationError(
                f"Invalid file type {suffix or '(none)'}; allowed: {', '.join(allowed_extensions)}"
            )
        try:
            size = self.file_path.stat().st_size
        except OSError as e:
            raise UploadValidationError(f"Cannot read uploaded file: {e}") from e
        if size > max_size_bytes:
            raise UploadValidationError(
                f"File too large: {size} bytes (limit {max_size_bytes})"
            )


class UploadReceipt(BaseModel):
    """Returned immediately after an upload, before analysis completes."""

    message: str = UPLOAD_ACCEPTED_MESSAGE
    report: ReportRecord
