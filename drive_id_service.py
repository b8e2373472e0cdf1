from typing import Any, Dict, List, Optional, Pattern, Tuple
from pydantic import BaseModel, ConfigDict, Field, model_validator

from utils import extract_google_drive_file_id

NOT_A_STRING_MESSAGE = "Input is not a string."
NOT_FOUND_MESSAGE = "No Google Drive ID found."
INVALID_BODY_MESSAGE = 'Invalid request body. Expecting { "url": "..." } or { "urls": ["...", ...] }'
EMPTY_BODY_MESSAGE = "Request body is missing or empty."


class InvalidRequestError(ValueError):
    """Raised when a body carries neither a `urls` list nor a `url` string."""


# --- Extraction Result ---
class ExtractionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    input: Any = Field(default=None, serialization_alias="url")
    identifier: Optional[str] = Field(default=None, serialization_alias="googleDriveID")
    succeeded: bool = Field(serialization_alias="success")
    error_message: Optional[str] = Field(default=None, serialization_alias="error")

    @model_validator(mode="after")
    def check_outcome_consistency(self) -> "ExtractionResult":
        if self.succeeded != bool(self.identifier):
            raise ValueError("succeeded must be true exactly when an identifier is present")
        if self.succeeded == (self.error_message is not None):
            raise ValueError("error_message must be present exactly when extraction failed")
        return self

    @classmethod
    def from_input(cls, index: int, value: Any, pattern: Optional[Pattern[str]] = None) -> "ExtractionResult":
        identifier = extract_google_drive_file_id(value, pattern)
        if identifier:
            return cls(index=index, input=value, identifier=identifier, succeeded=True)
        error_message = NOT_FOUND_MESSAGE if isinstance(value, str) else NOT_A_STRING_MESSAGE
        return cls(index=index, input=value, succeeded=False, error_message=error_message)

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


# --- Batch Summary ---
class BatchSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    results: List[ExtractionResult] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def succeeded(self) -> int:
        return sum(1 for result in self.results if result.succeeded)

    @property
    def failed(self) -> int:
        return self.total - self.succeeded

    def to_response(self) -> Dict[str, Any]:
        return {
            "status": "success",
            "results": [result.to_response() for result in self.results],
            "meta": {
                "total": self.total,
                "succeeded": self.succeeded,
                "failed": self.failed,
            },
        }


def resolve_request_mode(body: Any) -> Tuple[str, Any]:
    """Works out whether a parsed body is a batch or a single-URL request.

    `urls` wins over `url` when both are present. Returns ("batch", list) or
    ("single", str); anything else raises InvalidRequestError.
    """
    if body is None:
        raise InvalidRequestError(EMPTY_BODY_MESSAGE)
    if not isinstance(body, dict):
        raise InvalidRequestError(INVALID_BODY_MESSAGE)

    urls = body.get("urls")
    if isinstance(urls, list):
        return "batch", urls

    url = body.get("url")
    if isinstance(url, str):
        return "single", url

    raise InvalidRequestError(INVALID_BODY_MESSAGE)


def run_single_extraction(url: str, pattern: Optional[Pattern[str]] = None) -> Optional[str]:
    return extract_google_drive_file_id(url, pattern)


def run_batch_extraction(urls: List[Any], pattern: Optional[Pattern[str]] = None) -> BatchSummary:
    """Classifies every element of `urls`, preserving input order."""
    results = [ExtractionResult.from_input(index, value, pattern) for index, value in enumerate(urls)]
    summary = BatchSummary(results=results)
    print(f"[DRIVE_ID] Batch processed: total={summary.total}, succeeded={summary.succeeded}, failed={summary.failed}")
    return summary
