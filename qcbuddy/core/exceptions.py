"""
Centralized Exception Hierarchy for QC Buddy.

All custom exceptions inherit from QCBuddyError for easy catching.

Each exception includes:
- error_code: Unique identifier for documentation lookup (e.g., "QC-PROC-001")
- why_it_happened: Explanation of the root cause
- how_to_fix: Actionable steps to resolve the issue

Exception Hierarchy
-------------------
    QCBuddyError (base)
    ├── ProcessingError
    │   ├── ExtractionError
    │   └── ChunkingError
    ├── KnowledgeError
    │   └── CollectionFormatError
    ├── LLMError
    │   ├── RateLimitError
    │   ├── ServiceUnavailableError
    │   ├── ConfigurationError
    │   └── GenerationError
    └── ValidationError

Usage
-----
    from qcbuddy.core.exceptions import ExtractionError

    try:
        sections = extractor.extract(path)
    except ExtractionError as e:
        logger.warning("Skipping document", error=str(e))
"""

import re
from typing import List, Optional


def sanitize_message(message: str) -> str:
    """Mask API keys, tokens and home directories in an error message.

    Args:
        message: Original error message

    Returns:
        Sanitized message with sensitive info replaced
    """
    if not message:
        return message

    patterns = [
        # Google API keys are passed as a query parameter
        (r"(key=)[A-Za-z0-9_\-]{10,}", r"\1<api-key>"),
        (r"AIza[0-9A-Za-z_\-]{20,}", "<api-key>"),
        (r"(GEMINI_KEY|GEMINI_API_KEY|GOOGLE_API_KEY)[=:]\s*[^\s]+", r"\1=<hidden>"),
        (r"Bearer\s+[a-zA-Z0-9_.-]+", "Bearer <token>"),
        (r"/(?:home|Users)/[^/\s]+", "<user-home>"),
    ]

    result = message
    for pattern, replacement in patterns:
        result = re.sub(pattern, replacement, result)
    return result


class QCBuddyError(Exception):
    """
    Base exception for all QC Buddy errors.

    Example
    -------
        try:
            pipeline.run()
        except QCBuddyError as e:
            logger.error(f"Ingestion failed: {e}")
            print(f"Fix: {e.how_to_fix}")
    """

    error_code: str = "QC-ERR-000"
    why_it_happened: str = "An unexpected error occurred"
    how_to_fix: List[str] = ["Check the error message for details"]

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        why_it_happened: Optional[str] = None,
        how_to_fix: Optional[List[str]] = None,
    ) -> None:
        super().__init__(sanitize_message(message))

        if error_code is not None:
            self.error_code = error_code
        if why_it_happened is not None:
            self.why_it_happened = why_it_happened
        if how_to_fix is not None:
            self.how_to_fix = how_to_fix

    @property
    def user_message(self) -> str:
        """Get the user-friendly error message."""
        return str(self)


# ============================================================================
# Processing Exceptions
# ============================================================================


class ProcessingError(QCBuddyError):
    """Base exception for document ingestion errors."""

    error_code = "QC-PROC-000"
    why_it_happened = "Document processing failed at some stage"
    how_to_fix = [
        "Check that the file is not corrupted",
        "Verify the file format is supported (.docx, .pptx, .xlsx)",
    ]


class ExtractionError(ProcessingError):
    """
    Raised when sections cannot be extracted from a raw document.

    The ingestion pipeline catches this per document, logs it and
    continues with the remaining files.
    """

    error_code = "QC-PROC-001"
    why_it_happened = (
        "Could not read the document. The file may be corrupted, "
        "password-protected, or saved in an older binary format"
    )
    how_to_fix = [
        "Check if the file opens correctly in its native application",
        "Re-save legacy .doc/.ppt/.xls files as .docx/.pptx/.xlsx",
    ]


class ChunkingError(ProcessingError):
    """Raised when a section cannot be split into chunks."""

    error_code = "QC-PROC-002"
    why_it_happened = "The chunk size limit is invalid for the section text"
    how_to_fix = ["Use a positive max_chars value in the ingest configuration"]


# ============================================================================
# Knowledge Exceptions
# ============================================================================


class KnowledgeError(QCBuddyError):
    """Base exception for knowledge collection errors."""

    error_code = "QC-KNOW-000"
    why_it_happened = "The knowledge collection could not be loaded"
    how_to_fix = ["Re-run 'qcbuddy ingest' to rebuild the collections"]


class CollectionFormatError(KnowledgeError):
    """Raised when a chunk-collection file is not valid structured data."""

    error_code = "QC-KNOW-001"
    why_it_happened = "The collection file is not valid JSON"
    how_to_fix = [
        "Validate the file with a JSON linter",
        "Regenerate it with 'qcbuddy ingest'",
    ]


# ============================================================================
# LLM Exceptions
# ============================================================================


class LLMError(QCBuddyError):
    """Base exception for generation service errors."""

    error_code = "QC-LLM-000"
    why_it_happened = "The generation service call failed"
    how_to_fix = [
        "Check GEMINI_KEY is set correctly",
        "Verify your internet connection",
        "Set GEMINI_MODE=off to answer from the SOP only",
    ]


class RateLimitError(LLMError):
    """
    Raised when the generation API rate limit is exceeded (HTTP 429).

    Transient: retried with backoff.
    """

    error_code = "QC-LLM-001"
    why_it_happened = "Too many generation requests in a short period"
    how_to_fix = [
        "Wait a minute before retrying",
        "Lower GEMINI_MAX_CALLS_PER_MIN",
    ]

    def __init__(self, message: str, retry_after: Optional[float] = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class ServiceUnavailableError(LLMError):
    """
    Raised on server errors, timeouts and network failures.

    Transient: retried with backoff.
    """

    error_code = "QC-LLM-002"
    why_it_happened = "The generation service is unavailable or timed out"
    how_to_fix = ["Retry later", "Increase llm.timeout_sec in config.yaml"]


class ConfigurationError(LLMError):
    """Raised when the generation client is misconfigured (e.g. no API key)."""

    error_code = "QC-LLM-003"
    why_it_happened = "The API key is missing or the model name is invalid"
    how_to_fix = [
        "Set your API key: export GEMINI_KEY=your-key",
        "Check llm.models in config.yaml",
    ]


class GenerationError(LLMError):
    """
    Raised on terminal generation failures (client errors, empty output).

    Not retried: the caller falls back to the synthesized answer.
    """

    error_code = "QC-LLM-004"
    why_it_happened = "The generation service rejected the request"
    how_to_fix = ["Check the request parameters and API key permissions"]

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


# ============================================================================
# Validation Exceptions
# ============================================================================


class ValidationError(QCBuddyError):
    """Raised when user input or configuration values are invalid."""

    error_code = "QC-VAL-000"
    why_it_happened = "An input value is outside the accepted range"
    how_to_fix = ["Check the command arguments"]
