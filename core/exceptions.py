"""
Custom exceptions for the player feed pipeline with structured error context.

Each exception carries context information for debugging and for the
ETL run audit trail.

Exception Hierarchy:
    ETLException (base)
    ├── ExtractionError
    │   └── FeedReadError
    ├── TransformationError
    │   └── FeedParseError
    ├── LoadError
    │   ├── StoreResetError
    │   └── RowInsertError
    └── PlayerNotFoundError

Fatal for a run: FeedReadError, FeedParseError, StoreResetError.
RowInsertError is collected and reported; the run continues.
PlayerNotFoundError is the lookup's normal "absent" outcome.
"""

from typing import Optional, Dict, Any
from datetime import datetime


class ETLException(Exception):
    """
    Base exception for all pipeline errors.

    Attributes:
        message: Human-readable error message
        context: Additional context information (source, fideid, etc.)
        original_exception: The original exception that was caught (if any)
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception
        self.timestamp = datetime.utcnow()

        # Add timestamp to context
        self.context["error_timestamp"] = self.timestamp.isoformat()

        # Chain original exception if provided
        super().__init__(message)
        if original_exception:
            self.__cause__ = original_exception

    def __str__(self) -> str:
        """Format error message with context."""
        base_msg = f"{self.__class__.__name__}: {self.message}"

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/storage."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
            "timestamp": self.timestamp.isoformat(),
            "original_error": str(self.original_exception) if self.original_exception else None
        }


# ============================================================================
# Extraction Errors
# ============================================================================

class ExtractionError(ETLException):
    """Base exception for feed acquisition failures."""
    pass


class FeedReadError(ExtractionError):
    """
    Raised when the feed content cannot be read.

    Context should include:
        - source: Path or URL of the feed
        - status_code: HTTP status code (for URL sources)
    """
    pass


# ============================================================================
# Transformation Errors
# ============================================================================

class TransformationError(ETLException):
    """Base exception for feed decoding failures."""
    pass


class FeedParseError(TransformationError):
    """
    Raised when the feed is not a well-formed player list.

    Context should include:
        - element: Element or field that failed (if applicable)
        - player_index: Position of the offending <player> in the feed
        - fideid: Raw identifier of the offending player (if known)
    """
    pass


# ============================================================================
# Load Errors
# ============================================================================

class LoadError(ETLException):
    """Base exception for store write failures."""
    pass


class StoreResetError(LoadError):
    """
    Raised when the player table cannot be emptied or compacted.

    Context should include:
        - operation: DELETE or VACUUM
        - table_name: Name of the table
    """
    pass


class RowInsertError(LoadError):
    """
    A single player row could not be inserted.

    Not raised by the bulk loader; collected and reported per row.
    """

    def __init__(
        self,
        fideid: int,
        message: str = "Failed to insert player row",
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None
    ):
        self.fideid = fideid
        context = dict(context or {})
        context.setdefault("fideid", fideid)
        super().__init__(message, context, original_exception)


# ============================================================================
# Lookup
# ============================================================================

class PlayerNotFoundError(ETLException):
    """No player row matches the requested identifier."""

    def __init__(
        self,
        player_id: Any,
        message: str = "Resource not found.",
        context: Optional[Dict[str, Any]] = None
    ):
        self.player_id = player_id
        context = dict(context or {})
        context.setdefault("player_id", player_id)
        super().__init__(message, context)
