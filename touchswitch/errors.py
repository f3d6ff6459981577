"""
Error types for touchswitch.

The gesture/layout core never raises across its public methods; these errors
cover the collaborators around it (configuration files and Sway IPC).
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for touchswitch.

    Custom codes (1000-1999):
    - 1100-1199: Configuration errors
    - 1400-1499: Sway IPC errors
    """

    # Configuration errors (1100-1199)
    CONFIG_LOAD_FAILED = 1100
    CONFIG_INVALID = 1101

    # Sway IPC errors (1400-1499)
    SWAY_NOT_RUNNING = 1400
    SWAY_IPC_FAILED = 1401


class TouchswitchError(Exception):
    """Base exception for touchswitch errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize touchswitch error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for logging or IPC replies.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class ConfigLoadError(TouchswitchError):
    """Options file could not be read or validated."""

    def __init__(self, file_path: str, reason: str, code: ErrorCode = ErrorCode.CONFIG_LOAD_FAILED):
        """
        Initialize configuration load error.

        Args:
            file_path: Path to configuration file
            reason: Reason for load failure
            code: CONFIG_LOAD_FAILED for unreadable files, CONFIG_INVALID for bad values
        """
        super().__init__(
            code=code,
            message=f"Failed to load configuration from {file_path}: {reason}",
            suggestion="Check file syntax and option values",
            context={"file_path": file_path, "reason": reason}
        )


class SwayIPCError(TouchswitchError):
    """Sway IPC communication error."""

    def __init__(self, operation: str, reason: str, code: ErrorCode = ErrorCode.SWAY_IPC_FAILED):
        """
        Initialize Sway IPC error.

        Args:
            operation: IPC operation that failed
            reason: Reason for failure
            code: SWAY_NOT_RUNNING when no connection exists
        """
        super().__init__(
            code=code,
            message=f"Sway IPC {operation} failed: {reason}",
            suggestion="Ensure Sway is running and IPC socket is accessible",
            context={"operation": operation, "reason": reason}
        )
