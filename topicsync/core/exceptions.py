"""Custom exceptions for TopicSync."""

from typing import Any, Optional


class TopicSyncError(Exception):
    """Base exception for TopicSync."""

    def __init__(
        self,
        message: str,
        code: str = "TOPICSYNC_ERROR",
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}


class WebhookAuthenticationError(TopicSyncError):
    """Raised when an inbound Discourse webhook fails verification."""

    def __init__(self, reason: str = "signature mismatch") -> None:
        super().__init__(
            message="Unable to process Discourse webhook.",
            code="discourse_webhook_error",
            details={"reason": reason},
        )


class HookError(TopicSyncError):
    """Raised when a registered hook callback fails."""

    def __init__(self, hook: str, reason: str) -> None:
        super().__init__(
            message=f"Hook '{hook}' failed: {reason}",
            code="HOOK_ERROR",
            details={"hook": hook, "reason": reason},
        )
