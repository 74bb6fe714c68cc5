"""Chat connection error hierarchy.

All exceptions carry an optional ``operation_type`` describing which transport
operation failed (``connect``, ``send``, ``receive``) for log context.
"""


class ChatError(Exception):
    """Base exception for all chat transport errors.

    Args:
        message (str): Error message.
        operation_type (str | None): Optional operation type (e.g., 'connect', 'send').

    Example:
        >>> raise ChatError("Generic error", operation_type="connect")
    """

    def __init__(self, message: str, operation_type: str | None = None) -> None:
        super().__init__(message)
        self.operation_type = operation_type


class ChatConnectionError(ChatError):
    """Raised when the WebSocket cannot be opened, written to or read from.

    Covers open failures, abnormal closure and send failures. The lifecycle
    manager treats every instance as a transient transport fault.

    Example:
        >>> raise ChatConnectionError("WebSocket closed", operation_type="receive")
    """

    pass
