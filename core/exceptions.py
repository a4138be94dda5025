"""Menu Exception Hierarchy

Defines exceptions for menu-level failures with clear classification:
- ConfigurationError: Caller supplied bad frames, pages or pager ids
- InvalidInputError: An activation carried a token we cannot interpret
- StateError: The menu is not in a state that allows the operation
- TransientIOError: The remote message layer failed (not retried)

MessageGoneError is the one remote failure that is NOT an error for us:
deleting a message that no longer exists is treated as success.
"""

# Remote error code for "Unknown Message"
UNKNOWN_MESSAGE_CODE = 10008


class MenuError(Exception):
    """Base class for every error raised by the menu core."""


class ConfigurationError(MenuError, ValueError):
    """Raised when caller-supplied menu data is invalid.

    THROW when:
    - Paging content arrays have mismatched lengths
    - A required content field is missing
    - A pager id is registered twice
    - A pager id is referenced before registration
    """


class InvalidInputError(MenuError, ValueError):
    """Raised when an activation id carries an unrecognized token."""


class StateError(MenuError, RuntimeError):
    """Raised when the menu cannot perform an operation in its current state."""


class TransientIOError(MenuError, RuntimeError):
    """Raised when the remote message layer fails.

    The core never retries. The caller decides what to do.
    """

    def __init__(self, operation: str, message: str):
        super().__init__(message)
        self.operation = operation

    def __str__(self):
        return f"[{self.operation}] {super().__str__()}"


class MessageGoneError(Exception):
    """Raised by message collaborators when the target message no longer exists."""

    code = UNKNOWN_MESSAGE_CODE


def is_message_gone(error: BaseException) -> bool:
    """True if `error` signals that the remote message was already deleted."""
    if isinstance(error, MessageGoneError):
        return True
    return getattr(error, "code", None) == UNKNOWN_MESSAGE_CODE
