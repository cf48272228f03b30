"""User-facing alerts produced by the flows.

Flows never print or prompt; they return an Alert and the shell decides how
to show it.
"""

from dataclasses import dataclass

VALIDATION_TITLE = "Validation Error"
ERROR_TITLE = "Error"
SUCCESS_TITLE = "Success"

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred. Please try again."


@dataclass(frozen=True)
class Alert:
    """A short, non-blocking message for the user.

    Attributes:
        title: Alert heading (e.g. "Validation Error")
        message: Body text; may be empty
        is_error: False for confirmations such as "Journal saved successfully"
    """

    title: str
    message: str = ""
    is_error: bool = True

    @classmethod
    def success(cls, message: str, title: str = SUCCESS_TITLE) -> "Alert":
        return cls(title=title, message=message, is_error=False)

    @classmethod
    def unexpected(cls, message: str = UNEXPECTED_ERROR_MESSAGE) -> "Alert":
        return cls(title=ERROR_TITLE, message=message)

    def __str__(self) -> str:
        if self.message:
            return f"[{self.title}] {self.message}"
        return f"[{self.title}]"
