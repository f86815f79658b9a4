"""Input-layer validation for the task creation and edit forms."""

from .config import MIN_NAME_LENGTH
from .exceptions import ValidationError


def validate_task_form(name: str | None, description: str | None = None) -> tuple[str, str]:
    """
    Check submitted form fields before any store mutation.

    The name is required and must have at least ``MIN_NAME_LENGTH``
    characters once surrounding whitespace is trimmed. The description is
    optional free text.

    Args:
        name: Submitted task name
        description: Submitted description, may be empty or None

    Returns:
        Tuple of (name, description) ready to be stored

    Raises:
        ValidationError: If the name is missing or too short
    """
    cleaned_name = (name or "").strip()
    if not cleaned_name:
        raise ValidationError("Task name is required")
    if len(cleaned_name) < MIN_NAME_LENGTH:
        raise ValidationError(
            f"Task name must be at least {MIN_NAME_LENGTH} characters long"
        )

    return cleaned_name, description or ""
