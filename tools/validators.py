import re

from django.core.exceptions import ValidationError

HEX_COLOR_RE = re.compile(r'^#([A-Fa-f0-9]{6}|[A-Fa-f0-9]{3})$')
PROJECT_KEY_RE = re.compile(r'^[A-Za-z][A-Za-z0-9]{0,9}$')


def validate_hex_color(value: str) -> None:
    """
    Validates that the given string is a proper HEX color code.

    Accepts:
        - 3-digit (e.g. "#fff")
        - 6-digit (e.g. "#ffffff")

    Args:
        value (str): The value to validate.

    Raises:
        ValidationError: If the value is not a valid HEX color.
    """

    if not HEX_COLOR_RE.match(value or ""):
        raise ValidationError(
            "Invalid HEX color code. Example: #fff or #ffffff.",
            code="invalid_hex"
        )


def validate_project_key(value: str) -> None:
    """
    A project key is a short tag shown next to task titles (e.g. "WEB", "OPS2").

    It must start with a letter and contain only letters and digits, 10 characters max.
    """

    if not PROJECT_KEY_RE.match(value or ""):
        raise ValidationError(
            "Project key must start with a letter and contain only letters and digits.",
            code="invalid_project_key"
        )
