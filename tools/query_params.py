from rest_framework.exceptions import ValidationError

TRUE_VALUES = ("1", "true", "yes")


def int_param(params, name: str):
    """
    Reads an optional integer query parameter.

    Returns None when the parameter is missing or empty.

    Raises:
        ValidationError: the value is not an integer (400).
    """

    raw = params.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError:
        raise ValidationError({name: "Must be an integer."})


def bool_param(params, name: str) -> bool:
    return (params.get(name) or "").lower() in TRUE_VALUES
