def optional_text(value):
    """Stripped text, None for missing/blank or non-text values."""
    if value is None or isinstance(value, bool):
        return None
    if not isinstance(value, str):
        value = str(value)
    value = value.strip()
    return value or None


def missing_fields(body, fields):
    return [field for field in fields if optional_text(body.get(field)) is None]
