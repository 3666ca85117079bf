"""
Student biodata normalisation and social usage reconciliation.

Both functions are pure: they take loosely typed request data (form posts,
JSON bodies, CSV import rows) and return plain dicts for the routes to write.
Malformed values are dropped or coerced to None instead of raising, so a messy
partial update never fails as a whole; required-field checks belong to the
routes.
"""
import math
from collections.abc import Mapping
from numbers import Real


def _trimmed_string(value):
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed if trimmed else None


def _number(value):
    if isinstance(value, bool):
        return None

    if isinstance(value, Real):
        return value if math.isfinite(value) else None

    if isinstance(value, str):
        trimmed = value.strip()
        if not trimmed:
            return None
        try:
            return int(trimmed)
        except ValueError:
            pass
        try:
            parsed = float(trimmed)
        except ValueError:
            return None
        return parsed if math.isfinite(parsed) else None

    return None


TRIMMED_STRING_FIELDS = (
    "full_name",
    "nis",
    "nisn",
    "classroom",
    "gender",
    "birth_place",
    "birth_date",
    "religion",
    "blood_type",
    "economic_status",
    "address",
    "phone_number",
    "dream",
    "extracurricular",
    "hobby",
    "parent_name",
    "parent_contact",
    "father_name",
    "mother_name",
    "father_job",
    "mother_job",
    "health_history_past",
    "health_history_current",
    "health_history_often",
    "character_strength",
    "character_improvement",
    "special_notes",
)

NUMERIC_FIELDS = (
    "father_income",
    "mother_income",
)

# field name -> normalizer; anything not listed never reaches the database
STUDENT_FIELD_NORMALIZERS = {
    **{field: _trimmed_string for field in TRIMMED_STRING_FIELDS},
    **{field: _number for field in NUMERIC_FIELDS},
}


def coerce_is_active(value):
    """Accept a bool, the strings "true"/"false", or a 0/1 number."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        return value.strip() == "true"
    if isinstance(value, Real):
        return value == 1
    return False


def normalize_social_usage(raw):
    usage = {
        "platform": _trimmed_string(raw.get("platform")),
        "username": _trimmed_string(raw.get("username")),
        "is_active": coerce_is_active(raw.get("is_active")),
    }

    usage_id = raw.get("id")
    # ids are used as dict keys when diffing
    if isinstance(usage_id, (str, int)) and not isinstance(usage_id, bool) and usage_id != "":
        usage["id"] = usage_id

    return usage


def normalize_student_updates(payload):
    """
    Split a raw payload into normalised student columns and social usages.

    Returns ``(student_updates, social_usages)``. Keys absent from the payload
    are absent from ``student_updates``; keys present as None are kept as None
    so the caller clears the column.
    """
    student_updates = {}

    for field, normalizer in STUDENT_FIELD_NORMALIZERS.items():
        if field not in payload:
            continue

        value = payload[field]
        if value is None:
            student_updates[field] = None
        else:
            student_updates[field] = normalizer(value)

    raw_usages = payload.get("social_usages")
    if not isinstance(raw_usages, list):
        raw_usages = []

    social_usages = [
        normalize_social_usage(raw)
        for raw in raw_usages
        if isinstance(raw, Mapping)
    ]

    return student_updates, social_usages


def _field(record, name):
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


def _is_same_social_usage(existing, incoming):
    return (
        _field(existing, "platform") == incoming["platform"]
        and _field(existing, "username") == incoming["username"]
        and bool(_field(existing, "is_active")) == incoming["is_active"]
    )


def _as_row(usage):
    return {
        "platform": usage["platform"],
        "username": usage["username"],
        "is_active": 1 if usage["is_active"] else 0,
    }


def derive_social_usage_changes(existing, incoming):
    """
    Compute the inserts, updates and deletes that turn ``existing`` social
    usage records into ``incoming``.

    Incoming entries are matched to stored records by ``id`` only. An entry
    without an id, with an unknown id, or repeating an id matched earlier is
    an insert, even when its platform is already stored.
    """
    existing_by_id = {}
    for record in existing:
        existing_by_id.setdefault(_field(record, "id"), record)

    to_insert = []
    to_update = []
    matched_ids = set()

    for usage in incoming:
        usage_id = usage.get("id")
        record = existing_by_id.get(usage_id) if usage_id is not None else None

        if record is None or usage_id in matched_ids:
            to_insert.append(_as_row(usage))
            continue

        matched_ids.add(usage_id)

        if not _is_same_social_usage(record, usage):
            to_update.append({"id": usage_id, **_as_row(usage)})

    to_delete = [
        record_id
        for record_id in existing_by_id
        if record_id not in matched_ids
    ]

    return {
        "to_insert": to_insert,
        "to_update": to_update,
        "to_delete": to_delete,
    }


def merge_student_data(existing, updates):
    merged = dict(existing)
    merged.update(updates)
    return merged
