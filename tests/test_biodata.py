import uuid
from datetime import datetime

from guruwali.students.biodata import (
    coerce_is_active,
    derive_social_usage_changes,
    merge_student_data,
    normalize_student_updates,
)


def build_existing_usage(**overrides):
    usage = {
        "id": str(uuid.uuid4()),
        "student_id": "student-1",
        "platform": "Instagram",
        "is_active": 1,
        "username": "siswa123",
        "created_at": datetime.utcnow().isoformat(),
    }
    usage.update(overrides)
    return usage


# ---------------- normalize_student_updates ---------------- #

def test_normalize_trims_strings_parses_numbers_and_drops_unknown_fields():
    student_updates, social_usages = normalize_student_updates({
        "full_name": "  Arya Kusuma  ",
        "father_income": "2500000",
        "mother_income": " ",
        "address": "",
        "phone_number": "+62 81234567890 ",
        "social_usages": [
            {"platform": " Instagram ", "username": "  arya.id  ", "is_active": "true"},
        ],
        "unknown_field": "ignored",
    })

    assert student_updates["full_name"] == "Arya Kusuma"
    assert student_updates["father_income"] == 2500000
    assert student_updates["mother_income"] is None
    assert student_updates["address"] is None
    assert student_updates["phone_number"] == "+62 81234567890"
    assert "unknown_field" not in student_updates

    assert social_usages == [
        {"platform": "Instagram", "username": "arya.id", "is_active": True},
    ]


def test_normalize_omits_absent_fields_and_keeps_explicit_null():
    student_updates, social_usages = normalize_student_updates({
        "dream": None,
        "social_usages": [
            {"id": "usage-1", "platform": "YouTube", "username": "channel-id", "is_active": False},
        ],
    })

    assert "nisn" not in student_updates
    assert "full_name" not in student_updates
    assert student_updates == {"dream": None}
    assert social_usages == [
        {"id": "usage-1", "platform": "YouTube", "username": "channel-id", "is_active": False},
    ]


def test_normalize_numeric_fields():
    student_updates, _ = normalize_student_updates({
        "father_income": 1750000,
        "mother_income": "abc",
    })
    assert student_updates == {"father_income": 1750000, "mother_income": None}

    student_updates, _ = normalize_student_updates({
        "father_income": float("nan"),
        "mother_income": " 1200000.5 ",
    })
    assert student_updates == {"father_income": None, "mother_income": 1200000.5}

    student_updates, _ = normalize_student_updates({"father_income": True})
    assert student_updates == {"father_income": None}


def test_normalize_string_field_with_non_string_value_becomes_null():
    student_updates, _ = normalize_student_updates({"nisn": 12345, "hobby": ["a"]})

    assert student_updates == {"nisn": None, "hobby": None}


def test_normalize_without_social_usages_returns_empty_list():
    _, social_usages = normalize_student_updates({"full_name": "Budi"})
    assert social_usages == []

    _, social_usages = normalize_student_updates({"social_usages": "Instagram"})
    assert social_usages == []

    _, social_usages = normalize_student_updates({"social_usages": ["Instagram", None]})
    assert social_usages == []


def test_normalize_social_usage_keeps_blank_platform_as_null_and_drops_blank_id():
    _, social_usages = normalize_student_updates({
        "social_usages": [
            {"id": "", "platform": "   ", "username": "   "},
        ],
    })

    assert social_usages == [
        {"platform": None, "username": None, "is_active": False},
    ]


def test_coerce_is_active():
    assert coerce_is_active(True) is True
    assert coerce_is_active(False) is False
    assert coerce_is_active("true") is True
    assert coerce_is_active(" true ") is True
    assert coerce_is_active("false") is False
    assert coerce_is_active("TRUE") is False
    assert coerce_is_active(1) is True
    assert coerce_is_active(0) is False
    assert coerce_is_active(None) is False


# ---------------- derive_social_usage_changes ---------------- #

def test_derive_insert_update_and_delete():
    existing = [
        build_existing_usage(id="usage-1", platform="Instagram", username="lama", is_active=1),
        build_existing_usage(id="usage-2", platform="TikTok", username="@tiktok", is_active=0),
    ]
    incoming = [
        {"id": "usage-1", "platform": "Instagram", "username": "baru", "is_active": True},
        {"platform": "YouTube", "username": "channel-baru", "is_active": True},
    ]

    changes = derive_social_usage_changes(existing, incoming)

    assert changes["to_insert"] == [
        {"platform": "YouTube", "username": "channel-baru", "is_active": 1},
    ]
    assert changes["to_update"] == [
        {"id": "usage-1", "platform": "Instagram", "username": "baru", "is_active": 1},
    ]
    assert changes["to_delete"] == ["usage-2"]


def test_derive_no_changes_when_identical():
    existing = [
        build_existing_usage(id="usage-1", platform="Instagram", username="sama", is_active=1),
        build_existing_usage(id="usage-2", platform="TikTok", username=None, is_active=0),
    ]
    incoming = [
        {"id": "usage-1", "platform": "Instagram", "username": "sama", "is_active": True},
        {"id": "usage-2", "platform": "TikTok", "username": None, "is_active": False},
    ]

    changes = derive_social_usage_changes(existing, incoming)

    assert changes == {"to_insert": [], "to_update": [], "to_delete": []}


def test_derive_only_is_active_changed():
    existing = [build_existing_usage(id="usage-1", is_active=0)]
    incoming = [
        {"id": "usage-1", "platform": "Instagram", "username": "siswa123", "is_active": True},
    ]

    changes = derive_social_usage_changes(existing, incoming)

    assert changes["to_update"] == [
        {"id": "usage-1", "platform": "Instagram", "username": "siswa123", "is_active": 1},
    ]


def test_derive_existing_platform_without_id_is_inserted_again():
    existing = [build_existing_usage(id="usage-1", platform="Instagram")]
    incoming = [{"platform": "Instagram", "username": "siswa123", "is_active": True}]

    changes = derive_social_usage_changes(existing, incoming)

    assert changes["to_insert"] == [
        {"platform": "Instagram", "username": "siswa123", "is_active": 1},
    ]
    assert changes["to_delete"] == ["usage-1"]


def test_derive_unknown_or_repeated_id_becomes_insert():
    existing = [build_existing_usage(id="usage-1")]
    incoming = [
        {"id": "usage-1", "platform": "Instagram", "username": "siswa123", "is_active": True},
        {"id": "usage-1", "platform": "Threads", "username": "siswa123", "is_active": True},
        {"id": "stale-id", "platform": "YouTube", "username": None, "is_active": False},
    ]

    changes = derive_social_usage_changes(existing, incoming)

    assert changes["to_update"] == []
    assert changes["to_delete"] == []
    assert changes["to_insert"] == [
        {"platform": "Threads", "username": "siswa123", "is_active": 1},
        {"platform": "YouTube", "username": None, "is_active": 0},
    ]
    assert all("id" not in row for row in changes["to_insert"])


def test_derive_empty_incoming_deletes_everything():
    existing = [
        build_existing_usage(id="usage-1"),
        build_existing_usage(id="usage-2"),
    ]

    changes = derive_social_usage_changes(existing, [])

    assert changes["to_delete"] == ["usage-1", "usage-2"]


def test_derive_accepts_model_like_records():

    class Record:
        def __init__(self, **kwargs):
            self.__dict__.update(kwargs)

    existing = [Record(id="usage-1", platform="Instagram", username="lama", is_active=1)]
    incoming = [{"id": "usage-1", "platform": "Instagram", "username": "lama", "is_active": True}]

    assert derive_social_usage_changes(existing, incoming) == {
        "to_insert": [],
        "to_update": [],
        "to_delete": [],
    }


def test_merge_student_data_overlays_updates():
    merged = merge_student_data(
        {"full_name": "Arya", "hobby": "Membaca", "nisn": "001"},
        {"hobby": None, "classroom": "7A"},
    )

    assert merged == {"full_name": "Arya", "hobby": None, "nisn": "001", "classroom": "7A"}
