from datetime import date, datetime

from guruwali.students.import_parser import (
    HEADER_MAP,
    STUDENT_IMPORT_HEADERS,
    parse_csv_rows,
    to_date_string,
    to_gender,
    to_integer,
)


def build_row(**cells):
    row = {header: "" for header in STUDENT_IMPORT_HEADERS}
    row.update(cells)
    return row


def test_parse_valid_row():
    rows = parse_csv_rows([build_row(**{
        HEADER_MAP["full_name"]: " Budi Santoso ",
        HEADER_MAP["gender"]: "l",
        HEADER_MAP["birth_date"]: "12/8/2010",
        HEADER_MAP["father_income"]: "2.500.000",
        HEADER_MAP["mother_income"]: "-",
        HEADER_MAP["classroom"]: "7A",
        "Sosial 1 Platform": "Instagram",
        "Sosial 1 Username": "budi.ig",
        "Sosial 1 Status": "Aktif",
    })])

    assert len(rows) == 1
    row = rows[0]

    assert row["is_valid"] is True
    assert row["errors"] == {}
    assert row["row_number"] == 2
    assert row["full_name"] == "Budi Santoso"
    assert row["gender"] == "L"
    assert row["birth_date"] == "2010-08-12"
    assert row["father_income"] == 2500000
    assert row["mother_income"] is None
    assert row["classroom"] == "7A"
    assert row["nisn"] is None

    assert row["social_usages"][0] == {
        "platform": "Instagram",
        "username": "budi.ig",
        "is_active": True,
    }
    assert row["social_usages"][1] == {
        "platform": None,
        "username": None,
        "is_active": False,
    }


def test_parse_invalid_row_collects_every_error():
    rows = parse_csv_rows([
        build_row(**{HEADER_MAP["full_name"]: "Valid"}),
        build_row(**{
            HEADER_MAP["full_name"]: "  ",
            HEADER_MAP["gender"]: "X",
            HEADER_MAP["birth_date"]: "31/02/2010",
            HEADER_MAP["father_income"]: "banyak",
        }),
    ])

    row = rows[1]

    assert row["row_number"] == 3
    assert row["is_valid"] is False
    assert row["full_name"] == ""
    assert row["errors"] == {
        "full_name": "Nama lengkap wajib diisi",
        "gender": "Jenis kelamin harus 'L' atau 'P'",
        "birth_date": "Format tanggal tidak valid (YYYY-MM-DD)",
        "father_income": "Penghasilan ayah harus berupa angka",
    }


def test_social_username_without_platform_is_dropped():
    rows = parse_csv_rows([build_row(**{
        HEADER_MAP["full_name"]: "Siti",
        "Sosial 2 Username": "tanpa.platform",
        "Sosial 2 Status": "aktif",
    })])

    assert rows[0]["social_usages"][1] == {
        "platform": None,
        "username": None,
        "is_active": False,
    }


def test_value_converters():
    assert to_gender("Perempuan") == "P"
    assert to_gender("laki-laki") == "L"
    assert to_gender("W") is None

    assert to_integer("Rp 1.750.000") == 1750000
    assert to_integer("") is None
    assert to_integer(True) is None

    assert to_date_string("2010-08-12") == "2010-08-12"
    assert to_date_string("1-2-2011") == "2011-02-01"
    assert to_date_string("2010/08/12") is None
    assert to_date_string("2010-13-01") is None


def test_excel_date_cells_become_iso_dates():
    assert to_date_string(datetime(2010, 8, 12)) == "2010-08-12"
    assert to_date_string(date(2011, 2, 1)) == "2011-02-01"
    # read_excel(dtype=str) output for a date cell
    assert to_date_string("2010-08-12 00:00:00") == "2010-08-12"
    assert to_date_string("2010-02-31 00:00:00") is None
