import re
from datetime import date, datetime
import pandas as pd


MAX_SOCIAL_SLOTS = 3

HEADER_MAP = {
    "full_name": "Nama Lengkap",
    "nis": "NIS",
    "nisn": "NISN",
    "classroom": "Kelas",
    "gender": "Jenis Kelamin",
    "birth_place": "Tempat Lahir",
    "birth_date": "Tanggal Lahir",
    "religion": "Agama",
    "blood_type": "Golongan Darah",
    "economic_status": "Status Ekonomi",
    "address": "Alamat",
    "phone_number": "Nomor HP Siswa",
    "dream": "Cita-cita",
    "extracurricular": "Ekstrakurikuler",
    "hobby": "Hobi",
    "parent_name": "Nama Orang Tua/Wali",
    "parent_contact": "Kontak Orang Tua",
    "father_name": "Nama Ayah",
    "father_job": "Pekerjaan Ayah",
    "father_income": "Penghasilan Ayah",
    "mother_name": "Nama Ibu",
    "mother_job": "Pekerjaan Ibu",
    "mother_income": "Penghasilan Ibu",
    "health_history_past": "Riwayat Kesehatan (Dulu)",
    "health_history_current": "Riwayat Kesehatan (Sekarang)",
    "health_history_often": "Riwayat Kesehatan (Sering)",
    "character_strength": "Kekuatan Karakter",
    "character_improvement": "Perlu Peningkatan Karakter",
    "special_notes": "Catatan Khusus",
}

# kept in the template for compatibility with older school spreadsheets
PLACEHOLDER_HEADERS = (
    "Alamat Email Siswa",
    "Nomor HP Alternatif",
)

SOCIAL_HEADERS = tuple(
    f"Sosial {slot} {part}"
    for slot in range(1, MAX_SOCIAL_SLOTS + 1)
    for part in ("Platform", "Username", "Status")
)

STUDENT_IMPORT_HEADERS = (
    list(HEADER_MAP.values())
    + list(PLACEHOLDER_HEADERS)
    + list(SOCIAL_HEADERS)
)

ACTIVE_STATUSES = {"aktif", "ya", "true", "1"}

INCOME_FIELDS = {
    "father_income": "Penghasilan ayah harus berupa angka",
    "mother_income": "Penghasilan ibu harus berupa angka",
}


def read_import_file(file_storage):
    """Read an uploaded CSV/XLSX into a list of header -> cell dicts."""
    filename = file_storage.filename.lower()

    if filename.endswith(".csv"):
        df = pd.read_csv(file_storage.stream, dtype=str, keep_default_na=False)
    else:
        df = pd.read_excel(file_storage.stream, dtype=str, engine="openpyxl")
        df = df.fillna("")

    df.columns = df.columns.str.strip()

    return df.to_dict(orient="records")


def to_trimmed_string(value):
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed or trimmed == "-":
        return None
    return trimmed


def to_gender(value):
    trimmed = to_trimmed_string(value)
    if not trimmed:
        return None

    upper = trimmed.upper()
    if upper in ("L", "LAKI-LAKI"):
        return "L"
    if upper in ("P", "PEREMPUAN"):
        return "P"
    return None


def to_integer(value):
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        if pd.isna(value):
            return None
        return int(value)
    if isinstance(value, str):
        digits = re.sub(r"[^0-9-]", "", value).strip()
        if not digits or digits == "-":
            return None
        try:
            return int(digits)
        except ValueError:
            return None
    return None


def to_date_string(value):
    # typed Excel date cells
    if isinstance(value, (date, datetime)):
        return value.strftime("%Y-%m-%d")

    trimmed = to_trimmed_string(value)
    if not trimmed:
        return None

    # read_excel(dtype=str) renders date cells as "YYYY-MM-DD 00:00:00"
    iso_match = re.fullmatch(r"(\d{4}-\d{2}-\d{2})(?:[ T]\d{2}:\d{2}:\d{2})?", trimmed)

    if iso_match:
        iso = iso_match.group(1)
    else:
        match = re.fullmatch(r"(\d{1,2})[/-](\d{1,2})[/-](\d{4})", trimmed)
        if not match:
            return None
        day, month, year = match.groups()
        iso = f"{year}-{int(month):02d}-{int(day):02d}"

    try:
        datetime.strptime(iso, "%Y-%m-%d")
    except ValueError:
        return None

    return iso


def parse_social_slots(row):
    usages = []

    for slot in range(1, MAX_SOCIAL_SLOTS + 1):
        platform = to_trimmed_string(row.get(f"Sosial {slot} Platform"))
        username = to_trimmed_string(row.get(f"Sosial {slot} Username"))
        status = to_trimmed_string(row.get(f"Sosial {slot} Status"))

        usages.append({
            "platform": platform,
            "username": username if platform else None,
            "is_active": bool(
                platform and status and status.lower() in ACTIVE_STATUSES
            ),
        })

    return usages


def parse_csv_rows(rows):
    """
    Parse raw spreadsheet rows keyed by the Indonesian headers.

    Every row comes back with ``row_number`` (the spreadsheet line, header is
    line 1), ``is_valid`` and an ``errors`` dict of field -> message.
    """
    parsed = []

    for index, row in enumerate(rows):
        student = {}

        for field, header in HEADER_MAP.items():
            raw = row.get(header)
            if field == "gender":
                student[field] = to_gender(raw)
            elif field == "birth_date":
                student[field] = to_date_string(raw)
            elif field in INCOME_FIELDS:
                student[field] = to_integer(raw)
            else:
                student[field] = to_trimmed_string(raw)

        student["full_name"] = student["full_name"] or ""
        student["social_usages"] = parse_social_slots(row)

        errors = {}

        if not student["full_name"]:
            errors["full_name"] = "Nama lengkap wajib diisi"

        if to_trimmed_string(row.get(HEADER_MAP["gender"])) and not student["gender"]:
            errors["gender"] = "Jenis kelamin harus 'L' atau 'P'"

        if to_trimmed_string(row.get(HEADER_MAP["birth_date"])) and not student["birth_date"]:
            errors["birth_date"] = "Format tanggal tidak valid (YYYY-MM-DD)"

        for field, message in INCOME_FIELDS.items():
            if to_trimmed_string(row.get(HEADER_MAP[field])) and student[field] is None:
                errors[field] = message

        student["row_number"] = index + 2
        student["is_valid"] = not errors
        student["errors"] = errors

        parsed.append(student)

    return parsed
