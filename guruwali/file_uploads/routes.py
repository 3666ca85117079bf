from flask import request, jsonify, current_app, send_file
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
from guruwali.extensions import db
from guruwali.models import Student
from guruwali.students.biodata import normalize_student_updates
from guruwali.students.import_parser import read_import_file, parse_csv_rows
from guruwali.students.routes import validate_student
from guruwali.utils.decorators import login_required
from guruwali.utils.files import (
    allowed_import_file,
    allowed_photo_file,
    blob_exists,
    blob_path,
    delete_blob,
    save_blob,
)
from guruwali.utils.images import normalize_student_photo
from guruwali.utils.queries import get_owned_student, add_social_usages
from . import uploads_bp


def _uploaded_file(field):
    file = request.files.get(field)
    if file is None or file.filename == "":
        return None
    return file


def process_student_import(rows):
    """
    Validate every row, then insert all students and their social usages in a
    single commit. Returns ``(errors, students)``; nothing is written when any
    row has errors.
    """
    normalized_rows = []
    errors = []

    for index, row in enumerate(rows):
        if not isinstance(row, dict):
            errors.append({"row": index + 1, "errors": ["Format baris tidak valid"]})
            continue

        student_updates, social_usages = normalize_student_updates(row)
        row_errors = validate_student(student_updates)

        if row_errors:
            errors.append({"row": index + 1, "errors": row_errors})
            continue

        normalized_rows.append((student_updates, social_usages))

    if errors:
        return errors, []

    current_app.logger.info(
        f"[Import] Inserting {len(normalized_rows)} students for user {current_user.id}"
    )

    students = []

    for student_updates, social_usages in normalized_rows:
        student = Student(user_id=current_user.id, **student_updates)
        db.session.add(student)
        db.session.flush()

        add_social_usages(student.id, [
            {
                "platform": usage["platform"],
                "username": usage["username"],
                "is_active": 1 if usage["is_active"] else 0,
            }
            for usage in social_usages
            if usage["platform"]
        ])

        students.append(student)

    db.session.commit()

    current_app.logger.info(f"[Import] Successfully inserted {len(students)} students")

    return [], students


def _rows_from_request():
    """Rows from a JSON ``students`` array or an uploaded CSV/XLSX file."""
    file = _uploaded_file("file")

    if file is not None:
        if not allowed_import_file(file.filename):
            return None, "File harus berformat CSV atau XLSX"
        try:
            raw_rows = read_import_file(file)
        except (ValueError, UnicodeDecodeError) as e:
            current_app.logger.error(f"Failed to read import file: {str(e)}")
            return None, "File tidak dapat dibaca"
        return parse_csv_rows(raw_rows), None

    body = request.get_json(silent=True)
    if not isinstance(body, dict) or not isinstance(body.get("students"), list):
        return None, "students array is required"

    return body["students"], None


@uploads_bp.route("/import", methods=["POST"])
@login_required
def import_students():
    rows, error = _rows_from_request()

    if error:
        return jsonify({"error": error}), 400

    if not rows:
        return jsonify({"error": "students array cannot be empty"}), 400

    max_rows = current_app.config["MAX_IMPORT_ROWS"]
    if len(rows) > max_rows:
        return jsonify({"error": f"Maximum {max_rows} students per import"}), 400

    # spreadsheet rows carry the parser's own per-cell errors
    parse_errors = [
        {"row": row["row_number"], "errors": list(row["errors"].values())}
        for row in rows
        if isinstance(row, dict) and row.get("errors") and "row_number" in row
    ]
    if parse_errors:
        return jsonify({"error": "Validasi gagal", "details": parse_errors}), 400

    try:
        errors, students = process_student_import(rows)

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"POST /api/students/import failed: {str(e)}")
        return jsonify({"error": "Failed to import students"}), 500

    if errors:
        return jsonify({"error": "Validasi gagal", "details": errors}), 400

    return jsonify({
        "message": "Import siswa berhasil",
        "imported": len(students),
        "failed": 0,
        "errors": [],
        "students": [student.to_dict(with_social_usages=True) for student in students],
    }), 201


@uploads_bp.route("/import/preview", methods=["POST"])
@login_required
def preview_import():
    file = _uploaded_file("file")

    if file is None:
        return jsonify({"error": "File tidak ditemukan"}), 400

    rows, error = _rows_from_request()
    if error:
        return jsonify({"error": error}), 400

    return jsonify({
        "rows": rows,
        "total": len(rows),
        "valid": sum(1 for row in rows if row["is_valid"]),
    })


# ---------------- STUDENT PHOTOS ---------------- #

@uploads_bp.route("/<student_id>/photo", methods=["POST"])
@login_required
def upload_student_photo(student_id):
    student = get_owned_student(student_id, current_user.id)

    if not student:
        return jsonify({"error": "Data siswa tidak ditemukan"}), 404

    file = _uploaded_file("file")
    if file is None:
        return jsonify({"error": "File tidak ditemukan"}), 400

    if not allowed_photo_file(file.filename):
        return jsonify({"error": "File harus berupa PNG atau JPG"}), 400

    data = file.read()
    if len(data) > current_app.config["MAX_PHOTO_SIZE"]:
        return jsonify({"error": "Ukuran file melebihi batas maksimum"}), 413

    try:
        photo = normalize_student_photo(
            data,
            max_width=current_app.config["PHOTO_MAX_WIDTH"]
        )
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    # key derives from the student id only, never from the uploaded filename
    key = save_blob(f"photos/{student.id}.jpg", photo)

    old_key = student.photo_path

    try:
        student.photo_path = key
        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"[StudentPhoto] POST failed: {str(e)}")
        return jsonify({"error": "Upload gagal"}), 500

    if old_key and old_key != key:
        delete_blob(old_key)

    return jsonify({"success": True, "photo_path": key})


@uploads_bp.route("/<student_id>/photo", methods=["GET"])
@login_required
def get_student_photo(student_id):
    student = get_owned_student(student_id, current_user.id)

    if not student:
        return jsonify({"error": "Data siswa tidak ditemukan"}), 404

    if not blob_exists(student.photo_path):
        return jsonify({"error": "Foto siswa belum tersedia"}), 404

    response = send_file(blob_path(student.photo_path), mimetype="image/jpeg")
    response.headers["Cache-Control"] = "private, max-age=60"
    return response


@uploads_bp.route("/<student_id>/photo", methods=["DELETE"])
@login_required
def delete_student_photo(student_id):
    student = get_owned_student(student_id, current_user.id)

    if not student:
        return jsonify({"error": "Data siswa tidak ditemukan"}), 404

    key = student.photo_path

    try:
        student.photo_path = None
        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"[StudentPhoto] DELETE failed: {str(e)}")
        return jsonify({"error": "Gagal menghapus"}), 500

    delete_blob(key)

    return jsonify({"success": True})
