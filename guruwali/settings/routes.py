from datetime import datetime
from flask import request, jsonify, current_app
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
from guruwali.auth.routes import EDUCATION_STAGES
from guruwali.extensions import db
from guruwali.models import Student, SchoolProfile
from guruwali.utils.decorators import login_required, json_body_required
from guruwali.utils.files import delete_blob
from guruwali.utils.payloads import optional_text
from guruwali.utils.queries import get_record_counts
from . import settings_bp

RESET_CONFIRMATION = "RESET_ALL_DATA"
MIN_PASSWORD_LENGTH = 8

REQUIRED_SETTINGS = {
    "full_name": "Nama lengkap harus diisi",
    "school_name": "Nama sekolah harus diisi",
    "education_stage": "Jenjang pendidikan harus diisi",
    "city_district": "Kota/Kabupaten harus diisi",
}


@settings_bp.route("/settings", methods=["GET"])
@login_required
def get_settings():
    profile = current_user.school_profile

    return jsonify({
        "email": current_user.email,
        "full_name": current_user.full_name,
        "nip_nuptk": current_user.nip_nuptk or "",
        "school_name": profile.school_name if profile else "",
        "education_stage": profile.education_stage if profile else "",
        "city_district": profile.city_district if profile else "",
    })


@settings_bp.route("/settings", methods=["PUT"])
@login_required
@json_body_required
def update_settings():
    body = request.get_json()

    values = {field: optional_text(body.get(field)) for field in REQUIRED_SETTINGS}
    for field, message in REQUIRED_SETTINGS.items():
        if values[field] is None:
            return jsonify({"error": message}), 400

    if values["education_stage"] not in EDUCATION_STAGES:
        return jsonify({"error": "Jenjang pendidikan tidak valid"}), 400

    current_password = body.get("current_password")
    new_password = body.get("new_password")

    for value in (current_password, new_password):
        if value is not None and not isinstance(value, str):
            return jsonify({"error": "Password harus berupa teks"}), 400

    if current_password and new_password:
        if not current_user.check_password(current_password):
            return jsonify({"error": "Password lama tidak sesuai"}), 400
        if len(new_password) < MIN_PASSWORD_LENGTH:
            return jsonify({"error": f"Password baru minimal {MIN_PASSWORD_LENGTH} karakter"}), 400

    try:
        current_user.full_name = values["full_name"]
        current_user.nip_nuptk = optional_text(body.get("nip_nuptk"))

        if current_password and new_password:
            current_user.set_password(new_password)

        profile = current_user.school_profile
        if profile is None:
            profile = SchoolProfile(user_id=current_user.id)
            db.session.add(profile)

        profile.school_name = values["school_name"]
        profile.education_stage = values["education_stage"]
        profile.city_district = values["city_district"]

        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"[Settings] Database error: {str(e)}")
        return jsonify({"error": "Failed to update settings"}), 500

    return jsonify({"success": True})


@settings_bp.route("/profile/check", methods=["GET"])
@login_required
def check_profile():
    profile = current_user.school_profile

    complete = bool(
        current_user.full_name
        and current_user.nip_nuptk
        and profile is not None
    )

    return jsonify({"complete": complete})


@settings_bp.route("/settings/reset", methods=["POST"])
@login_required
@json_body_required
def reset_data():
    """Delete every student of the current user with all their records."""
    body = request.get_json()

    if body.get("confirm") != RESET_CONFIRMATION:
        return jsonify({
            "error": f"Konfirmasi diperlukan: kirim confirm='{RESET_CONFIRMATION}'"
        }), 400

    students = Student.query.filter_by(user_id=current_user.id).all()
    photo_paths = [student.photo_path for student in students if student.photo_path]

    try:
        for student in students:
            db.session.delete(student)
        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"[Reset] Database error: {str(e)}")
        return jsonify({"error": "Failed to reset data"}), 500

    for path in photo_paths:
        delete_blob(path)

    current_app.logger.warning(
        f"[Reset] Deleted {len(students)} students for user {current_user.id}"
    )

    return jsonify({"success": True, "deleted_students": len(students)})


@settings_bp.route("/settings/reset", methods=["GET"])
@login_required
def reset_preview():
    """Record counts that a reset would delete."""
    try:
        counts = get_record_counts(current_user.id)

    except SQLAlchemyError as e:
        current_app.logger.error(f"[Reset] Database error: {str(e)}")
        return jsonify({"error": "Terjadi kesalahan saat mengambil data"}), 500

    return jsonify({
        "success": True,
        "counts": counts,
        "timestamp": datetime.utcnow().isoformat(),
    })
