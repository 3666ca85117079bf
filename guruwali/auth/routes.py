from flask import request, jsonify, current_app
from flask_login import login_user, logout_user, current_user
from sqlalchemy.exc import SQLAlchemyError
from guruwali.extensions import db
from guruwali.models.user import User, SchoolProfile
from guruwali.utils.decorators import login_required, json_body_required
from guruwali.utils.session import current_session
from . import auth_bp
from . import loaders  # noqa: F401

EDUCATION_STAGES = ("SD", "SMP", "SMA", "SMK")


@auth_bp.route("/login", methods=["POST"])
@json_body_required
def login():
    body = request.get_json()

    email = body.get("email") or ""
    password = body.get("password") or ""

    if not isinstance(email, str) or not isinstance(password, str):
        return jsonify({"error": "Email dan password harus berupa teks"}), 400

    email = email.strip().lower()

    if not email or not password:
        return jsonify({"error": "Email dan password harus diisi"}), 400

    user = User.query.filter(db.func.lower(User.email) == email).first()

    if not user or not user.check_password(password):
        current_app.logger.info(f"Failed login attempt for {email}")
        return jsonify({"error": "Email atau password salah"}), 401

    login_user(user, remember=True)

    return jsonify({
        "success": True,
        "user": current_session(),
    })


@auth_bp.route("/logout", methods=["POST"])
def logout():
    logout_user()
    return jsonify({"success": True})


@auth_bp.route("/me")
@login_required
def me():
    return jsonify({"user": current_session()})


@auth_bp.route("/setup", methods=["POST"])
@login_required
@json_body_required
def setup():
    """First-run wizard: teacher identity and school data."""
    body = request.get_json()

    required = ("school_name", "education_stage", "city_district", "full_name", "nip_nuptk")
    values = {key: str(body.get(key) or "").strip() for key in required}

    if not all(values.values()):
        return jsonify({"error": "Semua field harus diisi"}), 400

    if values["education_stage"] not in EDUCATION_STAGES:
        return jsonify({"error": "Jenjang pendidikan tidak valid"}), 400

    try:
        current_user.full_name = values["full_name"]
        current_user.nip_nuptk = values["nip_nuptk"]

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
        current_app.logger.error(f"Database error during setup: {str(e)}")
        return jsonify({"error": "Terjadi kesalahan saat menyimpan data"}), 500

    return jsonify({
        "success": True,
        "message": "Setup berhasil disimpan",
    })
