from flask import request, jsonify, current_app
from flask_login import current_user
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from guruwali.extensions import db
from guruwali.models import Student
from guruwali.students.biodata import (
    normalize_student_updates,
    derive_social_usage_changes,
    merge_student_data,
)
from guruwali.utils.decorators import login_required, json_body_required
from guruwali.utils.files import delete_blob
from guruwali.utils.queries import (
    get_owned_student,
    add_social_usages,
    apply_social_usage_changes,
)
from . import students_bp

GENDERS = ("L", "P")
DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 200


def validate_student(data):
    """Errors for a merged student record (after normalisation)."""
    errors = []

    if not data.get("full_name"):
        errors.append("Nama lengkap wajib diisi")

    gender = data.get("gender")
    if gender and gender not in GENDERS:
        errors.append("Jenis kelamin harus 'L' atau 'P'")

    return errors


def validate_social_usages(social_usages):
    if any(not usage["platform"] for usage in social_usages):
        return ["Platform media sosial wajib diisi"]
    return []


def _int_arg(name, default):
    try:
        return int(request.args.get(name, default))
    except (TypeError, ValueError):
        return default


@students_bp.route("", methods=["GET"])
@login_required
def list_students():
    search = request.args.get("search", "").strip()
    limit = min(max(_int_arg("limit", DEFAULT_PAGE_SIZE), 1), MAX_PAGE_SIZE)
    offset = max(_int_arg("offset", 0), 0)

    query = Student.query.filter(Student.user_id == current_user.id)

    if search:
        pattern = f"%{search}%"
        query = query.filter(or_(
            Student.full_name.ilike(pattern),
            Student.nisn.ilike(pattern),
            Student.classroom.ilike(pattern)
        ))

    total = query.count()
    students = query.order_by(
        Student.full_name
    ).offset(offset).limit(limit).all()

    return jsonify({
        "students": [student.to_dict() for student in students],
        "pagination": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "has_more": offset + len(students) < total,
        },
    })


@students_bp.route("", methods=["POST"])
@login_required
@json_body_required
def create_student():
    student_updates, social_usages = normalize_student_updates(request.get_json())

    errors = validate_student(student_updates) + validate_social_usages(social_usages)
    if errors:
        return jsonify({"error": errors[0], "details": errors}), 400

    try:
        student = Student(user_id=current_user.id, **student_updates)
        db.session.add(student)
        db.session.flush()

        add_social_usages(student.id, derive_social_usage_changes([], social_usages)["to_insert"])

        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"POST /api/students failed: {str(e)}")
        return jsonify({"error": "Failed to create student"}), 500

    return jsonify({
        "student": student.to_dict(with_social_usages=True),
        "message": "Student created successfully",
    }), 201


@students_bp.route("/<student_id>", methods=["GET"])
@login_required
def get_student(student_id):
    student = get_owned_student(student_id, current_user.id)

    if not student:
        return jsonify({"error": "Student not found"}), 404

    return jsonify({"student": student.to_dict(with_social_usages=True)})


@students_bp.route("/<student_id>", methods=["PUT", "PATCH"])
@login_required
@json_body_required
def update_student(student_id):
    student = get_owned_student(student_id, current_user.id)

    if not student:
        return jsonify({"error": "Student not found"}), 404

    payload = request.get_json()
    student_updates, social_usages = normalize_student_updates(payload)

    errors = validate_student(merge_student_data(student.to_dict(), student_updates))
    # a body without the key leaves the stored social usages alone
    sync_social_usages = "social_usages" in payload
    if sync_social_usages:
        errors += validate_social_usages(social_usages)

    if errors:
        return jsonify({"error": errors[0], "details": errors}), 400

    try:
        for field, value in student_updates.items():
            setattr(student, field, value)

        if sync_social_usages:
            changes = derive_social_usage_changes(student.social_usages, social_usages)
            apply_social_usage_changes(student.id, changes)

        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"PUT /api/students/{student_id} failed: {str(e)}")
        return jsonify({"error": "Failed to update student"}), 500

    db.session.refresh(student)

    return jsonify({
        "student": student.to_dict(with_social_usages=True),
        "message": "Student updated successfully",
    })


@students_bp.route("/<student_id>", methods=["DELETE"])
@login_required
def delete_student(student_id):
    student = get_owned_student(student_id, current_user.id)

    if not student:
        return jsonify({"error": "Student not found"}), 404

    photo_path = student.photo_path

    try:
        db.session.delete(student)
        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"DELETE /api/students/{student_id} failed: {str(e)}")
        return jsonify({"error": "Failed to delete student"}), 500

    delete_blob(photo_path)

    return jsonify({"message": "Student deleted successfully"})
