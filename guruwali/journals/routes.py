from flask import request, jsonify, current_app
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
from guruwali.extensions import db
from guruwali.models import Student, MonthlyJournal
from guruwali.models.records import JOURNAL_ASPECT_FIELDS
from guruwali.utils.decorators import login_required, json_body_required
from guruwali.utils.payloads import optional_text, missing_fields
from guruwali.utils.queries import get_owned_student
from . import journals_bp


@journals_bp.route("", methods=["POST"])
@login_required
@json_body_required
def create_journal():
    body = request.get_json()

    missing = missing_fields(body, ("student_id", "monitoring_period"))
    if missing:
        return jsonify({"error": f"{missing[0]} is required"}), 400

    student = get_owned_student(body["student_id"], current_user.id)
    if not student:
        return jsonify({"error": "Student not found"}), 404

    journal = MonthlyJournal(
        student_id=student.id,
        monitoring_period=optional_text(body["monitoring_period"]),
        **{field: optional_text(body.get(field)) for field in JOURNAL_ASPECT_FIELDS}
    )

    try:
        db.session.add(journal)
        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Create journal error: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500

    return jsonify({"success": True, "journal": journal.to_dict()}), 201


@journals_bp.route("", methods=["GET"])
@login_required
def list_journals():
    student_id = request.args.get("student_id")

    query = MonthlyJournal.query.join(
        Student, MonthlyJournal.student_id == Student.id
    ).filter(
        Student.user_id == current_user.id
    )

    if student_id:
        query = query.filter(MonthlyJournal.student_id == student_id)

    journals = query.order_by(MonthlyJournal.created_at.desc()).all()

    return jsonify({
        "success": True,
        "journals": [journal.to_dict() for journal in journals],
    })
