from flask import request, jsonify, current_app
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
from guruwali.extensions import db
from guruwali.models import Student, MeetingLog
from guruwali.utils.dates import parse_iso_date
from guruwali.utils.decorators import login_required, json_body_required
from guruwali.utils.payloads import optional_text, missing_fields
from guruwali.utils.queries import get_owned_student
from . import meetings_bp


@meetings_bp.route("", methods=["POST"])
@login_required
@json_body_required
def create_meeting():
    body = request.get_json()

    missing = missing_fields(body, ("student_id", "meeting_date", "topic"))
    if missing:
        return jsonify({"error": f"{missing[0]} is required"}), 400

    try:
        meeting_date = parse_iso_date(body["meeting_date"])
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    student = get_owned_student(body["student_id"], current_user.id)
    if not student:
        return jsonify({"error": "Student not found"}), 404

    meeting = MeetingLog(
        student_id=student.id,
        meeting_date=meeting_date,
        topic=optional_text(body["topic"]),
        follow_up=optional_text(body.get("follow_up")),
        notes=optional_text(body.get("notes"))
    )

    try:
        db.session.add(meeting)
        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"POST /api/meetings error: {str(e)}")
        return jsonify({"error": "Failed to create meeting log"}), 500

    return jsonify({
        "message": "Meeting log created successfully",
        "meeting": meeting.to_dict(),
    }), 201


@meetings_bp.route("", methods=["GET"])
@login_required
def list_meetings():
    student_id = request.args.get("student_id")

    query = MeetingLog.query.join(
        Student, MeetingLog.student_id == Student.id
    ).filter(
        Student.user_id == current_user.id
    )

    if student_id:
        query = query.filter(MeetingLog.student_id == student_id)

    meetings = query.order_by(
        MeetingLog.meeting_date.desc(),
        MeetingLog.created_at.desc()
    ).all()

    return jsonify({"meetings": [meeting.to_dict() for meeting in meetings]})
