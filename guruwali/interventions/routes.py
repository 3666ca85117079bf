from datetime import datetime
from flask import request, jsonify, current_app
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
from guruwali.extensions import db
from guruwali.models import Student, Intervention
from guruwali.models.records import INTERVENTION_STATUSES
from guruwali.utils.dates import parse_iso_date
from guruwali.utils.decorators import login_required, json_body_required
from guruwali.utils.payloads import optional_text, missing_fields
from guruwali.utils.queries import get_owned_student
from . import interventions_bp

REQUIRED_FIELDS = ("student_id", "title", "issue", "goal", "action_steps", "start_date")
TEXT_FIELDS = ("title", "issue", "goal", "action_steps")


def get_owned_intervention(intervention_id):
    return Intervention.query.join(
        Student, Intervention.student_id == Student.id
    ).filter(
        Intervention.id == intervention_id,
        Student.user_id == current_user.id
    ).first()


@interventions_bp.route("", methods=["POST"])
@login_required
@json_body_required
def create_intervention():
    body = request.get_json()

    missing = missing_fields(body, REQUIRED_FIELDS)
    if missing:
        return jsonify({"error": f"{missing[0]} is required"}), 400

    status = optional_text(body.get("status")) or "active"
    if status not in INTERVENTION_STATUSES:
        return jsonify({"error": f"status must be one of {', '.join(INTERVENTION_STATUSES)}"}), 400

    try:
        start_date = parse_iso_date(body["start_date"])
        end_date = parse_iso_date(body.get("end_date"))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    student = get_owned_student(body["student_id"], current_user.id)
    if not student:
        return jsonify({"error": "Student not found"}), 404

    intervention = Intervention(
        student_id=student.id,
        status=status,
        start_date=start_date,
        end_date=end_date,
        notes=optional_text(body.get("notes")),
        **{field: optional_text(body[field]) for field in TEXT_FIELDS}
    )

    try:
        db.session.add(intervention)
        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"POST /api/interventions error: {str(e)}")
        return jsonify({"error": "Failed to create intervention"}), 500

    return jsonify({
        "message": "Intervention created successfully",
        "intervention": intervention.to_dict(),
    }), 201


@interventions_bp.route("", methods=["GET"])
@login_required
def list_interventions():
    student_id = request.args.get("student_id")
    status = request.args.get("status")

    query = Intervention.query.join(
        Student, Intervention.student_id == Student.id
    ).filter(
        Student.user_id == current_user.id
    )

    if student_id:
        query = query.filter(Intervention.student_id == student_id)

    if status:
        query = query.filter(Intervention.status == status)

    interventions = query.order_by(Intervention.created_at.desc()).all()

    return jsonify({
        "interventions": [intervention.to_dict() for intervention in interventions]
    })


@interventions_bp.route("/<intervention_id>", methods=["GET"])
@login_required
def get_intervention(intervention_id):
    intervention = get_owned_intervention(intervention_id)

    if not intervention:
        return jsonify({"error": "Intervention not found"}), 404

    return jsonify({"intervention": intervention.to_dict()})


@interventions_bp.route("/<intervention_id>", methods=["PUT", "PATCH"])
@login_required
@json_body_required
def update_intervention(intervention_id):
    intervention = get_owned_intervention(intervention_id)

    if not intervention:
        return jsonify({"error": "Intervention not found"}), 404

    body = request.get_json()

    for field in TEXT_FIELDS:
        if field in body and optional_text(body[field]) is None:
            return jsonify({"error": f"{field} cannot be empty"}), 400

    if "status" in body and body["status"] not in INTERVENTION_STATUSES:
        return jsonify({"error": f"status must be one of {', '.join(INTERVENTION_STATUSES)}"}), 400

    try:
        start_date = parse_iso_date(body.get("start_date"))
        end_date = parse_iso_date(body.get("end_date"))
    except ValueError as e:
        return jsonify({"error": str(e)}), 400

    if "start_date" in body and start_date is None:
        return jsonify({"error": "start_date cannot be empty"}), 400

    try:
        for field in TEXT_FIELDS:
            if field in body:
                setattr(intervention, field, optional_text(body[field]))

        if "status" in body:
            intervention.status = body["status"]
        if "start_date" in body:
            intervention.start_date = start_date
        if "end_date" in body:
            intervention.end_date = end_date
        if "notes" in body:
            intervention.notes = optional_text(body["notes"])

        intervention.updated_at = datetime.utcnow()

        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"PUT /api/interventions/{intervention_id} error: {str(e)}")
        return jsonify({"error": "Failed to update intervention"}), 500

    return jsonify({
        "intervention": intervention.to_dict(),
        "message": "Intervention updated successfully",
    })


@interventions_bp.route("/<intervention_id>", methods=["DELETE"])
@login_required
def delete_intervention(intervention_id):
    intervention = get_owned_intervention(intervention_id)

    if not intervention:
        return jsonify({"error": "Intervention not found"}), 404

    try:
        db.session.delete(intervention)
        db.session.commit()

    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"DELETE /api/interventions/{intervention_id} error: {str(e)}")
        return jsonify({"error": "Failed to delete intervention"}), 500

    return jsonify({"message": "Intervention deleted successfully"})
