from flask import jsonify, current_app
from flask_login import current_user
from sqlalchemy.exc import SQLAlchemyError
from guruwali.utils.decorators import login_required
from guruwali.utils.queries import get_dashboard_stats, get_report_listing
from . import main_bp


@main_bp.route("/health")
def health():
    return jsonify({"status": "ok"})


@main_bp.route("/dashboard/stats")
@login_required
def dashboard_stats():
    try:
        stats = get_dashboard_stats(current_user.id)

    except SQLAlchemyError as e:
        current_app.logger.error(f"[DashboardStats] Database error: {str(e)}")
        return jsonify({"error": "Failed to fetch statistics"}), 500

    return jsonify(stats)


@main_bp.route("/reports")
@login_required
def reports():
    """Report entries per student plus a summary of the running semester."""
    try:
        listing = get_report_listing(current_user.id)

    except SQLAlchemyError as e:
        current_app.logger.error(f"[Reports] Database error: {str(e)}")
        return jsonify({"error": "Failed to fetch reports"}), 500

    return jsonify(listing)
