from flask import Blueprint

interventions_bp = Blueprint("interventions", __name__, url_prefix="/api/interventions")
