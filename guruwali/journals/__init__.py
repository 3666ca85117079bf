from flask import Blueprint

journals_bp = Blueprint("journals", __name__, url_prefix="/api/journals")
