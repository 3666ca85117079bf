from functools import wraps
from flask import jsonify, request
from flask_login import current_user


def login_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):

        if not current_user.is_authenticated:
            return jsonify({"error": "Unauthorized"}), 401

        return f(*args, **kwargs)

    return wrapper


def json_body_required(f):
    @wraps(f)
    def wrapper(*args, **kwargs):

        if not isinstance(request.get_json(silent=True), dict):
            return jsonify({"error": "Request body must be a JSON object"}), 400

        return f(*args, **kwargs)

    return wrapper
