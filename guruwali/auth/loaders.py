from flask import jsonify
from guruwali.extensions import db, login_manager
from guruwali.models.user import User


@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, user_id)


@login_manager.unauthorized_handler
def unauthorized():
    return jsonify({"error": "Unauthorized"}), 401
