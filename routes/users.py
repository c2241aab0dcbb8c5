from flask import Blueprint, g, jsonify
from auth_utils import token_required
import models

users_bp = Blueprint('users', __name__, url_prefix='/api')


@users_bp.route('/users')
@token_required
def list_users():
    users = models.get_all_users()
    return jsonify(message=f"Hello {g.user['role']}, here are the users", data=users)


@users_bp.route('/users/<user_id>')
@token_required
def get_user(user_id):
    try:
        user = models.get_user_by_id(int(user_id))
    except ValueError:
        user = None

    if not user:
        return jsonify(error='User not found'), 404

    return jsonify(data=user)
