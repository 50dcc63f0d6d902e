import logging
from flask import request, jsonify
from flask_jwt_extended import create_access_token
from qbank.auth import bp
from qbank.models.user import User
from qbank.utils.decorators import admin_required, get_current_user_data

logger = logging.getLogger(__name__)


def _user_summary(user):
    return {
        'id': str(user['_id']),
        'username': user.get('username'),
        'full_name': user.get('full_name', ''),
        'user_type': user.get('user_type', 'admin')
    }


@bp.route('/login', methods=['POST'])
def login():
    """Exchange admin credentials for an access token"""
    data = request.get_json(silent=True) or {}
    username = (data.get('username') or '').strip()
    password = data.get('password') or ''

    if not username or not password:
        return jsonify({'error': 'Username and password are required'}), 400

    user = User.find_by_username(username)
    if not User.verify_password(user, password):
        logger.warning(f"Failed login attempt for '{username}'")
        return jsonify({'error': 'Invalid username or password'}), 401

    summary = _user_summary(user)
    if summary['user_type'] != 'admin':
        return jsonify({'error': 'Only administrators can use the import console'}), 403

    # Claims mirror the summary so admin_required needs no database lookup
    access_token = create_access_token(
        identity=summary['id'],
        additional_claims={k: summary[k] for k in ('user_type', 'username', 'full_name')}
    )
    User.record_login(user['_id'])

    return jsonify({
        'message': 'Login successful',
        'access_token': access_token,
        'user': summary
    }), 200


@bp.route('/me', methods=['GET'])
@admin_required
def get_current_user():
    return jsonify({'user': get_current_user_data()}), 200
