from functools import wraps
from flask import jsonify
from flask_jwt_extended import jwt_required, get_jwt, get_jwt_identity


def admin_required(f):
    """Decorator for admin-only routes"""
    @wraps(f)
    @jwt_required()
    def decorated_function(*args, **kwargs):
        claims = get_jwt()
        user_type = claims.get('user_type')

        if user_type != 'admin':
            return jsonify({
                'error': 'Access denied. Admin privileges required.'
            }), 403

        return f(*args, **kwargs)

    return decorated_function


def get_current_user_data():
    """Helper function to get current user data from token"""
    claims = get_jwt()
    return {
        'id': get_jwt_identity(),
        'user_type': claims.get('user_type'),
        'username': claims.get('username'),
        'full_name': claims.get('full_name')
    }
