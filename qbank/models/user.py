from datetime import datetime
import logging
from bson import ObjectId
from qbank import mongo, bcrypt

logger = logging.getLogger(__name__)


class User:
    """Admin accounts allowed to import and edit the question bank"""

    @staticmethod
    def create_user(user_data):
        """Insert an account, storing a bcrypt hash in place of the plain password"""
        now = datetime.utcnow()
        user_data.update({'created_at': now, 'updated_at': now, 'is_active': True})
        user_data.setdefault('user_type', 'admin')

        plain = user_data.get('password')
        if plain:
            user_data['password'] = bcrypt.generate_password_hash(plain).decode('utf-8')

        user_data['_id'] = mongo.db.users.insert_one(user_data).inserted_id
        return user_data

    @staticmethod
    def ensure_default_admin(password, username='admin'):
        """Create the seed admin account unless one already exists; True when created"""
        if mongo.db.users.find_one({'username': username, 'user_type': 'admin'}):
            return False

        User.create_user({
            'username': username,
            'password': password,
            'full_name': 'System Administrator',
            'user_type': 'admin'
        })
        logger.info(f"[OK] Default admin user created (username: {username})")
        return True

    @staticmethod
    def find_by_id(user_id):
        if isinstance(user_id, str):
            user_id = ObjectId(user_id)
        return mongo.db.users.find_one({'_id': user_id, 'is_active': True})

    @staticmethod
    def find_by_username(username):
        return mongo.db.users.find_one({'username': username, 'is_active': True})

    @staticmethod
    def verify_password(user, password):
        """Check ``password`` against the stored hash; missing users never match"""
        stored = (user or {}).get('password')
        if not stored:
            return False
        return bcrypt.check_password_hash(stored, password)

    @staticmethod
    def record_login(user_id):
        if isinstance(user_id, str):
            user_id = ObjectId(user_id)
        mongo.db.users.update_one({'_id': user_id}, {'$set': {'last_login': datetime.utcnow()}})
