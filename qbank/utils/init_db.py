from flask import current_app
from pymongo import ASCENDING
from pymongo.errors import PyMongoError
from qbank import mongo
from qbank.models.user import User
import logging

logger = logging.getLogger(__name__)

# collection -> list of (keys, options)
INDEXES = {
    'users': [('username', {'unique': True, 'sparse': True})],
    'questions': [
        ('is_active', {}),
        ([('type', ASCENDING), ('subject', ASCENDING), ('chapter', ASCENDING)], {}),
        ('language', {}),
    ],
    'learn_topics': [([('subject', ASCENDING), ('chapter', ASCENDING), ('order_index', ASCENDING)], {})],
    'chapter_overviews': [('subject', {})],
}


def initialize_database():
    """Seed the default admin account and create the collection indexes"""
    User.ensure_default_admin(current_app.config['DEFAULT_ADMIN_PASSWORD'])

    try:
        for collection, indexes in INDEXES.items():
            for keys, options in indexes:
                mongo.db[collection].create_index(keys, **options)
        logger.info("[OK] Database indexes created")
    except PyMongoError as e:
        logger.warning(f"[WARN] Index creation warning (may already exist): {e}")

    logger.info("[OK] Database initialization complete")
