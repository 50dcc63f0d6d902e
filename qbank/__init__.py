from flask import Flask
from flask_jwt_extended import JWTManager
from flask_cors import CORS
from flask_bcrypt import Bcrypt
from pymongo import MongoClient
from config import config
import os
from datetime import datetime

# Initialize extensions
jwt = JWTManager()
cors = CORS()
bcrypt = Bcrypt()

# MongoDB client will be initialized in create_app
mongo_client = None
mongo_db = None


class MongoWrapper:
    """Simple wrapper to provide Flask-PyMongo-like interface"""
    @property
    def db(self):
        return mongo_db

    @property
    def cx(self):
        return mongo_client


# Create global mongo object for compatibility
mongo = MongoWrapper()


def connect_mongo(app):
    """Connect to MongoDB using the app configuration"""
    global mongo_client, mongo_db
    try:
        mongo_uri = app.config.get('MONGO_URI') or os.environ.get('MONGO_URI', 'mongodb://localhost:27017')
        db_name = app.config.get('MONGO_DBNAME') or os.environ.get('MONGO_DBNAME', 'qbank_database')

        mongo_client = MongoClient(mongo_uri, serverSelectionTimeoutMS=5000)
        # Test connection
        mongo_client.admin.command('ping')
        mongo_db = mongo_client[db_name]
        app.logger.info(f"[OK] MongoDB connected: {db_name}")
    except Exception as e:
        app.logger.error(f"[ERROR] MongoDB connection failed: {e}")
        mongo_client = None
        mongo_db = None


def create_app(config_name=None):
    """Application factory pattern"""
    app = Flask(__name__)

    # Load configuration
    config_name = config_name or os.environ.get('FLASK_ENV', 'default')
    app.config.from_object(config[config_name]())

    if not app.config.get('SKIP_DB_INIT'):
        connect_mongo(app)

    # Initialize extensions
    jwt.init_app(app)
    bcrypt.init_app(app)

    # Register blueprints
    from qbank.auth import bp as auth_bp
    app.register_blueprint(auth_bp, url_prefix='/api/auth')

    from qbank.imports import bp as imports_bp
    app.register_blueprint(imports_bp, url_prefix='/api/import')

    from qbank.questions import bp as questions_bp
    app.register_blueprint(questions_bp, url_prefix='/api/questions')

    from qbank.lessons import bp as lessons_bp
    app.register_blueprint(lessons_bp, url_prefix='/api')

    # Apply CORS
    CORS(app, resources={r"/api/*": {
        "origins": app.config['CORS_ORIGINS'],
        "allow_headers": app.config['CORS_ALLOW_HEADERS'],
        "methods": app.config['CORS_METHODS'],
        "supports_credentials": app.config['CORS_SUPPORTS_CREDENTIALS']
    }})

    # Initialize database with default admin
    if mongo_db is not None and not app.config.get('SKIP_DB_INIT'):
        try:
            with app.app_context():
                from qbank.utils.init_db import initialize_database
                initialize_database()
        except Exception as e:
            app.logger.error(f'[ERROR] Database initialization failed: {e}')

    @app.route('/')
    def index():
        return {
            'message': 'Question Bank Import API',
            'status': 'active',
            'version': '1.0.0',
            'frontend_url': app.config['FRONTEND_URL']
        }

    @app.route('/api/health')
    def health_check():
        db_status = 'connected' if mongo_db is not None else 'disconnected'
        return {
            'status': 'healthy',
            'database': db_status,
            'timestamp': datetime.utcnow().isoformat()
        }

    app.logger.info('[OK] Question Bank API ready')
    return app
