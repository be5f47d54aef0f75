from flask import Flask
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
import os
from assetsup.utils.logger import get_logger

# Initialize extensions
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["1000 per day", "200 per hour"],
    storage_uri="memory://"  # Use Redis in production for distributed systems
)


def create_app(test_config=None):
    from pathlib import Path

    app = Flask(__name__)

    logger = get_logger("assetsup")
    logger.info("Initializing Flask application")

    # Configuration
    # SECURITY: Require SECRET_KEY - no fallback
    app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY')

    # Prefer an explicit DATABASE_URL env var; otherwise keep the SQLite
    # database inside the project's `instance/` directory.
    db_env = os.environ.get('DATABASE_URL')
    if db_env:
        app.config['SQLALCHEMY_DATABASE_URI'] = db_env
    else:
        base_dir = Path(__file__).parent.parent
        instance_dir = base_dir / 'instance'
        instance_dir.mkdir(parents=True, exist_ok=True)
        default_db_path = instance_dir / 'assetsup.db'
        app.config['SQLALCHEMY_DATABASE_URI'] = f"sqlite:///{str(default_db_path.resolve())}"

    app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False

    # Bearer tokens are signed with SECRET_KEY; default lifetime is 7 days
    app.config['ACCESS_TOKEN_MAX_AGE'] = int(os.environ.get('ACCESS_TOKEN_MAX_AGE', '604800'))

    # Stellar bridge settings, interpreted once by StellarConfig below
    for key in ('STELLAR_ENABLED', 'STELLAR_RPC_URL', 'STELLAR_SECRET_KEY',
                'STELLAR_CONTRACT_ID', 'STELLAR_NETWORK_PASSPHRASE'):
        app.config[key] = os.environ.get(key)

    if test_config is not None:
        app.config.update(test_config)

    if not app.config['SECRET_KEY']:
        logger.critical("SECRET_KEY not set in environment! Application cannot start.")
        raise RuntimeError("SECRET_KEY environment variable is required")

    logger.debug(f"Database configured: {app.config['SQLALCHEMY_DATABASE_URI'].split(':', 1)[0]}")

    # Initialize extensions with app
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    limiter.init_app(app)

    logger.debug("Extensions initialized")

    # Import models to ensure they're registered with SQLAlchemy
    from assetsup.data.core.user_info.user import User
    from assetsup.data.core.category import Category
    from assetsup.data.core.department import Department
    from assetsup.data.core.asset_info.asset import Asset
    from assetsup.data.core.asset_info.asset_history import AssetHistory
    from assetsup.data.core.asset_info.asset_note import AssetNote
    from assetsup.data.core.asset_info.maintenance_record import MaintenanceRecord

    logger.debug("Models imported and registered")

    # Blockchain bridge: configuration is read once and handed to the service
    from assetsup.buisness.stellar.config import StellarConfig
    from assetsup.buisness.stellar.stellar_service import StellarService
    from assetsup.buisness.stellar.registration_worker import RegistrationWorker

    stellar_config = StellarConfig.from_mapping(app.config)
    app.extensions['stellar'] = StellarService(stellar_config)
    app.extensions['stellar_worker'] = RegistrationWorker(app)

    # Register blueprints
    from assetsup.auth import auth
    from assetsup.presentation.routes import init_app as init_routes
    from assetsup.presentation.routes.errors import register_error_handlers

    app.register_blueprint(auth, url_prefix='/api/auth')
    init_routes(app)
    register_error_handlers(app)

    # Add security headers to all responses
    @app.after_request
    def set_security_headers(response):
        """Add security headers to all responses"""
        response.headers['X-Frame-Options'] = 'DENY'
        response.headers['X-Content-Type-Options'] = 'nosniff'
        response.headers['Cache-Control'] = 'no-store'
        return response

    logger.info("Flask application initialization complete")

    return app
