"""
Routes package for the asset registry API
Organized in a tiered structure mirroring the model organization
"""

from assetsup.utils.logger import get_logger

logger = get_logger("assetsup.routes")


def init_app(app):
    """Initialize all route blueprints with the Flask app"""
    logger.debug("Initializing route blueprints")

    from .core import assets, categories, departments, users
    from . import reports

    app.register_blueprint(categories.bp, url_prefix='/api')
    app.register_blueprint(departments.bp, url_prefix='/api')
    app.register_blueprint(users.bp, url_prefix='/api')
    app.register_blueprint(assets.bp, url_prefix='/api')
    app.register_blueprint(reports.bp, url_prefix='/api/reports')

    logger.info("All route blueprints registered")
