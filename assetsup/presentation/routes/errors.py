"""
JSON error responses
Every error leaving the API has the shape {"error", "message", "status"}.
"""

from flask import jsonify
from werkzeug.exceptions import HTTPException
from assetsup import login_manager
from assetsup.buisness.core.errors import RegistryValidationError, RegistryConflictError
from assetsup.presentation.forms import FormValidationError
from assetsup.utils.logger import get_logger

logger = get_logger("assetsup.routes.errors")


def error_response(status, error, message, **extra):
    body = {'error': error, 'message': message, 'status': status}
    body.update(extra)
    return jsonify(body), status


def register_error_handlers(app):
    """Install the JSON error handlers on the app"""

    @app.errorhandler(HTTPException)
    def handle_http_exception(e):
        return error_response(e.code, e.name, e.description)

    @app.errorhandler(FormValidationError)
    def handle_form_error(e):
        logger.debug(f"Form validation failed: {e.errors}")
        return error_response(400, 'Bad Request', e.message, errors=e.errors)

    @app.errorhandler(RegistryConflictError)
    def handle_conflict(e):
        return error_response(409, 'Conflict', str(e))

    @app.errorhandler(RegistryValidationError)
    def handle_validation_error(e):
        logger.warning(f"Rejected request: {e}")
        return error_response(400, 'Bad Request', str(e))

    @login_manager.unauthorized_handler
    def unauthorized():
        return error_response(401, 'Unauthorized', 'Authentication required')
