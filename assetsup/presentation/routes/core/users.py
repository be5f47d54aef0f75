"""
User routes
Read-only user listing for assignment pickers
"""

from flask import Blueprint, jsonify, request
from flask_login import login_required
from assetsup.services.core.user_service import UserService

bp = Blueprint('users', __name__)


@bp.route('/users', methods=['GET'])
@login_required
def list():
    """List active users"""
    return jsonify(UserService.get_list_data(request.args))
