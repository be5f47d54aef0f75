"""
Report routes
"""

from flask import Blueprint, jsonify
from flask_login import login_required
from assetsup.services.reports.report_service import ReportService

bp = Blueprint('reports', __name__)


@bp.route('/summary', methods=['GET'])
@login_required
def summary():
    """Dashboard summary"""
    return jsonify(ReportService.get_summary())
