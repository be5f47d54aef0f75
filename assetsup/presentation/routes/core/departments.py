"""
Department routes
"""

from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from assetsup.buisness.core.reference_context import ReferenceDataContext
from assetsup.presentation.forms import DepartmentForm
from assetsup.services.core.department_service import DepartmentService

bp = Blueprint('departments', __name__)


@bp.route('/departments', methods=['GET'])
@login_required
def list():
    """List all departments with their asset counts"""
    return jsonify(DepartmentService.get_list_data())


@bp.route('/departments/<int:department_id>', methods=['GET'])
@login_required
def detail(department_id):
    context = ReferenceDataContext.departments()
    department = context.get_or_404(department_id)
    data = department.to_dict()
    data['asset_count'] = context.asset_count(department.id)
    return jsonify(data)


@bp.route('/departments', methods=['POST'])
@login_required
def create():
    form = DepartmentForm.from_json()
    department = ReferenceDataContext.departments().create(form.cleaned_data(), user_id=current_user.id)
    data = department.to_dict()
    data['asset_count'] = 0
    return jsonify(data), 201


@bp.route('/departments/<int:department_id>', methods=['DELETE'])
@login_required
def delete(department_id):
    context = ReferenceDataContext.departments()
    context.delete(context.get_or_404(department_id))
    return '', 204
