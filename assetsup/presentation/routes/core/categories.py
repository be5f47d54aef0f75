"""
Category routes
"""

from flask import Blueprint, jsonify
from flask_login import login_required, current_user
from assetsup.buisness.core.reference_context import ReferenceDataContext
from assetsup.presentation.forms import CategoryForm
from assetsup.services.core.category_service import CategoryService

bp = Blueprint('categories', __name__)


@bp.route('/categories', methods=['GET'])
@login_required
def list():
    """List all categories with their asset counts"""
    return jsonify(CategoryService.get_list_data())


@bp.route('/categories/<int:category_id>', methods=['GET'])
@login_required
def detail(category_id):
    context = ReferenceDataContext.categories()
    category = context.get_or_404(category_id)
    data = category.to_dict()
    data['asset_count'] = context.asset_count(category.id)
    return jsonify(data)


@bp.route('/categories', methods=['POST'])
@login_required
def create():
    form = CategoryForm.from_json()
    category = ReferenceDataContext.categories().create(form.cleaned_data(), user_id=current_user.id)
    data = category.to_dict()
    data['asset_count'] = 0
    return jsonify(data), 201


@bp.route('/categories/<int:category_id>', methods=['DELETE'])
@login_required
def delete(category_id):
    context = ReferenceDataContext.categories()
    context.delete(context.get_or_404(category_id))
    return '', 204
