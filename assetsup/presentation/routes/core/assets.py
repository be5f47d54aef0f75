"""
Asset routes
CRUD, lifecycle changes, notes, maintenance and on-chain registration
"""

from datetime import date
from flask import Blueprint, jsonify, request, abort, current_app
from flask_login import login_required, current_user
from assetsup.buisness.core.asset_context import AssetContext
from assetsup.buisness.core.errors import RegistryValidationError
from assetsup.buisness.stellar.errors import StellarError
from assetsup.data.core.asset_info.asset_enums import HistoryAction
from assetsup.presentation.forms import (
    AssetForm,
    AssetUpdateForm,
    StatusForm,
    TransferForm,
    NoteForm,
    MaintenanceForm,
)
from assetsup.presentation.routes.errors import error_response
from assetsup.services.core.asset_service import AssetService
from assetsup.utils.logging_sanitizer import sanitize_exception_message
from assetsup.utils.logger import get_logger

bp = Blueprint('assets', __name__)
logger = get_logger("assetsup.routes.assets")


def _parse_date(name):
    value = request.args.get(name)
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise RegistryValidationError(f"{name} must be a date in YYYY-MM-DD format")


@bp.route('/assets', methods=['GET'])
@login_required
def index():
    """Paged, searchable asset list"""
    return jsonify(AssetService.get_list_data(request.args))


@bp.route('/assets/<int:asset_id>', methods=['GET'])
@login_required
def detail(asset_id):
    return jsonify(AssetContext(asset_id).asset.to_dict())


@bp.route('/assets', methods=['POST'])
@login_required
def create():
    form = AssetForm.from_json()
    context = AssetContext.create(form.cleaned_data(), created_by_id=current_user.id)
    return jsonify(context.asset.to_dict()), 201


@bp.route('/assets/<int:asset_id>', methods=['PATCH'])
@login_required
def update(asset_id):
    context = AssetContext(asset_id)
    form = AssetUpdateForm.from_json()
    context.update(form.cleaned_data(partial=True), updated_by_id=current_user.id)
    return jsonify(context.asset.to_dict())


@bp.route('/assets/<int:asset_id>', methods=['DELETE'])
@login_required
def delete(asset_id):
    AssetContext(asset_id).delete()
    return '', 204


@bp.route('/assets/<int:asset_id>/status', methods=['PATCH'])
@login_required
def change_status(asset_id):
    context = AssetContext(asset_id)
    form = StatusForm.from_json()
    data = form.cleaned_data()
    context.change_status(data['status'], notes=data['notes'], updated_by_id=current_user.id)
    return jsonify(context.asset.to_dict())


@bp.route('/assets/<int:asset_id>/transfer', methods=['POST'])
@login_required
def transfer(asset_id):
    context = AssetContext(asset_id)
    form = TransferForm.from_json()
    changes = form.cleaned_data(partial=True)
    notes = changes.pop('notes', None)
    context.transfer(changes, notes=notes, updated_by_id=current_user.id)
    return jsonify(context.asset.to_dict())


@bp.route('/assets/<int:asset_id>/history', methods=['GET'])
@login_required
def history(asset_id):
    """History entries, newest first; filter by action and date range"""
    asset = AssetContext(asset_id).asset
    action = request.args.get('action') or None
    if action is not None and action not in HistoryAction.values():
        raise RegistryValidationError(f"Unknown history action: {action}")

    entries = AssetService.get_history(
        asset.id,
        action=action,
        start_date=_parse_date('start_date'),
        end_date=_parse_date('end_date'),
    )
    results = []
    for entry in entries:
        data = entry.to_dict()
        data['performed_by'] = entry.performed_by.to_summary() if entry.performed_by else None
        results.append(data)
    return jsonify(results)


@bp.route('/assets/<int:asset_id>/notes', methods=['GET'])
@login_required
def notes(asset_id):
    asset = AssetContext(asset_id).asset
    return jsonify([note.to_dict() for note in AssetService.get_notes(asset.id)])


@bp.route('/assets/<int:asset_id>/notes', methods=['POST'])
@login_required
def add_note(asset_id):
    context = AssetContext(asset_id)
    form = NoteForm.from_json()
    note = context.add_note(form.cleaned_data()['content'], user_id=current_user.id)
    return jsonify(note.to_dict()), 201


@bp.route('/assets/<int:asset_id>/maintenance', methods=['GET'])
@login_required
def maintenance(asset_id):
    asset = AssetContext(asset_id).asset
    return jsonify([record.to_dict() for record in AssetService.get_maintenance_records(asset.id)])


@bp.route('/assets/<int:asset_id>/maintenance', methods=['POST'])
@login_required
def add_maintenance(asset_id):
    context = AssetContext(asset_id)
    form = MaintenanceForm.from_json()
    record = context.add_maintenance_record(form.cleaned_data(), user_id=current_user.id)
    return jsonify(record.to_dict()), 201


@bp.route('/assets/<int:asset_id>/blockchain-registration', methods=['POST'])
@login_required
def register_on_chain(asset_id):
    """Register the asset on-chain and wait for confirmation"""
    context = AssetContext(asset_id)
    service = current_app.extensions['stellar']
    if not service.is_enabled:
        abort(503, description=service.config.reason or "Stellar integration is disabled")

    try:
        tx_hash = context.register_on_chain(service, performed_by_id=current_user.id)
    except StellarError as e:
        logger.error(f"On-chain registration of asset {asset_id} failed: {e}")
        return error_response(502, 'Bad Gateway', sanitize_exception_message(e), tx_hash=e.tx_hash)

    return jsonify({'tx_hash': tx_hash, 'asset': context.asset.to_dict()})
