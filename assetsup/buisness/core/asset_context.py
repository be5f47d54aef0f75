"""
Asset Context (Core)
Provides a clean interface for every write operation on an asset.

Handles:
- Asset creation (tag assignment, creation history, on-chain scheduling)
- Field updates, status changes and transfers with history entries
- Notes and maintenance records
- Mirroring the asset onto the ledger through the Stellar bridge

Read-only list/detail queries live in AssetService.
"""

from typing import Any, Dict, Optional, Union
from flask import current_app
from assetsup import db
from assetsup.data.core.asset_info.asset import Asset
from assetsup.data.core.asset_info.asset_enums import AssetStatus, HistoryAction, OnChainStatus
from assetsup.data.core.asset_info.asset_history import AssetHistory
from assetsup.data.core.asset_info.asset_note import AssetNote
from assetsup.data.core.asset_info.maintenance_record import MaintenanceRecord
from assetsup.data.core.category import Category
from assetsup.data.core.department import Department
from assetsup.data.core.user_info.user import User
from assetsup.buisness.core.data_insertion_mixin import serialize_value
from assetsup.buisness.core.errors import RegistryValidationError, RegistryConflictError
from assetsup.buisness.stellar.errors import StellarError
from assetsup.utils.logging_sanitizer import sanitize_exception_message
from assetsup.utils.logger import get_logger

logger = get_logger("assetsup.buisness.core.asset_context")

UPDATABLE_FIELDS = (
    'name', 'description', 'serial_number', 'condition', 'location',
    'manufacturer', 'model', 'purchase_date', 'purchase_price',
    'warranty_expiration', 'category_id', 'department_id',
)


class AssetConflictError(RegistryConflictError):
    """A unique asset attribute (serial number) is already taken"""


class AssetContext:
    """
    Core context manager for asset operations.

    Wraps one Asset and exposes the operations that change it. Every change
    writes an AssetHistory entry in the same transaction.
    """

    def __init__(self, asset: Union[Asset, int]):
        """
        Initialize AssetContext with an Asset instance or asset ID.

        Args:
            asset: Asset instance or asset ID
        """
        if isinstance(asset, int):
            self._asset = Asset.query.get_or_404(asset, description="Asset not found")
        else:
            self._asset = asset

    @property
    def asset(self) -> Asset:
        return self._asset

    @property
    def asset_id(self) -> int:
        return self._asset.id

    # ----------------------------------------------------------------- helpers

    @staticmethod
    def _check_references(data: Dict[str, Any]):
        if data.get('category_id') is not None and db.session.get(Category, data['category_id']) is None:
            raise RegistryValidationError("Category not found")
        if data.get('department_id') is not None and db.session.get(Department, data['department_id']) is None:
            raise RegistryValidationError("Department not found")
        if data.get('assigned_to_id') is not None:
            user = db.session.get(User, data['assigned_to_id'])
            if user is None or not user.is_active:
                raise RegistryValidationError("Assigned user not found")

    @staticmethod
    def _check_serial_number(serial_number, exclude_id=None):
        if not serial_number:
            return
        query = Asset.query.filter(Asset.serial_number == serial_number)
        if exclude_id is not None:
            query = query.filter(Asset.id != exclude_id)
        if query.first() is not None:
            raise AssetConflictError("An asset with this serial number already exists")

    def _record(self, action, description, user_id=None, previous_value=None, new_value=None):
        return AssetHistory.add_event(
            asset_id=self._asset.id,
            action=action,
            description=description,
            performed_by_id=user_id,
            previous_value=previous_value,
            new_value=new_value,
        )

    # ------------------------------------------------------------------ create

    @classmethod
    def create(cls, data: Dict[str, Any], created_by_id: Optional[int] = None,
               schedule_registration: bool = True) -> 'AssetContext':
        """
        Create a new asset.

        Args:
            data: validated asset fields
            created_by_id: user performing the creation
            schedule_registration: queue the on-chain registration when the bridge is enabled

        Returns:
            AssetContext wrapping the committed asset
        """
        cls._check_references(data)
        cls._check_serial_number(data.get('serial_number'))

        fields = {k: v for k, v in data.items() if v is not None}
        if fields.get('assigned_to_id') and 'status' not in fields:
            fields['status'] = AssetStatus.ASSIGNED.value

        asset = Asset.from_dict(fields, user_id=created_by_id, skip_fields=['uuid', 'asset_tag', 'id'])

        stellar = current_app.extensions.get('stellar')
        registration_enabled = schedule_registration and stellar is not None and stellar.is_enabled
        if registration_enabled:
            asset.stellar_status = OnChainStatus.PENDING.value

        db.session.add(asset)
        db.session.flush()
        asset.assign_tag()

        context = cls(asset)
        context._record(
            HistoryAction.CREATED,
            f"Asset {asset.asset_tag} created",
            user_id=created_by_id,
            new_value={k: serialize_value(v) for k, v in fields.items()},
        )
        db.session.commit()
        logger.info(f"Asset created: {asset.asset_tag} ({asset.uuid})")

        if registration_enabled:
            current_app.extensions['stellar_worker'].schedule(asset.id, created_by_id)

        return context

    # ------------------------------------------------------------------ update

    def update(self, changes: Dict[str, Any], updated_by_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Apply field changes.

        Returns:
            dict of field -> [old, new] for the fields that actually changed
        """
        changes = {k: v for k, v in changes.items() if k in UPDATABLE_FIELDS}
        if 'name' in changes and not changes['name']:
            raise RegistryValidationError("Name cannot be empty")
        self._check_references(changes)
        if 'serial_number' in changes:
            self._check_serial_number(changes['serial_number'], exclude_id=self._asset.id)

        previous, new = {}, {}
        for key, value in changes.items():
            old = getattr(self._asset, key)
            if serialize_value(old) == serialize_value(value):
                continue
            previous[key] = serialize_value(old)
            new[key] = serialize_value(value)
            setattr(self._asset, key, value)

        if not new:
            return {}

        self._asset.updated_by_id = updated_by_id
        self._record(
            HistoryAction.UPDATED,
            f"Updated {', '.join(sorted(new))}",
            user_id=updated_by_id,
            previous_value=previous,
            new_value=new,
        )
        db.session.commit()
        logger.info(f"Asset {self._asset.asset_tag} updated: {sorted(new)}")
        return {key: [previous[key], new[key]] for key in new}

    def change_status(self, status, notes: Optional[str] = None, updated_by_id: Optional[int] = None) -> bool:
        """
        Move the asset to another status.

        Returns:
            False when the asset already had that status
        """
        new_status = AssetStatus(status)
        old_status = self._asset.status
        if old_status == new_status.value:
            return False

        self._asset.status = new_status.value
        self._asset.updated_by_id = updated_by_id
        description = f"Status changed from {AssetStatus(old_status).label} to {new_status.label}"
        if notes:
            description = f"{description}: {notes}"
        self._record(
            HistoryAction.STATUS_CHANGED,
            description,
            user_id=updated_by_id,
            previous_value={'status': old_status},
            new_value={'status': new_status.value},
        )
        db.session.commit()
        logger.info(f"Asset {self._asset.asset_tag} status {old_status} -> {new_status.value}")
        return True

    def transfer(self, changes: Dict[str, Any], notes: Optional[str] = None,
                 updated_by_id: Optional[int] = None) -> Dict[str, Any]:
        """
        Move the asset to another department, assignee and/or location.

        Only keys present in `changes` are touched; a None value clears the
        field. Assigning a user to an ACTIVE asset makes it ASSIGNED and
        clearing the assignee of an ASSIGNED asset makes it ACTIVE again.
        """
        allowed = ('department_id', 'assigned_to_id', 'location')
        changes = {k: v for k, v in changes.items() if k in allowed}
        if not changes:
            raise RegistryValidationError("Transfer requires a department, assignee or location")
        self._check_references(changes)

        previous, new = {}, {}
        for key, value in changes.items():
            old = getattr(self._asset, key)
            if old == value:
                continue
            previous[key] = old
            new[key] = value
            setattr(self._asset, key, value)

        if 'assigned_to_id' in new:
            if new['assigned_to_id'] is not None and self._asset.status == AssetStatus.ACTIVE.value:
                previous['status'] = self._asset.status
                new['status'] = self._asset.status = AssetStatus.ASSIGNED.value
            elif new['assigned_to_id'] is None and self._asset.status == AssetStatus.ASSIGNED.value:
                previous['status'] = self._asset.status
                new['status'] = self._asset.status = AssetStatus.ACTIVE.value

        if not new:
            return {}

        self._asset.updated_by_id = updated_by_id
        description = self._describe_transfer(new)
        if notes:
            description = f"{description}: {notes}"
        self._record(
            HistoryAction.TRANSFERRED,
            description,
            user_id=updated_by_id,
            previous_value=previous,
            new_value=new,
        )
        db.session.commit()
        logger.info(f"Asset {self._asset.asset_tag} transferred: {new}")
        return new

    def _describe_transfer(self, new):
        parts = []
        if 'department_id' in new:
            department = self._asset.department
            parts.append(f"department {department.name if department else 'cleared'}")
        if 'assigned_to_id' in new:
            assignee = self._asset.assigned_to
            parts.append(f"assigned to {assignee.name if assignee else 'nobody'}")
        if 'location' in new:
            parts.append(f"location {new['location'] or 'cleared'}")
        return "Transferred: " + ", ".join(parts) if parts else "Transferred"

    # ------------------------------------------------------------ child rows

    def add_note(self, content: str, user_id: Optional[int] = None) -> AssetNote:
        if not content or not content.strip():
            raise RegistryValidationError("Note content is required")
        note = AssetNote(asset_id=self._asset.id, content=content.strip(),
                         created_by_id=user_id, updated_by_id=user_id)
        db.session.add(note)
        db.session.flush()
        self._record(HistoryAction.NOTE_ADDED, f"Note added: {note.get_content_preview(80)}", user_id=user_id)
        db.session.commit()
        return note

    def add_maintenance_record(self, data: Dict[str, Any], user_id: Optional[int] = None) -> MaintenanceRecord:
        record = MaintenanceRecord.from_dict(dict(data, asset_id=self._asset.id), user_id=user_id,
                                             skip_fields=['id'])
        if record.completed_date and record.completed_date < record.scheduled_date:
            raise RegistryValidationError("Completed date cannot be before the scheduled date")
        db.session.add(record)
        db.session.flush()
        self._record(
            HistoryAction.MAINTENANCE_SCHEDULED,
            f"{record.maintenance_type.title()} maintenance scheduled for {record.scheduled_date.isoformat()}",
            user_id=user_id,
            new_value={'maintenance_record_id': record.id},
        )
        db.session.commit()
        return record

    def delete(self):
        tag = self._asset.asset_tag
        asset_id = self._asset.id
        AssetHistory.query.filter_by(asset_id=asset_id).delete()
        AssetNote.query.filter_by(asset_id=asset_id).delete()
        MaintenanceRecord.query.filter_by(asset_id=asset_id).delete()
        db.session.delete(self._asset)
        db.session.commit()
        logger.info(f"Asset deleted: {tag}")

    # ------------------------------------------------------------- on-chain

    def register_on_chain(self, service, performed_by_id: Optional[int] = None, cancel_token=None) -> Optional[str]:
        """
        Mirror the asset onto the ledger and record the outcome.

        Returns:
            The confirmed transaction hash, None when the bridge is disabled

        Raises:
            StellarError subclasses after the failure has been recorded
        """
        if not service.is_enabled:
            return None

        asset = self._asset
        asset.stellar_status = OnChainStatus.PENDING.value
        asset.stellar_error = None
        db.session.commit()

        try:
            tx_hash = service.register_asset(asset, cancel_token=cancel_token)
        except StellarError as e:
            asset.stellar_status = OnChainStatus.FAILED.value
            asset.stellar_error = sanitize_exception_message(e)
            asset.stellar_tx_hash = e.tx_hash
            self._record(HistoryAction.ONCHAIN_FAILED, f"On-chain registration failed: {asset.stellar_error}",
                         user_id=performed_by_id, new_value={'tx_hash': e.tx_hash})
            db.session.commit()
            raise

        asset.stellar_status = OnChainStatus.CONFIRMED.value
        asset.stellar_tx_hash = tx_hash
        self._record(HistoryAction.ONCHAIN_REGISTERED, f"Registered on-chain in transaction {tx_hash}",
                     user_id=performed_by_id, new_value={'tx_hash': tx_hash})
        db.session.commit()
        logger.info(f"Asset {asset.asset_tag} registered on-chain: {tx_hash}")
        return tx_hash
