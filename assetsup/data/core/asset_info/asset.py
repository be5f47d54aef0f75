import uuid
from assetsup.data.core.user_created_base import UserCreatedBase
from assetsup.data.core.asset_info.asset_enums import AssetStatus, AssetCondition
from assetsup.utils.logger import get_logger
from assetsup import db

logger = get_logger("assetsup.models.core")

ASSET_TAG_PREFIX = 'AST-'


def _new_uuid():
    return str(uuid.uuid4())


class Asset(UserCreatedBase):
    __tablename__ = 'assets'

    # Source-of-truth identifier mirrored on-chain; never reassigned
    uuid = db.Column(db.String(36), unique=True, nullable=False, default=_new_uuid)
    asset_tag = db.Column(db.String(20), unique=True, nullable=True)
    name = db.Column(db.String(200), nullable=False)
    description = db.Column(db.Text, nullable=True)
    serial_number = db.Column(db.String(100), unique=True, nullable=True)
    status = db.Column(db.String(20), nullable=False, default=AssetStatus.ACTIVE.value)
    condition = db.Column(db.String(20), nullable=False, default=AssetCondition.GOOD.value)
    location = db.Column(db.String(200), nullable=True)
    manufacturer = db.Column(db.String(100), nullable=True)
    model = db.Column(db.String(100), nullable=True)
    purchase_date = db.Column(db.Date, nullable=True)
    purchase_price = db.Column(db.Numeric(12, 2), nullable=True)
    warranty_expiration = db.Column(db.Date, nullable=True)
    category_id = db.Column(db.Integer, db.ForeignKey('categories.id'), nullable=True)
    department_id = db.Column(db.Integer, db.ForeignKey('departments.id'), nullable=True)
    assigned_to_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)

    # Blockchain bridge bookkeeping
    stellar_status = db.Column(db.String(20), nullable=True)
    stellar_tx_hash = db.Column(db.String(64), nullable=True)
    stellar_error = db.Column(db.Text, nullable=True)

    # Relationships
    category = db.relationship('Category', foreign_keys=[category_id], overlaps="assets")
    department = db.relationship('Department', foreign_keys=[department_id], overlaps="assets")
    assigned_to = db.relationship('User', foreign_keys=[assigned_to_id])
    history = db.relationship('AssetHistory', back_populates='asset', lazy='dynamic')
    notes = db.relationship('AssetNote', back_populates='asset', lazy='dynamic')
    maintenance_records = db.relationship('MaintenanceRecord', back_populates='asset', lazy='dynamic')

    def assign_tag(self):
        """Derive the human readable tag from the primary key (call after flush)"""
        if self.asset_tag is None and self.id is not None:
            self.asset_tag = f"{ASSET_TAG_PREFIX}{self.id:05d}"
            logger.debug(f"Assigned tag {self.asset_tag} to asset {self.uuid}")
        return self.asset_tag

    def to_dict(self, include_relationships=True, include_audit_fields=True):
        result = super().to_dict(include_relationships, include_audit_fields)
        result['status_label'] = AssetStatus(self.status).label
        result['condition_label'] = AssetCondition(self.condition).label
        return result

    def to_summary(self):
        return {'id': self.id, 'uuid': self.uuid, 'asset_tag': self.asset_tag, 'name': self.name}

    def __repr__(self):
        return f'<Asset {self.name} ({self.asset_tag})>'
