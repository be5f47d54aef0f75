from assetsup.data.core.user_created_base import UserCreatedBase
from assetsup import db


class MaintenanceRecord(UserCreatedBase):
    __tablename__ = 'maintenance_records'

    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id'), nullable=False, index=True)
    maintenance_type = db.Column(db.String(20), nullable=False)
    description = db.Column(db.Text, nullable=False)
    scheduled_date = db.Column(db.Date, nullable=False)
    completed_date = db.Column(db.Date, nullable=True)
    cost = db.Column(db.Numeric(12, 2), nullable=True)
    performed_by = db.Column(db.String(200), nullable=True)
    notes = db.Column(db.Text, nullable=True)

    asset = db.relationship('Asset', back_populates='maintenance_records')

    @property
    def is_completed(self):
        return self.completed_date is not None

    def to_dict(self, include_relationships=False, include_audit_fields=True):
        result = super().to_dict(include_relationships, include_audit_fields)
        result['is_completed'] = self.is_completed
        return result

    def __repr__(self):
        return f'<MaintenanceRecord {self.maintenance_type} asset={self.asset_id}>'
