from datetime import datetime
from assetsup.data.core.user_created_base import UserCreatedBase
from assetsup import db


class AssetHistory(UserCreatedBase):
    __tablename__ = 'asset_history'

    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id'), nullable=False, index=True)
    action = db.Column(db.String(40), nullable=False)
    description = db.Column(db.Text, nullable=False)
    previous_value = db.Column(db.JSON, nullable=True)
    new_value = db.Column(db.JSON, nullable=True)
    performed_by_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, index=True)

    asset = db.relationship('Asset', back_populates='history')
    performed_by = db.relationship('User', foreign_keys=[performed_by_id])

    @classmethod
    def add_event(cls, asset_id, action, description, performed_by_id=None,
                  previous_value=None, new_value=None):
        """
        Create and stage a new history entry

        Args:
            asset_id (int): Asset the entry belongs to
            action (HistoryAction or str): Kind of change
            description (str): Human readable summary
            performed_by_id (int, optional): User who triggered the change
            previous_value (dict, optional): Values before the change
            new_value (dict, optional): Values after the change

        Returns:
            AssetHistory: The staged entry (flushed, not committed)
        """
        entry = cls(
            asset_id=asset_id,
            action=getattr(action, 'value', action),
            description=description,
            performed_by_id=performed_by_id,
            previous_value=previous_value,
            new_value=new_value,
            created_by_id=performed_by_id,
            updated_by_id=performed_by_id,
        )
        db.session.add(entry)
        db.session.flush()
        return entry

    def __repr__(self):
        return f'<AssetHistory {self.action}: {self.description}>'
