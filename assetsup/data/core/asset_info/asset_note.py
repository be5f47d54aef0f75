from assetsup.data.core.user_created_base import UserCreatedBase
from assetsup import db


class AssetNote(UserCreatedBase):
    __tablename__ = 'asset_notes'

    asset_id = db.Column(db.Integer, db.ForeignKey('assets.id'), nullable=False, index=True)
    content = db.Column(db.Text, nullable=False)

    asset = db.relationship('Asset', back_populates='notes')

    def get_content_preview(self, max_length=100):
        """Get a preview of the note content"""
        if len(self.content) <= max_length:
            return self.content
        return self.content[:max_length] + "..."

    def to_dict(self, include_relationships=False, include_audit_fields=True):
        result = super().to_dict(include_relationships, include_audit_fields)
        result['created_by'] = self.created_by.to_summary() if self.created_by else None
        return result

    def __repr__(self):
        return f'<AssetNote {self.id}: {self.get_content_preview(50)}>'
