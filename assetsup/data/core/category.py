from assetsup.data.core.user_created_base import UserCreatedBase
from assetsup import db


class Category(UserCreatedBase):
    __tablename__ = 'categories'

    name = db.Column(db.String(100), unique=True, nullable=False)
    description = db.Column(db.String(500), nullable=True)

    # Relationships (no backrefs)
    assets = db.relationship('Asset', foreign_keys='Asset.category_id', overlaps="category")

    def to_summary(self):
        return {'id': self.id, 'name': self.name}

    def __repr__(self):
        return f'<Category {self.name}>'
