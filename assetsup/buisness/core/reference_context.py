"""
Reference data context
Create and delete operations shared by categories and departments.

Both are flat name/description tables that assets point at. Names are
unique regardless of case; deleting a row detaches its assets instead of
deleting them.
"""

from sqlalchemy import func
from assetsup import db
from assetsup.buisness.core.errors import RegistryConflictError
from assetsup.data.core.asset_info.asset import Asset
from assetsup.data.core.category import Category
from assetsup.data.core.department import Department
from assetsup.utils.logger import get_logger

logger = get_logger("assetsup.buisness.core.reference")


class DuplicateNameError(RegistryConflictError):
    pass


class ReferenceDataContext:

    def __init__(self, model, asset_column, label):
        self.model = model
        self.asset_column = asset_column
        self.label = label

    @classmethod
    def categories(cls):
        return cls(Category, Asset.category_id, 'category')

    @classmethod
    def departments(cls):
        return cls(Department, Asset.department_id, 'department')

    def get_or_404(self, record_id):
        return self.model.query.get_or_404(record_id, description=f"{self.label.title()} not found")

    def asset_count(self, record_id) -> int:
        return Asset.query.filter(self.asset_column == record_id).count()

    def create(self, data, user_id=None):
        """
        Raises:
            DuplicateNameError: another row already uses the name
        """
        name = data['name']
        existing = self.model.query.filter(func.lower(self.model.name) == name.lower()).first()
        if existing is not None:
            raise DuplicateNameError(f"A {self.label} with this name already exists")

        record = self.model.create_from_dict(
            {'name': name, 'description': data.get('description')},
            user_id=user_id,
        )
        logger.info(f"Created {self.label} {record.name!r} (id={record.id})")
        return record

    def delete(self, record):
        """Delete the row; its assets keep existing without it"""
        detached = (Asset.query
                    .filter(self.asset_column == record.id)
                    .update({self.asset_column: None}, synchronize_session=False))
        name = record.name
        db.session.delete(record)
        db.session.commit()
        # bulk update bypassed the identity map
        db.session.expire_all()
        logger.info(f"Deleted {self.label} {name!r}; detached {detached} assets")
