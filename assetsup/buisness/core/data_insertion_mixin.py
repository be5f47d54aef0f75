"""
Generic data insertion mixin for SQLAlchemy models
Provides from_dict and to_dict methods shared by every registry model

The mixin lives in the business layer because it manages audit fields
(created_by_id, updated_by_id) and the JSON shape returned by the API.
"""

import enum
from datetime import date, datetime
from decimal import Decimal
from sqlalchemy import inspect
from assetsup import db
from assetsup.utils.logger import get_logger

logger = get_logger("assetsup.buisness.core.data_insertion")

AUDIT_FIELDS = ('created_at', 'updated_at', 'created_by_id', 'updated_by_id')


def serialize_value(value):
    """Convert a column value into something json can encode"""
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return float(value)
    if isinstance(value, enum.Enum):
        return value.value
    return value


class DataInsertionMixin:
    """
    Mixin that provides generic data insertion capabilities for SQLAlchemy models

    This mixin adds:
    - from_dict(): Create model instance from dictionary
    - to_dict(): Convert model instance to dictionary
    - create_from_dict(): Create and save model instance from dictionary
    """

    # Columns never exposed through to_dict
    hidden_fields = ()

    @classmethod
    def from_dict(cls, data_dict, user_id=None, skip_fields=None):
        """
        Create a model instance from a dictionary

        Args:
            data_dict (dict): Dictionary containing model data
            user_id (int, optional): User ID for audit fields
            skip_fields (list, optional): Fields to skip during creation

        Returns:
            Model instance (not saved to database)
        """
        if skip_fields is None:
            skip_fields = []

        mapper = inspect(cls)
        columns = {c.key for c in mapper.columns}

        filtered_data = {}
        for key, value in data_dict.items():
            if key not in columns or key in skip_fields:
                continue
            if key == 'password' and hasattr(cls, 'set_password'):
                # handled by set_password below
                continue
            if key in ('created_at', 'updated_at') and value is None:
                continue
            filtered_data[key] = value

        instance = cls(**filtered_data)

        if 'password' in data_dict and hasattr(instance, 'set_password'):
            instance.set_password(data_dict['password'])

        if user_id is not None:
            if hasattr(instance, 'created_by_id') and not instance.created_by_id:
                instance.created_by_id = user_id
            if hasattr(instance, 'updated_by_id'):
                instance.updated_by_id = user_id

        return instance

    def to_dict(self, include_relationships=False, include_audit_fields=True):
        """
        Convert model instance to dictionary

        Args:
            include_relationships (bool): Whether to include many-to-one relationship data
            include_audit_fields (bool): Whether to include audit fields

        Returns:
            dict: Dictionary representation of the model
        """
        result = {}
        mapper = inspect(self.__class__)

        for column in mapper.columns:
            if column.key in self.hidden_fields:
                continue
            if not include_audit_fields and column.key in AUDIT_FIELDS:
                continue
            result[column.key] = serialize_value(getattr(self, column.key))

        if include_relationships:
            for relationship in mapper.relationships:
                if relationship.uselist or relationship.key in result:
                    continue
                if relationship.key in ('created_by', 'updated_by'):
                    continue
                related_obj = getattr(self, relationship.key)
                if related_obj is None:
                    result[relationship.key] = None
                elif hasattr(related_obj, 'to_summary'):
                    result[relationship.key] = related_obj.to_summary()
                elif hasattr(related_obj, 'to_dict'):
                    result[relationship.key] = related_obj.to_dict()
                else:
                    result[relationship.key] = str(related_obj)

        return result

    @classmethod
    def create_from_dict(cls, data_dict, user_id=None, skip_fields=None, commit=True):
        """
        Create and save a model instance from dictionary

        Args:
            data_dict (dict): Dictionary containing model data
            user_id (int, optional): User ID for audit fields
            skip_fields (list, optional): Fields to skip during creation
            commit (bool): Whether to commit the transaction

        Returns:
            Model instance (saved to database)
        """
        instance = cls.from_dict(data_dict, user_id, skip_fields)
        db.session.add(instance)

        if commit:
            db.session.commit()
            logger.debug(f"Created {cls.__name__} id={instance.id}")
        else:
            db.session.flush()

        return instance
