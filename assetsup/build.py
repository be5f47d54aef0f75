"""
Database build for the asset registry
Creates the tables and, optionally, the initial reference data
"""

import os
from assetsup import db
from assetsup.utils.logger import get_logger

logger = get_logger("assetsup.build")

DEFAULT_CATEGORIES = [
    ('IT Equipment', 'Laptops, monitors, phones and peripherals'),
    ('Furniture', 'Desks, chairs and storage'),
    ('Vehicles', 'Company cars and vans'),
    ('Machinery', 'Production and workshop equipment'),
]

DEFAULT_DEPARTMENTS = [
    ('Operations', None),
    ('Finance', None),
    ('Engineering', None),
    ('Human Resources', None),
]


def ensure_admin_user():
    """
    Create the admin account from ADMIN_EMAIL / ADMIN_PASSWORD if it is missing.

    Returns:
        User or None when the credentials are not configured
    """
    from assetsup.data.core.user_info.user import User

    email = os.environ.get('ADMIN_EMAIL')
    password = os.environ.get('ADMIN_PASSWORD')
    if not email or not password:
        logger.warning("ADMIN_EMAIL/ADMIN_PASSWORD not set, skipping admin account")
        return None

    user = User.query.filter_by(email=email.lower()).first()
    if user is not None:
        logger.debug(f"Admin account already present: {user.email}")
        return user

    user = User(email=email.lower(), first_name='Admin', last_name='User', is_admin=True)
    user.set_password(password)
    db.session.add(user)
    db.session.commit()
    logger.info(f"Created admin account: {user.email}")
    return user


def insert_seed_data(created_by_id=None):
    """Insert default categories and departments that are not present yet"""
    from assetsup.data.core.category import Category
    from assetsup.data.core.department import Department

    inserted = 0
    for model, rows in ((Category, DEFAULT_CATEGORIES), (Department, DEFAULT_DEPARTMENTS)):
        for name, description in rows:
            if model.query.filter_by(name=name).first() is not None:
                continue
            model.create_from_dict({'name': name, 'description': description},
                                   user_id=created_by_id, commit=False)
            inserted += 1
    db.session.commit()
    logger.info(f"Seed data inserted: {inserted} rows")
    return inserted


def build_database(seed_data=True):
    """
    Build the database

    Args:
        seed_data (bool): Insert default categories and departments
    """
    logger.info("Creating database tables")
    db.create_all()

    admin = ensure_admin_user()

    if seed_data:
        insert_seed_data(admin.id if admin else None)
    else:
        logger.debug("Seed data disabled")

    logger.info("Database build complete")
