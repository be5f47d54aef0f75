"""
Report Service
Dashboard aggregates over the asset table.
"""

from typing import Dict
from sqlalchemy import func
from assetsup import db
from assetsup.data.core.asset_info.asset import Asset
from assetsup.data.core.asset_info.asset_enums import AssetStatus
from assetsup.data.core.category import Category
from assetsup.data.core.department import Department

UNCATEGORISED = 'Uncategorised'
UNASSIGNED = 'Unassigned'
RECENT_LIMIT = 5


class ReportService:

    @staticmethod
    def get_summary() -> Dict:
        """
        Asset summary for the dashboard.

        Returns:
            dict with total, by_status (every status present), by_category,
            by_department and the most recently created assets
        """
        total = Asset.query.count()

        by_status = {status.value: 0 for status in AssetStatus}
        status_rows = (db.session.query(Asset.status, func.count(Asset.id))
                       .group_by(Asset.status)
                       .all())
        for status, count in status_rows:
            by_status[status] = int(count)

        category_name = func.coalesce(Category.name, UNCATEGORISED)
        by_category = [
            {'name': name, 'count': int(count)}
            for name, count in (db.session.query(category_name, func.count(Asset.id))
                                .select_from(Asset)
                                .outerjoin(Category, Asset.category_id == Category.id)
                                .group_by(Category.name)
                                .order_by(func.count(Asset.id).desc(), category_name)
                                .all())
        ]

        department_name = func.coalesce(Department.name, UNASSIGNED)
        by_department = [
            {'name': name, 'count': int(count)}
            for name, count in (db.session.query(department_name, func.count(Asset.id))
                                .select_from(Asset)
                                .outerjoin(Department, Asset.department_id == Department.id)
                                .group_by(Department.name)
                                .order_by(func.count(Asset.id).desc(), department_name)
                                .all())
        ]

        recent = (Asset.query
                  .order_by(Asset.created_at.desc(), Asset.id.desc())
                  .limit(RECENT_LIMIT)
                  .all())

        return {
            'total': total,
            'by_status': by_status,
            'by_category': by_category,
            'by_department': by_department,
            'recent': [asset.to_dict() for asset in recent],
        }
