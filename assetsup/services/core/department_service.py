"""
Department Service
Presentation service for department listings with asset counts.
"""

from typing import Dict, List
from sqlalchemy import func
from assetsup import db
from assetsup.data.core.department import Department
from assetsup.data.core.asset_info.asset import Asset


class DepartmentService:

    @staticmethod
    def get_list_data() -> List[Dict]:
        """All departments ordered by name, each with its asset count"""
        rows = (db.session.query(Department, func.count(Asset.id))
                .outerjoin(Asset, Asset.department_id == Department.id)
                .group_by(Department.id)
                .order_by(Department.name)
                .all())

        results = []
        for department, asset_count in rows:
            data = department.to_dict()
            data['asset_count'] = int(asset_count)
            results.append(data)
        return results
