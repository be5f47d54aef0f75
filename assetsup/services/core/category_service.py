"""
Category Service
Presentation service for category listings with asset counts.
"""

from typing import Dict, List
from sqlalchemy import func
from assetsup import db
from assetsup.data.core.category import Category
from assetsup.data.core.asset_info.asset import Asset


class CategoryService:

    @staticmethod
    def get_list_data() -> List[Dict]:
        """
        All categories ordered by name, each with the number of assets in it.

        A single grouped query, so the list never issues one count per row.
        """
        rows = (db.session.query(Category, func.count(Asset.id))
                .outerjoin(Asset, Asset.category_id == Category.id)
                .group_by(Category.id)
                .order_by(Category.name)
                .all())

        results = []
        for category, asset_count in rows:
            data = category.to_dict()
            data['asset_count'] = int(asset_count)
            results.append(data)
        return results
