"""
Asset Service
Presentation service for asset-related data retrieval.

Handles:
- Query building, search, filtering and sorting for the asset list
- Pagination in the shape the web client expects
- History, note and maintenance listings for one asset
"""

from datetime import datetime, time
from typing import Dict, List, Optional
from sqlalchemy import or_
from assetsup.data.core.asset_info.asset import Asset
from assetsup.data.core.asset_info.asset_history import AssetHistory
from assetsup.data.core.asset_info.asset_note import AssetNote
from assetsup.data.core.asset_info.maintenance_record import MaintenanceRecord
from assetsup.data.core.category import Category
from assetsup.data.core.department import Department
from assetsup.data.core.user_info.user import User

MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10

SORTABLE_FIELDS = {
    'asset_tag': Asset.asset_tag,
    'name': Asset.name,
    'category': Category.name,
    'status': Asset.status,
    'condition': Asset.condition,
    'department': Department.name,
    'assigned_to': User.first_name,
    'created_at': Asset.created_at,
    'purchase_price': Asset.purchase_price,
}


class AssetService:
    """
    Service for asset presentation data.

    Provides methods for:
    - Building filtered asset queries
    - Paginating asset lists
    - Listing history, notes and maintenance records
    """

    @staticmethod
    def build_filtered_query(
        search: Optional[str] = None,
        status: Optional[str] = None,
        category_id: Optional[int] = None,
        department_id: Optional[int] = None,
        sort_by: str = 'created_at',
        sort_order: str = 'desc'
    ):
        """
        Build a filtered asset query.

        Args:
            search: Partial, case-insensitive match on name, asset tag or serial number
            status: Filter by status
            category_id: Filter by category
            department_id: Filter by department
            sort_by: One of SORTABLE_FIELDS (unknown values fall back to created_at)
            sort_order: 'asc' or 'desc'

        Returns:
            SQLAlchemy query object
        """
        query = (Asset.query
                 .outerjoin(Category, Asset.category_id == Category.id)
                 .outerjoin(Department, Asset.department_id == Department.id)
                 .outerjoin(User, Asset.assigned_to_id == User.id))

        if search:
            pattern = f'%{search}%'
            query = query.filter(or_(
                Asset.name.ilike(pattern),
                Asset.asset_tag.ilike(pattern),
                Asset.serial_number.ilike(pattern),
            ))

        if status:
            query = query.filter(Asset.status == status)

        if category_id:
            query = query.filter(Asset.category_id == category_id)

        if department_id:
            query = query.filter(Asset.department_id == department_id)

        column = SORTABLE_FIELDS.get(sort_by, Asset.created_at)
        ordering = column.asc() if sort_order == 'asc' else column.desc()
        # id keeps paging stable when the sort column has ties
        query = query.order_by(ordering, Asset.id.asc() if sort_order == 'asc' else Asset.id.desc())

        return query

    @staticmethod
    def get_list_data(args) -> Dict:
        """
        Get a page of assets with filters applied.

        Args:
            args: request.args (page, limit, search, status, category_id, department_id, sort_by, sort_order)

        Returns:
            dict with assets, total, page, limit and total_pages
        """
        page = max(args.get('page', 1, type=int) or 1, 1)
        limit = args.get('limit', DEFAULT_PAGE_SIZE, type=int) or DEFAULT_PAGE_SIZE
        limit = min(max(limit, 1), MAX_PAGE_SIZE)

        query = AssetService.build_filtered_query(
            search=(args.get('search') or '').strip() or None,
            status=args.get('status') or None,
            category_id=args.get('category_id', type=int),
            department_id=args.get('department_id', type=int),
            sort_by=args.get('sort_by', 'created_at'),
            sort_order=args.get('sort_order', 'desc'),
        )

        pagination = query.paginate(page=page, per_page=limit, error_out=False)

        return {
            'assets': [asset.to_dict() for asset in pagination.items],
            'total': pagination.total,
            'page': page,
            'limit': limit,
            'total_pages': pagination.pages,
        }

    @staticmethod
    def get_history(asset_id: int, action: Optional[str] = None,
                    start_date=None, end_date=None) -> List[AssetHistory]:
        """
        History entries for an asset, newest first.

        Args:
            asset_id: Asset ID
            action: Only entries of this HistoryAction
            start_date: Inclusive lower bound (date)
            end_date: Inclusive upper bound (date, whole day)
        """
        query = AssetHistory.query.filter(AssetHistory.asset_id == asset_id)
        if action:
            query = query.filter(AssetHistory.action == action)
        if start_date:
            query = query.filter(AssetHistory.timestamp >= datetime.combine(start_date, time.min))
        if end_date:
            query = query.filter(AssetHistory.timestamp <= datetime.combine(end_date, time.max))
        return query.order_by(AssetHistory.timestamp.desc(), AssetHistory.id.desc()).all()

    @staticmethod
    def get_notes(asset_id: int) -> List[AssetNote]:
        return (AssetNote.query.filter_by(asset_id=asset_id)
                .order_by(AssetNote.created_at.desc(), AssetNote.id.desc()).all())

    @staticmethod
    def get_maintenance_records(asset_id: int) -> List[MaintenanceRecord]:
        return (MaintenanceRecord.query.filter_by(asset_id=asset_id)
                .order_by(MaintenanceRecord.scheduled_date.desc(), MaintenanceRecord.id.desc()).all())
