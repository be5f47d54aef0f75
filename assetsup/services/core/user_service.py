"""
User Service
Presentation service for user-related data retrieval.

Handles:
- Query building and filtering for user list views
"""

from typing import Optional
from assetsup.data.core.user_info.user import User


class UserService:
    """
    Service for user presentation data.
    """

    @staticmethod
    def build_filtered_query(
        search: Optional[str] = None,
        active: Optional[bool] = True
    ):
        """
        Build a filtered user query.

        Args:
            search: Partial match on email, first or last name
            active: Filter by active status (None for all users)

        Returns:
            SQLAlchemy query object
        """
        query = User.query

        if active is not None:
            query = query.filter(User.is_active == active)

        if search:
            pattern = f'%{search}%'
            query = query.filter(
                User.email.ilike(pattern) |
                User.first_name.ilike(pattern) |
                User.last_name.ilike(pattern)
            )

        return query.order_by(User.first_name, User.last_name, User.id)

    @staticmethod
    def get_list_data(args):
        """
        Users for assignment pickers.

        Args:
            args: request.args (search, include_inactive)
        """
        include_inactive = (args.get('include_inactive') or '').lower() == 'true'
        query = UserService.build_filtered_query(
            search=(args.get('search') or '').strip() or None,
            active=None if include_inactive else True,
        )
        return [user.to_summary() for user in query.all()]
