"""
Enumerations for asset records
Values are stored as plain strings in the database; labels are what the
web client shows in its status and condition badges.
"""

import enum


class LabeledEnum(str, enum.Enum):

    @property
    def label(self):
        return self.value.replace('_', ' ').title()

    @classmethod
    def values(cls):
        return [member.value for member in cls]


class AssetStatus(LabeledEnum):
    ACTIVE = 'ACTIVE'
    ASSIGNED = 'ASSIGNED'
    MAINTENANCE = 'MAINTENANCE'
    RETIRED = 'RETIRED'


class AssetCondition(LabeledEnum):
    NEW = 'NEW'
    GOOD = 'GOOD'
    FAIR = 'FAIR'
    POOR = 'POOR'
    DAMAGED = 'DAMAGED'


class MaintenanceType(LabeledEnum):
    PREVENTIVE = 'PREVENTIVE'
    CORRECTIVE = 'CORRECTIVE'
    SCHEDULED = 'SCHEDULED'


class HistoryAction(LabeledEnum):
    CREATED = 'CREATED'
    UPDATED = 'UPDATED'
    STATUS_CHANGED = 'STATUS_CHANGED'
    TRANSFERRED = 'TRANSFERRED'
    NOTE_ADDED = 'NOTE_ADDED'
    MAINTENANCE_SCHEDULED = 'MAINTENANCE_SCHEDULED'
    ONCHAIN_REGISTERED = 'ONCHAIN_REGISTERED'
    ONCHAIN_FAILED = 'ONCHAIN_FAILED'


class OnChainStatus(LabeledEnum):
    PENDING = 'pending'
    CONFIRMED = 'confirmed'
    FAILED = 'failed'
