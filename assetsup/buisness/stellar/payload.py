"""
On-chain asset record construction

Turns a registry Asset into the argument of the contract's register_asset
function. Keys are Soroban symbols in alphabetical order; values use the
fixed-width types the contract expects.
"""

import time
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from stellar_sdk import scval
from stellar_sdk import xdr as stellar_xdr
from assetsup.buisness.stellar.identifiers import derive_asset_id
from assetsup.data.core.asset_info.asset_enums import AssetStatus

RETIRED_TAG = 'Retired'
ACTIVE_TAG = 'Active'


def to_cents(amount) -> int:
    """Monetary value to integer cents, rounding half up at the cent boundary"""
    if amount is None:
        return 0
    value = amount if isinstance(amount, Decimal) else Decimal(str(amount))
    return int((value * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def map_status(status) -> str:
    """
    Closed mapping onto the contract's status variants.

    RETIRED becomes "Retired"; every other value, including ones added to
    AssetStatus later, becomes "Active".
    """
    if getattr(status, 'value', status) == AssetStatus.RETIRED.value:
        return RETIRED_TAG
    return ACTIVE_TAG


@dataclass(frozen=True)
class OnChainAssetRecord:
    id: bytes
    name: str
    description: str
    category: str
    owner: str
    purchase_value: int
    registration_timestamp: int
    status: str
    last_transfer_timestamp: int = 0
    metadata_uri: str = ''

    @classmethod
    def from_asset(cls, asset, owner: str, now: int = None):
        """
        Args:
            asset: registry Asset (uuid, name, description, category, status, purchase_price)
            owner: public key of the signing identity
            now: registration time in unix seconds, defaults to the current time
        """
        category = asset.category.name if asset.category is not None else ''
        return cls(
            id=derive_asset_id(asset.uuid).digest,
            name=asset.name,
            description=asset.description or '',
            category=category,
            owner=owner,
            purchase_value=to_cents(asset.purchase_price),
            registration_timestamp=int(time.time()) if now is None else int(now),
            status=map_status(asset.status),
        )

    def to_scval(self) -> stellar_xdr.SCVal:
        fields = {
            'category': scval.to_string(self.category),
            'custom_attributes': scval.to_vec([]),
            'description': scval.to_string(self.description),
            'id': scval.to_bytes(self.id),
            'last_transfer_timestamp': scval.to_uint64(self.last_transfer_timestamp),
            'metadata_uri': scval.to_string(self.metadata_uri),
            'name': scval.to_string(self.name),
            'owner': scval.to_address(self.owner),
            'purchase_value': scval.to_int128(self.purchase_value),
            'registration_timestamp': scval.to_uint64(self.registration_timestamp),
            'status': scval.to_vec([scval.to_symbol(self.status)]),
        }
        # the host rejects maps whose keys are not sorted
        return scval.to_struct(dict(sorted(fields.items())))
