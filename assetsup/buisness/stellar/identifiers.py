"""
Deterministic on-chain identifiers for registry records.
"""

import hashlib
from typing import NamedTuple


class AssetIdentifier(NamedTuple):
    digest: bytes
    hex: str


def derive_asset_id(uid: str) -> AssetIdentifier:
    """
    SHA-256 of the record's UUID string.

    The same input always yields the same 32 bytes.
    """
    digest = hashlib.sha256(uid.encode('utf-8')).digest()
    return AssetIdentifier(digest=digest, hex=digest.hex())
