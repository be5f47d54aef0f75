"""
Stellar bridge configuration

The settings are read once, when the application factory runs, into an
immutable StellarConfig that is handed to StellarService.
"""

from dataclasses import dataclass, replace
from typing import Mapping, Optional
from stellar_sdk import Keypair, Network
from stellar_sdk.strkey import StrKey
from assetsup.buisness.stellar.errors import StellarConfigError
from assetsup.utils.logger import get_logger

logger = get_logger("assetsup.stellar.config")

DEFAULT_RPC_URL = "https://soroban-testnet.stellar.org"


@dataclass(frozen=True)
class StellarConfig:
    enabled: bool = False
    rpc_url: str = DEFAULT_RPC_URL
    secret_key: Optional[str] = None
    contract_id: Optional[str] = None
    network_passphrase: str = Network.TESTNET_NETWORK_PASSPHRASE
    reason: Optional[str] = None

    def __repr__(self):
        # the signing key must never end up in logs
        return (f"StellarConfig(enabled={self.enabled}, rpc_url={self.rpc_url!r}, "
                f"contract_id={self.contract_id!r}, network_passphrase={self.network_passphrase!r})")

    @classmethod
    def disabled(cls, reason=None):
        return cls(enabled=False, reason=reason)

    @classmethod
    def from_mapping(cls, settings: Mapping):
        """
        Build the configuration from app.config or os.environ.

        The bridge is enabled only when STELLAR_ENABLED is exactly "true".
        Missing or invalid credentials fall back to a disabled configuration
        and are logged once.
        """
        if settings.get('STELLAR_ENABLED') != 'true':
            logger.info("Stellar integration is disabled (STELLAR_ENABLED != true)")
            return cls.disabled("STELLAR_ENABLED is not 'true'")

        config = cls(
            enabled=True,
            rpc_url=settings.get('STELLAR_RPC_URL') or DEFAULT_RPC_URL,
            secret_key=settings.get('STELLAR_SECRET_KEY') or None,
            contract_id=settings.get('STELLAR_CONTRACT_ID') or None,
            network_passphrase=settings.get('STELLAR_NETWORK_PASSPHRASE') or Network.TESTNET_NETWORK_PASSPHRASE,
        )
        try:
            config.validate()
        except StellarConfigError as e:
            logger.error(f"Stellar integration disabled: {e}")
            return replace(config, enabled=False, secret_key=None, reason=str(e))
        return config

    def validate(self):
        if not self.secret_key or not self.contract_id:
            raise StellarConfigError(
                "STELLAR_SECRET_KEY and STELLAR_CONTRACT_ID must be set when STELLAR_ENABLED=true")
        try:
            Keypair.from_secret(self.secret_key)
        except ValueError:
            raise StellarConfigError("STELLAR_SECRET_KEY is not a valid Stellar secret seed")
        try:
            StrKey.decode_contract(self.contract_id)
        except ValueError:
            raise StellarConfigError("STELLAR_CONTRACT_ID is not a valid contract address")
