"""
Stellar Service
Mirrors registry assets onto the Soroban asset contract.

Flow for one registration (strictly sequential):
    build -> simulate -> assemble -> sign -> submit -> poll for confirmation

A simulation or submission error aborts immediately. After submission the
transaction status is polled at a fixed interval until it succeeds, fails,
or the attempt budget runs out. Nothing is retried.
"""

import enum
import threading
from contextlib import contextmanager
from typing import Optional
from stellar_sdk import Keypair, SorobanServer, TransactionBuilder
from stellar_sdk.exceptions import SdkError
from stellar_sdk.soroban_rpc import GetTransactionStatus, SendTransactionStatus
from assetsup.buisness.stellar.config import StellarConfig
from assetsup.buisness.stellar.errors import (
    SimulationError,
    SubmissionError,
    TransactionFailedError,
    ConfirmationTimeoutError,
    RegistrationCancelledError,
    RpcError,
)
from assetsup.buisness.stellar.identifiers import derive_asset_id, AssetIdentifier
from assetsup.buisness.stellar.payload import OnChainAssetRecord
from assetsup.utils.logger import get_logger

logger = get_logger("assetsup.stellar")

BASE_FEE = 100
TX_TIMEOUT_SECONDS = 300
REGISTER_FUNCTION = 'register_asset'
POLL_INTERVAL_SECONDS = 3.0
MAX_POLL_ATTEMPTS = 20


@contextmanager
def rpc_errors(step: str, tx_hash: Optional[str] = None):
    """Re-raise SDK and transport failures of an RPC call as RpcError"""
    try:
        yield
    except (SdkError, OSError) as e:
        # requests' exceptions derive from OSError
        raise RpcError(f"{step} failed: {e}", tx_hash=tx_hash) from e


class RegistrationState(enum.Enum):
    BUILT = 'BUILT'
    SIMULATED = 'SIMULATED'
    ASSEMBLED = 'ASSEMBLED'
    SIGNED = 'SIGNED'
    SUBMITTED = 'SUBMITTED'
    CONFIRMED = 'CONFIRMED'
    FAILED = 'FAILED'
    TIMED_OUT = 'TIMED_OUT'
    CANCELLED = 'CANCELLED'


class StellarService:
    """
    Bridge between the asset registry and the on-chain asset contract.

    One instance per application, created by the application factory from a
    StellarConfig. When the configuration is disabled the service is inert:
    is_enabled is False and register_asset returns None without touching the
    network.
    """

    def __init__(self, config: StellarConfig, server=None,
                 poll_interval: float = POLL_INTERVAL_SECONDS,
                 max_attempts: int = MAX_POLL_ATTEMPTS):
        self._config = config
        self._poll_interval = poll_interval
        self._max_attempts = max_attempts
        self._keypair = None
        self._server = None

        if not config.enabled:
            return

        self._keypair = Keypair.from_secret(config.secret_key)
        self._server = server if server is not None else SorobanServer(config.rpc_url)
        logger.info(f"Stellar integration enabled. Public key: {self._keypair.public_key}")

    @property
    def config(self) -> StellarConfig:
        return self._config

    @property
    def is_enabled(self) -> bool:
        return self._config.enabled

    @property
    def public_key(self) -> Optional[str]:
        return self._keypair.public_key if self._keypair else None

    def derive_asset_id(self, uid: str) -> AssetIdentifier:
        return derive_asset_id(uid)

    def register_asset(self, asset, cancel_token: Optional[threading.Event] = None) -> Optional[str]:
        """
        Register an asset on the contract and wait for confirmation.

        Args:
            asset: registry Asset
            cancel_token: optional event; setting it abandons the confirmation poll

        Returns:
            The confirmed transaction hash, or None when the bridge is disabled

        Raises:
            SimulationError, SubmissionError, TransactionFailedError,
            ConfirmationTimeoutError, RegistrationCancelledError, RpcError
        """
        if not self.is_enabled:
            logger.debug(f"Stellar disabled, skipping registration of asset {asset.uuid}")
            return None

        record = OnChainAssetRecord.from_asset(asset, owner=self._keypair.public_key)

        try:
            tx_hash = self._submit(asset, record)
        except RpcError:
            self._transition(asset, RegistrationState.FAILED)
            raise
        self._transition(asset, RegistrationState.SUBMITTED)
        logger.info(f"Transaction submitted: {tx_hash}, polling for confirmation...")

        try:
            self._poll_for_confirmation(tx_hash, cancel_token or threading.Event())
        except ConfirmationTimeoutError:
            self._transition(asset, RegistrationState.TIMED_OUT)
            raise
        except RegistrationCancelledError:
            self._transition(asset, RegistrationState.CANCELLED)
            raise
        except (TransactionFailedError, RpcError):
            self._transition(asset, RegistrationState.FAILED)
            raise

        self._transition(asset, RegistrationState.CONFIRMED)
        return tx_hash

    def _submit(self, asset, record: OnChainAssetRecord) -> str:
        with rpc_errors("Loading source account"):
            source = self._server.load_account(self._keypair.public_key)
        tx = (
            TransactionBuilder(
                source_account=source,
                network_passphrase=self._config.network_passphrase,
                base_fee=BASE_FEE,
            )
            .append_invoke_contract_function_op(
                contract_id=self._config.contract_id,
                function_name=REGISTER_FUNCTION,
                parameters=[record.to_scval()],
            )
            .set_timeout(TX_TIMEOUT_SECONDS)
            .build()
        )
        self._transition(asset, RegistrationState.BUILT)

        with rpc_errors("Simulation"):
            simulation = self._server.simulate_transaction(tx)
        if simulation.error:
            self._transition(asset, RegistrationState.FAILED)
            raise SimulationError(f"Simulation failed: {simulation.error}")
        self._transition(asset, RegistrationState.SIMULATED)

        # applies the simulated footprint, resource fee and auth entries
        with rpc_errors("Transaction assembly"):
            assembled = self._server.prepare_transaction(tx, simulation)
        self._transition(asset, RegistrationState.ASSEMBLED)

        assembled.sign(self._keypair)
        self._transition(asset, RegistrationState.SIGNED)

        with rpc_errors("Transaction submission"):
            send_result = self._server.send_transaction(assembled)
        if send_result.status == SendTransactionStatus.ERROR:
            self._transition(asset, RegistrationState.FAILED)
            raise SubmissionError(
                f"Transaction submission failed: {send_result.error_result_xdr}",
                error_payload=send_result.error_result_xdr,
                tx_hash=send_result.hash,
            )
        return send_result.hash

    def _poll_for_confirmation(self, tx_hash: str, cancel_token: threading.Event) -> str:
        for attempt in range(1, self._max_attempts + 1):
            if cancel_token.wait(self._poll_interval):
                raise RegistrationCancelledError(
                    f"Confirmation polling cancelled after {attempt - 1} attempts: {tx_hash}",
                    tx_hash=tx_hash)

            with rpc_errors("Confirmation poll", tx_hash=tx_hash):
                result = self._server.get_transaction(tx_hash)

            if result.status == GetTransactionStatus.SUCCESS:
                logger.info(f"Transaction confirmed: {tx_hash}")
                return tx_hash

            if result.status == GetTransactionStatus.FAILED:
                raise TransactionFailedError(f"Transaction failed on-chain: {tx_hash}", tx_hash=tx_hash)

            # NOT_FOUND: not yet in a closed ledger
            logger.debug(f"Poll attempt {attempt}/{self._max_attempts}: status={result.status}")

        raise ConfirmationTimeoutError(
            f"Transaction not confirmed after {self._max_attempts} attempts: {tx_hash}",
            tx_hash=tx_hash, attempts=self._max_attempts)

    def _transition(self, asset, state: RegistrationState):
        logger.debug(f"Registration of asset {asset.uuid}: {state.value}")
