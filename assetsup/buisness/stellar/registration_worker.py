"""
Background registration of newly created assets.

Asset creation must not wait up to a minute for ledger confirmation, so the
bridge call runs on a small thread pool inside its own application context.
The outcome is recorded on the asset by AssetContext.register_on_chain.
"""

import threading
from concurrent.futures import ThreadPoolExecutor, Future
from typing import Optional
from assetsup import db
from assetsup.buisness.stellar.errors import StellarError
from assetsup.utils.logger import get_logger

logger = get_logger("assetsup.stellar.worker")


class RegistrationWorker:

    def __init__(self, app, max_workers: int = 2):
        self._app = app
        self._max_workers = max_workers
        self._executor = None
        self._lock = threading.Lock()

    @property
    def service(self):
        return self._app.extensions['stellar']

    def _get_executor(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=self._max_workers,
                                                    thread_name_prefix='stellar-registration')
            return self._executor

    def schedule(self, asset_id: int, performed_by_id: Optional[int] = None) -> Optional[Future]:
        """Queue a registration; returns None when the bridge is disabled"""
        if not self.service.is_enabled:
            return None
        logger.info(f"Scheduling on-chain registration for asset {asset_id}")
        future = self._get_executor().submit(self.run, asset_id, performed_by_id)
        future.add_done_callback(lambda done: self._log_unhandled(asset_id, done))
        return future

    @staticmethod
    def _log_unhandled(asset_id: int, future: Future):
        if future.cancelled():
            logger.warning(f"On-chain registration of asset {asset_id} was cancelled before it ran")
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Background registration of asset {asset_id} crashed: {error}",
                         exc_info=(type(error), error, error.__traceback__))

    def run(self, asset_id: int, performed_by_id: Optional[int] = None) -> Optional[str]:
        from assetsup.buisness.core.asset_context import AssetContext
        from assetsup.data.core.asset_info.asset import Asset

        with self._app.app_context():
            asset = db.session.get(Asset, asset_id)
            if asset is None:
                logger.warning(f"Asset {asset_id} disappeared before on-chain registration")
                return None
            try:
                return AssetContext(asset).register_on_chain(self.service, performed_by_id=performed_by_id)
            except StellarError as e:
                # already recorded on the asset row and in its history
                logger.error(f"Background registration of asset {asset_id} failed: {e}", exc_info=True)
                return None

    def shutdown(self, wait: bool = True):
        with self._lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None
