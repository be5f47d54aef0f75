"""
Error taxonomy for the Stellar registration bridge.

Every failure surfaces as a StellarError subclass; nothing is retried here,
callers decide whether to register again.
"""


class StellarError(RuntimeError):
    """Base class for bridge failures"""

    def __init__(self, message, tx_hash=None):
        super().__init__(message)
        self.tx_hash = tx_hash


class StellarConfigError(StellarError):
    """Required settings are missing or invalid; the bridge stays disabled"""


class SimulationError(StellarError):
    """The read-only dry run reported an error; nothing was submitted"""


class SubmissionError(StellarError):
    """The network rejected the transaction at submission time"""

    def __init__(self, message, error_payload=None, tx_hash=None):
        super().__init__(message, tx_hash=tx_hash)
        self.error_payload = error_payload


class TransactionFailedError(StellarError):
    """The transaction was included but its execution failed on-chain"""


class ConfirmationTimeoutError(StellarError):
    """The poll budget ran out; the transaction may still confirm later"""

    def __init__(self, message, tx_hash=None, attempts=0):
        super().__init__(message, tx_hash=tx_hash)
        self.attempts = attempts


class RegistrationCancelledError(StellarError):
    """The caller set its cancellation token while confirmation was pending"""


class RpcError(StellarError):
    """The RPC endpoint was unreachable or rejected a request"""
