"""
zkship - Errors Module

Exception hierarchy for seal and game-turn submission.
"""

import json
from typing import Any, Optional


class SdkError(Exception):
    """Base class for all zkship errors."""

    exit_code = 1


class InvalidConfigError(SdkError):
    """Configuration value is missing or out of range."""

    exit_code = 6


class InvalidBoardError(SdkError):
    """Board state does not describe a legal fleet."""

    exit_code = 6


class CredentialError(SdkError):
    """Account credential could not be loaded from the key store."""

    exit_code = 2


class SealFileError(SdkError):
    """Seal artifact could not be read."""

    exit_code = 2


class ProofServiceError(SdkError):
    """Proving service did not produce a receipt."""

    exit_code = 3


class ProverUnavailableError(ProofServiceError):
    """Proving service could not be reached."""


class ProverRejectedError(ProofServiceError):
    """Proving service answered with a non-success status."""

    def __init__(self, endpoint: str, status_code: int, body: str):
        self.endpoint = endpoint
        self.status_code = status_code
        self.body = body
        super().__init__(
            f"proving service rejected {endpoint} with HTTP {status_code}: {body}"
        )


class ProverTimeoutError(ProofServiceError):
    """Proving service accepted the request but did not answer in time."""


class InvalidReceiptError(ProofServiceError):
    """Proving service answered but the response carried no receipt."""


class NetworkError(SdkError):
    """RPC endpoint unreachable or returned a JSON-RPC error."""

    exit_code = 4

    def __init__(self, message: str, error: Optional[Any] = None):
        self.error = error
        super().__init__(message)


class TransactionFailedError(SdkError):
    """Contract call executed on chain and failed.

    ``failure`` is the raw failure object from the outcome status, untouched.
    """

    exit_code = 5

    def __init__(self, failure: Any, outcome: Optional[dict] = None):
        self.failure = failure
        self.outcome = outcome
        super().__init__(f"transaction failed: {json.dumps(failure, default=str)}")
