"""
zkship - NEAR submitter for RISC Zero seals and battleship receipts

Fetch receipts from the local proving service and relay them to the
battleship contract.
"""

from .config import MAX_GAS, NearConfig, Settings
from .models import (
    GameState,
    Position,
    RoundParams,
    RoundResult,
    Ship,
    ShipDirection,
    default_state,
    random_state,
    load_state,
    validate_state,
)
from .outcome import (
    OutcomeSummary,
    format_near_amount,
    parse_near_amount,
    summarize_outcome,
)
from .prover import ProverClient, TurnProof
from .rpc import Account, JsonRpcProvider, Near
from .runner import CallReport, Runner, read_seal
from .wallet import KeyPair, UnencryptedFileSystemKeyStore
from .errors import (
    SdkError,
    InvalidConfigError,
    InvalidBoardError,
    CredentialError,
    SealFileError,
    ProofServiceError,
    ProverUnavailableError,
    ProverTimeoutError,
    ProverRejectedError,
    InvalidReceiptError,
    NetworkError,
    TransactionFailedError,
)

__version__ = "0.1.0"
__all__ = [
    # Core classes
    "Runner",
    "CallReport",
    "ProverClient",
    "TurnProof",
    "Near",
    "Account",
    "JsonRpcProvider",
    "KeyPair",
    "UnencryptedFileSystemKeyStore",
    # Config
    "MAX_GAS",
    "NearConfig",
    "Settings",
    # Types
    "GameState",
    "Position",
    "RoundParams",
    "RoundResult",
    "Ship",
    "ShipDirection",
    "OutcomeSummary",
    # Functions
    "default_state",
    "random_state",
    "load_state",
    "validate_state",
    "format_near_amount",
    "parse_near_amount",
    "summarize_outcome",
    "read_seal",
    # Errors
    "SdkError",
    "InvalidConfigError",
    "InvalidBoardError",
    "CredentialError",
    "SealFileError",
    "ProofServiceError",
    "ProverUnavailableError",
    "ProverTimeoutError",
    "ProverRejectedError",
    "InvalidReceiptError",
    "NetworkError",
    "TransactionFailedError",
]
