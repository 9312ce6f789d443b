"""
zkship - Runner Module

One forward pass per operation:
credential load -> proof fetch -> connect -> contract call -> totals.
"""

import base64
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from .config import DEFAULT_SEAL_PATH, Settings
from .errors import SealFileError
from .models import GameState, Position, RoundParams, RoundResult, validate_state
from .outcome import OutcomeSummary, format_near_amount, summarize_outcome
from .prover import ProverClient
from .rpc import Account, AccountBalance, JsonRpcProvider, Near, view_function
from .wallet import UnencryptedFileSystemKeyStore

logger = logging.getLogger(__name__)


@dataclass
class CallReport:
    """What a contract call sent and what it cost."""
    method: str
    args: Dict[str, Any]
    outcome: Dict[str, Any]
    summary: OutcomeSummary
    balance: Optional[AccountBalance] = None
    round_result: Optional[RoundResult] = None


def read_seal(path: Union[str, Path]) -> str:
    """
    Read a seal artifact and base64 encode it.

    Raises:
        SealFileError: If the file cannot be read
    """
    try:
        content = Path(path).read_bytes()
    except OSError as e:
        raise SealFileError(f"cannot read seal {path}: {e}") from e
    return base64.b64encode(content).decode('ascii')


class Runner:
    """
    Submits seals and game moves for one configured account.

    Example:
        >>> runner = Runner(Settings.from_env())
        >>> report = runner.turn('my_fun_game', default_state(), Position(x=5, y=5))
        >>> print(report.summary.total_gas_burnt)
    """

    def __init__(
        self,
        settings: Settings,
        prover: Optional[ProverClient] = None,
        provider: Optional[JsonRpcProvider] = None,
        key_store: Optional[UnencryptedFileSystemKeyStore] = None,
        with_balance: bool = False,
        progress: Optional[Callable[[str], None]] = None
    ):
        self.settings = settings
        self.prover = prover or ProverClient(settings.prover_url, timeout=settings.prover_timeout)
        self.near = Near(settings.near, provider=provider, key_store=key_store)
        self.with_balance = with_balance
        self.progress = progress or logger.info

    def _account(self) -> Account:
        return self.near.account(self.settings.account_id)

    def _connect(self):
        status = self.near.connect()
        chain_id = status.get('chain_id') if isinstance(status, dict) else None
        self.progress(f"Connected to {self.settings.near.node_url} (chain {chain_id})")

    def _invoke(self, account: Account, method: str, args: Dict[str, Any]) -> CallReport:
        self._connect()

        balance = None
        if self.with_balance:
            balance = account.get_account_balance()
            self.progress(
                f"Balance: {format_near_amount(balance.available)} NEAR available"
                f" of {format_near_amount(balance.total)}"
            )

        outcome = account.function_call(
            self.settings.contract_id,
            method,
            args,
            gas=self.settings.gas,
        )
        summary = summarize_outcome(outcome)
        logger.info(
            "%s burnt %d gas over %d receipts",
            method, summary.total_gas_burnt, summary.receipt_count
        )
        return CallReport(method=method, args=args, outcome=outcome,
                          summary=summary, balance=balance)

    def submit_seal(self, seal_path: Union[str, Path] = DEFAULT_SEAL_PATH) -> CallReport:
        """Call ``verify`` with the base64 of the seal file."""
        seal = read_seal(seal_path)
        account = self._account()
        return self._invoke(account, 'verify', {'seal_str': seal})

    def new_game(self, name: str, state: GameState) -> CallReport:
        """Commit to a board and open a game under ``name``."""
        validate_state(state)
        account = self._account()
        receipt = self.prover.prove_init(state)
        return self._invoke(account, 'new_game', {
            'name': name,
            'receipt_str': receipt,
        })

    def join_game(self, name: str, state: GameState, shot: Position) -> CallReport:
        """Commit to a board, join ``name`` and fire the first shot."""
        validate_state(state)
        account = self._account()
        receipt = self.prover.prove_init(state)
        return self._invoke(account, 'join_game', {
            'name': name,
            'receipt_str': receipt,
            'shot_x': shot.x,
            'shot_y': shot.y,
        })

    def turn(
        self,
        name: str,
        state: GameState,
        shot: Position,
        incoming: Optional[Position] = None
    ) -> CallReport:
        """
        Prove the opponent's last shot against our board and fire ``shot``.

        Args:
            name: Game name
            state: Our board
            shot: Coordinate we fire at
            incoming: Opponent shot to prove; defaults to ``shot``

        Returns:
            CallReport including the proven round result when available
        """
        validate_state(state)
        account = self._account()
        proof = self.prover.prove_turn(RoundParams(state=state, shot=incoming or shot))
        report = self._invoke(account, 'turn', {
            'name': name,
            'shot_x': shot.x,
            'shot_y': shot.y,
            'receipt_str': proof.receipt,
        })
        report.round_result = proof.result
        return report

    def game_state(self, name: str) -> Any:
        """Read the contract's view of a game; None if it does not exist."""
        self._connect()
        return view_function(self.near.provider, self.settings.contract_id,
                             'game_state', {'name': name})
