"""
zkship - Prover Module

Client for the local proving service that turns board states into receipts.
"""

import logging
from dataclasses import dataclass
from typing import Optional

import requests
from pydantic import ValidationError

from .config import DEFAULT_PROVER_URL
from .errors import (
    InvalidReceiptError,
    ProverRejectedError,
    ProverTimeoutError,
    ProverUnavailableError,
)
from .models import GameState, RoundParams, RoundResult

logger = logging.getLogger(__name__)


@dataclass
class TurnProof:
    """Receipt for a processed shot plus the board it produced."""
    receipt: str
    result: Optional[RoundResult] = None


class ProverClient:
    """
    Proving service client.

    Example:
        >>> prover = ProverClient('http://127.0.0.1:3000')
        >>> receipt = prover.prove_init(state)
    """

    def __init__(
        self,
        url: str = DEFAULT_PROVER_URL,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None
    ):
        self.url = url.rstrip('/')
        self.timeout = timeout
        self.session = session or requests.Session()

    def _post(self, path: str, payload: dict) -> requests.Response:
        endpoint = f'{self.url}{path}'
        logger.debug("POST %s", endpoint)
        try:
            response = self.session.post(endpoint, json=payload, timeout=self.timeout)
        except requests.exceptions.ConnectionError as e:
            raise ProverUnavailableError(
                f"proving service unreachable at {endpoint}: {e}"
            ) from e
        except requests.exceptions.Timeout as e:
            raise ProverTimeoutError(
                f"proving service at {endpoint} timed out after {self.timeout}s: {e}"
            ) from e
        except requests.exceptions.RequestException as e:
            raise ProverUnavailableError(
                f"proving service unreachable at {endpoint}: {e}"
            ) from e

        if not response.ok:
            raise ProverRejectedError(path, response.status_code, response.text)
        return response

    def prove_init(self, state: GameState) -> str:
        """
        Prove a fresh board.

        The service answers with the receipt as the plain response body.

        Args:
            state: Board to commit to

        Returns:
            Receipt string, unmodified
        """
        response = self._post('/prove/init', state.to_json())
        receipt = response.text.strip()
        if receipt.startswith('{'):
            try:
                receipt = response.json().get('receipt') or ''
            except ValueError:
                pass
        if not receipt:
            raise InvalidReceiptError("/prove/init returned an empty receipt")
        logger.info("init receipt received (%d chars)", len(receipt))
        return receipt

    def prove_turn(self, params: RoundParams) -> TurnProof:
        """
        Prove the outcome of a shot against the board.

        Args:
            params: Board and incoming shot

        Returns:
            TurnProof with the receipt and, when present, the round result
        """
        response = self._post('/prove/turn', params.to_json())
        try:
            body = response.json()
        except ValueError as e:
            raise InvalidReceiptError(f"/prove/turn returned invalid JSON: {e}") from e

        receipt = body.get('receipt') if isinstance(body, dict) else None
        if not isinstance(receipt, str) or not receipt:
            raise InvalidReceiptError("/prove/turn response has no receipt field")

        result = None
        if body.get('state') is not None:
            try:
                result = RoundResult.model_validate(body['state'])
            except ValidationError:
                logger.warning("ignoring unparseable round result from /prove/turn")
        logger.info("turn receipt received (%d chars)", len(receipt))
        return TurnProof(receipt=receipt, result=result)
