"""
zkship - RPC Module

NEAR JSON-RPC provider, connection and account handles.
Similar in spirit to near-api-js ``connect`` / ``account.functionCall``.
"""

import base64
import json
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

import base58
import requests

from .config import MAX_GAS, NearConfig
from .errors import NetworkError, TransactionFailedError
from .outcome import outcome_failure
from .transaction import FunctionCallTransaction, sign_transaction
from .wallet import KeyPair, UnencryptedFileSystemKeyStore

logger = logging.getLogger(__name__)

FINAL = {'finality': 'final'}


def _is_execution_error(error: Any) -> bool:
    if not isinstance(error, dict):
        return False
    data = error.get('data')
    if isinstance(data, dict) and 'TxExecutionError' in data:
        return True
    cause = error.get('cause')
    return isinstance(cause, dict) and cause.get('name') == 'INVALID_TRANSACTION'


class JsonRpcProvider:
    """
    Thin JSON-RPC client for a NEAR node.

    Example:
        >>> provider = JsonRpcProvider('https://rpc.testnet.near.org')
        >>> provider.block()['header']['height']
    """

    def __init__(
        self,
        url: str,
        timeout: Optional[int] = 30,
        session: Optional[requests.Session] = None
    ):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self._request_id = 0

    def send_json_rpc(self, method: str, params: Any) -> Any:
        """
        Issue a JSON-RPC call and return its ``result``.

        Raises:
            NetworkError: On transport failure or a JSON-RPC error object
        """
        self._request_id += 1
        payload = {
            'jsonrpc': '2.0',
            'id': self._request_id,
            'method': method,
            'params': params,
        }
        logger.debug("rpc %s -> %s", method, self.url)
        try:
            response = self.session.post(self.url, json=payload, timeout=self.timeout)
            response.raise_for_status()
            body = response.json()
        except requests.exceptions.RequestException as e:
            raise NetworkError(f"rpc {method} failed: {e}") from e
        except ValueError as e:
            raise NetworkError(f"rpc {method} returned invalid JSON: {e}") from e

        if body.get('error') is not None:
            error = body['error']
            raise NetworkError(f"rpc {method} error: {json.dumps(error)}", error)
        return body.get('result')

    def query(self, request_type: str, **params) -> Dict[str, Any]:
        result = self.send_json_rpc('query', dict(FINAL, request_type=request_type, **params))
        if isinstance(result, dict) and result.get('error'):
            raise NetworkError(f"query {request_type} error: {result['error']}", result)
        return result

    def block(self) -> Dict[str, Any]:
        return self.send_json_rpc('block', FINAL)

    def protocol_config(self) -> Dict[str, Any]:
        return self.send_json_rpc('EXPERIMENTAL_protocol_config', FINAL)

    def send_transaction(self, signed_tx: bytes) -> Dict[str, Any]:
        """
        Broadcast a signed transaction and wait for its final outcome.

        Raises:
            TransactionFailedError: If the node rejects the transaction
            NetworkError: On any other RPC failure
        """
        encoded = base64.b64encode(signed_tx).decode()
        try:
            return self.send_json_rpc('broadcast_tx_commit', [encoded])
        except NetworkError as e:
            if _is_execution_error(e.error):
                raise TransactionFailedError(e.error) from e
            raise


@dataclass
class AccountBalance:
    """Balances in yoctoNEAR."""
    total: int
    state_staked: int
    staked: int
    available: int


class Account:
    """
    Signing account bound to a connection.

    Example:
        >>> account = near.account('alice.testnet')
        >>> outcome = account.function_call('game.testnet', 'turn', args)
    """

    def __init__(self, provider: JsonRpcProvider, account_id: str, key_pair: KeyPair):
        self.provider = provider
        self.account_id = account_id
        self.key_pair = key_pair

    def state(self) -> Dict[str, Any]:
        return self.provider.query('view_account', account_id=self.account_id)

    def get_account_balance(self) -> AccountBalance:
        """Split the account amount into staked, storage-locked and available parts."""
        config = self.provider.protocol_config()
        state = self.state()
        cost_per_byte = int(config['runtime_config']['storage_amount_per_byte'])
        state_staked = int(state['storage_usage']) * cost_per_byte
        staked = int(state['locked'])
        total = int(state['amount']) + staked
        return AccountBalance(
            total=total,
            state_staked=state_staked,
            staked=staked,
            available=total - max(staked, state_staked),
        )

    def function_call(
        self,
        contract_id: str,
        method_name: str,
        args: Dict[str, Any],
        gas: int = MAX_GAS,
        deposit: int = 0
    ) -> Dict[str, Any]:
        """
        Call a contract method and block until the chain reports the outcome.

        Args:
            contract_id: Receiver contract account
            method_name: Method to invoke
            args: JSON arguments
            gas: Gas ceiling
            deposit: Attached yoctoNEAR

        Returns:
            Final execution outcome

        Raises:
            TransactionFailedError: If execution failed; carries the raw failure
        """
        access_key = self.provider.query(
            'view_access_key',
            account_id=self.account_id,
            public_key=self.key_pair.public_key,
        )
        block_hash = base58.b58decode(self.provider.block()['header']['hash'])

        tx = FunctionCallTransaction(
            signer_id=self.account_id,
            public_key=self.key_pair.public_key_bytes,
            nonce=int(access_key['nonce']) + 1,
            receiver_id=contract_id,
            block_hash=block_hash,
            method_name=method_name,
            args=json.dumps(args).encode('utf-8'),
            gas=gas,
            deposit=deposit,
        )
        logger.info("calling %s.%s as %s", contract_id, method_name, self.account_id)
        outcome = self.provider.send_transaction(sign_transaction(tx, self.key_pair))

        failure = outcome_failure(outcome)
        if failure is not None:
            raise TransactionFailedError(failure, outcome)
        return outcome


class Near:
    """Connection to a NEAR network: config, key store and RPC provider."""

    def __init__(
        self,
        config: NearConfig,
        provider: Optional[JsonRpcProvider] = None,
        key_store: Optional[UnencryptedFileSystemKeyStore] = None
    ):
        self.config = config
        self.provider = provider or JsonRpcProvider(config.node_url, timeout=config.timeout)
        self.key_store = key_store or UnencryptedFileSystemKeyStore(config.key_store)

    def account(self, account_id: str) -> Account:
        key_pair = self.key_store.get_key(self.config.network_id, account_id)
        return Account(self.provider, account_id, key_pair)

    def connect(self) -> Dict[str, Any]:
        """
        Check the node answers and return its status.

        Raises:
            NetworkError: If the RPC endpoint is unreachable
        """
        status = self.provider.send_json_rpc('status', [])
        chain_id = status.get('chain_id') if isinstance(status, dict) else None
        logger.debug("connected to %s (chain %s)", self.config.node_url, chain_id)
        return status


def view_function(
    provider: JsonRpcProvider,
    contract_id: str,
    method_name: str,
    args: Dict[str, Any]
) -> Any:
    """Run a read-only contract method and decode its JSON result."""
    result = provider.query(
        'call_function',
        account_id=contract_id,
        method_name=method_name,
        args_base64=base64.b64encode(json.dumps(args).encode('utf-8')).decode(),
    )
    raw = bytes(result.get('result') or [])
    if not raw:
        return None
    return json.loads(raw.decode('utf-8'))
