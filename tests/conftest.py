import json

import base58
import pytest
import requests

from zkship.config import NearConfig, Settings
from zkship.prover import ProverClient
from zkship.rpc import JsonRpcProvider
from zkship.wallet import KeyPair

ACCOUNT_ID = "dev-1649632081005-14076690372915"
BLOCK_HASH = bytes(range(32))


class FakeResponse:
    def __init__(self, status_code=200, body=None, text=None):
        self.status_code = status_code
        self._body = body
        if text is None:
            text = json.dumps(body) if body is not None else ''
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        if self._body is None:
            return json.loads(self.text)
        return self._body

    def raise_for_status(self):
        if not self.ok:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """
    Stand-in for requests.Session.

    ``routes`` maps a URL suffix (``/prove/init``), an RPC method
    (``broadcast_tx_commit``) or ``query:<request_type>`` to a FakeResponse,
    a plain JSON-RPC result, or an exception instance to raise.
    """

    def __init__(self, routes=None):
        self.routes = dict(routes or {})
        self.calls = []

    def _route(self, url, payload):
        for suffix in ('/prove/init', '/prove/turn'):
            if url.endswith(suffix):
                return suffix
        method = payload['method']
        if method == 'query':
            return f"query:{payload['params']['request_type']}"
        return method

    def post(self, url, json=None, timeout=None):
        key = self._route(url, json)
        self.calls.append((key, url, json))
        if key not in self.routes:
            raise AssertionError(f"unexpected request {key}")
        reply = self.routes[key]
        if isinstance(reply, Exception):
            raise reply
        if isinstance(reply, FakeResponse):
            return reply
        return FakeResponse(body={'jsonrpc': '2.0', 'id': json['id'], 'result': reply})

    def keys(self):
        return [key for key, _, _ in self.calls]


def make_outcome(tx_gas=2428136082146, tx_tokens="242813608214600000000",
                 receipts=(), status=None):
    return {
        'status': status if status is not None else {'SuccessValue': ''},
        'transaction': {},
        'transaction_outcome': {
            'id': 'tx',
            'outcome': {'gas_burnt': tx_gas, 'tokens_burnt': tx_tokens},
        },
        'receipts_outcome': [
            {'id': f'r{i}', 'outcome': {'gas_burnt': gas, 'tokens_burnt': tokens}}
            for i, (gas, tokens) in enumerate(receipts)
        ],
    }


def chain_routes(outcome=None):
    return {
        'status': {'chain_id': 'testnet'},
        'query:view_access_key': {'nonce': 41, 'permission': 'FullAccess'},
        'block': {'header': {'hash': base58.b58encode(BLOCK_HASH).decode()}},
        'EXPERIMENTAL_protocol_config': {
            'runtime_config': {'storage_amount_per_byte': '10000000000000000000'}},
        'query:view_account': {
            'amount': str(5 * 10 ** 24), 'locked': '0', 'storage_usage': 1000},
        'broadcast_tx_commit': outcome if outcome is not None else make_outcome(),
    }


@pytest.fixture
def key_pair():
    return KeyPair.generate()


@pytest.fixture
def credentials_dir(tmp_path, key_pair):
    base = tmp_path / 'credentials'
    (base / 'testnet').mkdir(parents=True)
    with open(base / 'testnet' / f'{ACCOUNT_ID}.json', 'w') as f:
        json.dump({
            'account_id': ACCOUNT_ID,
            'public_key': key_pair.public_key,
            'private_key': key_pair.secret_key,
        }, f)
    return base


@pytest.fixture
def settings(credentials_dir):
    near = NearConfig.for_network('testnet', key_store=credentials_dir,
                                  node_url='http://rpc.test')
    return Settings(near=near, account_id=ACCOUNT_ID, prover_url='http://127.0.0.1:3000')


@pytest.fixture
def rpc_session():
    return FakeSession(chain_routes())


@pytest.fixture
def prover_session():
    return FakeSession()


@pytest.fixture
def provider(rpc_session):
    return JsonRpcProvider('http://rpc.test', session=rpc_session)


@pytest.fixture
def prover(prover_session):
    return ProverClient('http://127.0.0.1:3000', session=prover_session)
