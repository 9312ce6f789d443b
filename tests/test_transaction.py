import hashlib
import struct

from cryptography.hazmat.primitives.asymmetric.ed25519 import Ed25519PublicKey

from zkship.config import MAX_GAS
from zkship.transaction import FunctionCallTransaction, sign_transaction


def borsh_string(value: bytes) -> bytes:
    return struct.pack('<I', len(value)) + value


def make_tx(key_pair, args=b'{"seal_str": "AP8="}'):
    return FunctionCallTransaction(
        signer_id='alice.testnet',
        public_key=key_pair.public_key_bytes,
        nonce=42,
        receiver_id='game.testnet',
        block_hash=bytes(range(32)),
        method_name='verify',
        args=args,
        gas=MAX_GAS,
    )


def test_serialize_layout(key_pair):
    tx = make_tx(key_pair)
    expected = b''.join([
        borsh_string(b'alice.testnet'),
        b'\x00', key_pair.public_key_bytes,
        struct.pack('<Q', 42),
        borsh_string(b'game.testnet'),
        bytes(range(32)),
        struct.pack('<I', 1),
        b'\x02',
        borsh_string(b'verify'),
        borsh_string(b'{"seal_str": "AP8="}'),
        struct.pack('<Q', MAX_GAS),
        (0).to_bytes(16, 'little'),
    ])
    assert tx.serialize() == expected


def test_signed_transaction_carries_valid_signature(key_pair):
    tx = make_tx(key_pair)
    signed = sign_transaction(tx, key_pair)
    body, key_type, signature = signed[:-65], signed[-65], signed[-64:]

    assert body == tx.serialize()
    assert key_type == 0
    public_key = Ed25519PublicKey.from_public_bytes(key_pair.public_key_bytes)
    public_key.verify(signature, hashlib.sha256(body).digest())
