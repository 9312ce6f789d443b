"""
zkship - Transaction Module

Borsh layout of NEAR transactions carrying a single function call.
"""

import hashlib
from dataclasses import dataclass

import construct
from borsh_construct import CStruct, Enum, String, U8, U64, U128, Vec, Bytes

from .wallet import KeyPair

ED25519_KEY_TYPE = 0

PublicKeySchema = CStruct(
    "key_type" / U8,
    "data" / construct.Bytes(32),
)

SignatureSchema = CStruct(
    "key_type" / U8,
    "data" / construct.Bytes(64),
)

# Variant order follows the chain's Action enum; FunctionCall must stay at index 2.
Action = Enum(
    "CreateAccount",
    "DeployContract" / CStruct("code" / Bytes),
    "FunctionCall" / CStruct(
        "method_name" / String,
        "args" / Bytes,
        "gas" / U64,
        "deposit" / U128,
    ),
    "Transfer" / CStruct("deposit" / U128),
    enum_name="Action",
)

TransactionSchema = CStruct(
    "signer_id" / String,
    "public_key" / PublicKeySchema,
    "nonce" / U64,
    "receiver_id" / String,
    "block_hash" / construct.Bytes(32),
    "actions" / Vec(Action),
)

SignedTransactionSchema = CStruct(
    "transaction" / TransactionSchema,
    "signature" / SignatureSchema,
)


@dataclass
class FunctionCallTransaction:
    """Unsigned transaction invoking one contract method."""
    signer_id: str
    public_key: bytes
    nonce: int
    receiver_id: str
    block_hash: bytes
    method_name: str
    args: bytes
    gas: int
    deposit: int = 0

    def to_dict(self) -> dict:
        return {
            "signer_id": self.signer_id,
            "public_key": {"key_type": ED25519_KEY_TYPE, "data": self.public_key},
            "nonce": self.nonce,
            "receiver_id": self.receiver_id,
            "block_hash": self.block_hash,
            "actions": [
                Action.enum.FunctionCall(
                    method_name=self.method_name,
                    args=self.args,
                    gas=self.gas,
                    deposit=self.deposit,
                )
            ],
        }

    def serialize(self) -> bytes:
        return TransactionSchema.build(self.to_dict())

    def hash(self) -> bytes:
        return hashlib.sha256(self.serialize()).digest()


def sign_transaction(tx: FunctionCallTransaction, key_pair: KeyPair) -> bytes:
    """
    Sign a transaction and serialize it for broadcast.

    Args:
        tx: Unsigned transaction
        key_pair: Signer key, must match ``tx.public_key``

    Returns:
        Borsh bytes of the signed transaction
    """
    signature = key_pair.sign(tx.hash())
    return SignedTransactionSchema.build({
        "transaction": tx.to_dict(),
        "signature": {"key_type": ED25519_KEY_TYPE, "data": signature},
    })
