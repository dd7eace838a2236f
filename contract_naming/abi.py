"""Minimal ABI helpers for the read-only queries the planner needs.

Arguments are encoded as static 32-byte words and results decoded from a
single word or a dynamic bytes value. Every write call is handed to the
signer as a `ContractCall` description and encoded by the wallet.
"""

from __future__ import annotations

from Crypto.Hash import keccak

ZERO_ADDRESS = "0x0000000000000000000000000000000000000000"
ZERO_NODE = b"\x00" * 32
WORD_SIZE = 32


def keccak256(data: bytes) -> bytes:
    hasher = keccak.new(digest_bits=256)
    hasher.update(data)
    return hasher.digest()


def function_selector(signature: str) -> bytes:
    """Return the 4-byte selector for a canonical signature such as ``owner()``."""
    return keccak256(signature.replace(" ", "").encode("ascii"))[:4]


def labelhash(label: str) -> bytes:
    return keccak256(label.encode("utf-8"))


def namehash(name: str) -> bytes:
    node = ZERO_NODE
    if not name:
        return node
    for label in reversed(name.lower().split(".")):
        node = keccak256(node + labelhash(label))
    return node


def reverse_node(address: str) -> bytes:
    return namehash(f"{strip_hex_prefix(address).lower()}.addr.reverse")


def strip_hex_prefix(value: str) -> str:
    return value[2:] if value.lower().startswith("0x") else value


def encode_address(address: str) -> bytes:
    raw = bytes.fromhex(strip_hex_prefix(address))
    if len(raw) != 20:
        raise ValueError(f"Address must be 20 bytes: {address}")
    return raw.rjust(WORD_SIZE, b"\x00")


def encode_bytes32(value: bytes) -> bytes:
    if len(value) != WORD_SIZE:
        raise ValueError("bytes32 value must be exactly 32 bytes")
    return value


def encode_uint(value: int) -> bytes:
    if value < 0:
        raise ValueError("uint value must not be negative")
    return value.to_bytes(WORD_SIZE, "big")


def encode_bool(value: bool) -> bytes:
    return encode_uint(1 if value else 0)


def encode_static_args(arg_types: tuple[str, ...], args: tuple) -> bytes:
    encoders = {
        "address": encode_address,
        "bytes32": encode_bytes32,
        "uint256": encode_uint,
        "bool": encode_bool,
    }
    if len(arg_types) != len(args):
        raise ValueError("Argument count does not match the signature")
    encoded = b""
    for arg_type, arg in zip(arg_types, args):
        encoder = encoders.get(arg_type)
        if encoder is None:
            raise ValueError(f"Unsupported static ABI type: {arg_type}")
        encoded += encoder(arg)
    return encoded


def first_word(data: str | bytes) -> bytes:
    raw = bytes.fromhex(strip_hex_prefix(data)) if isinstance(data, str) else data
    if len(raw) < WORD_SIZE:
        raise ValueError("Return data is shorter than one ABI word")
    return raw[:WORD_SIZE]


def decode_address(data: str | bytes) -> str:
    return "0x" + first_word(data)[-20:].hex()


def decode_bool(data: str | bytes) -> bool:
    return int.from_bytes(first_word(data), "big") != 0


def decode_uint(data: str | bytes) -> int:
    return int.from_bytes(first_word(data), "big")


def to_hex(data: bytes) -> str:
    return "0x" + data.hex()


def decode_bytes(data: str | bytes) -> bytes:
    raw = bytes.fromhex(strip_hex_prefix(data)) if isinstance(data, str) else data
    offset = decode_uint(raw)
    length = decode_uint(raw[offset : offset + WORD_SIZE])
    start = offset + WORD_SIZE
    if len(raw) < start + length:
        raise ValueError("Return data is shorter than the encoded bytes length")
    return raw[start : start + length]
