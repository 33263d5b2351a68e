"""
Wire Codec for Challenges and Solutions

Format (ASCII, dot-separated, standard padded base64):

    challenge:  <version>.<difficulty>.<value>
    solution:   <version>.<value>

The difficulty is always emitted as exactly 4 big-endian bytes. Values are
emitted as minimal big-endian bytes, so a value of 0 is an empty field.
On input the difficulty may carry any number of leading zero bytes.

These functions work on plain (difficulty, value) pairs; the Challenge
type in kctfpow.challenge wraps them.
"""

import base64
import binascii
import secrets
from typing import List, Tuple

from .errors import (
    DifficultyOverflow,
    InvalidEncoding,
    PartCountMismatch,
    VersionMismatch,
)
from .field import from_be_bytes, to_be_bytes
from .params import DEFAULT_PARAMS, PowParams


SEPARATOR = '.'


# =============================================================================
# Field Helpers
# =============================================================================

def b64decode_strict(field: str) -> bytes:
    """
    Decode a standard base64 field.

    Only the canonical encoding of the decoded bytes is accepted: padding
    is required and unused trailing bits must be zero.
    """
    try:
        data = base64.b64decode(field.encode('ascii'), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise InvalidEncoding(field) from e
    if b64encode(data) != field:
        raise InvalidEncoding(field)
    return data


def b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode('ascii')


def decode_difficulty(data: bytes, params: PowParams = DEFAULT_PARAMS) -> int:
    """
    Interpret difficulty bytes as an unsigned big-endian u32.

    Shorter input is left-padded. Longer input is accepted only if every
    byte before the final four is zero.
    """
    width = params.difficulty_bytes
    if len(data) > width:
        head, data = data[:-width], data[-width:]
        if any(head):
            raise DifficultyOverflow()
    return int.from_bytes(data, 'big')


def encode_difficulty(difficulty: int, params: PowParams = DEFAULT_PARAMS) -> bytes:
    """Fixed-width big-endian difficulty bytes."""
    if not 0 <= difficulty <= params.max_difficulty:
        raise DifficultyOverflow(f"Difficulty {difficulty} does not fit in 32 bits")
    return difficulty.to_bytes(params.difficulty_bytes, 'big')


def _split(encoded: str, expected_parts: int, params: PowParams) -> List[bytes]:
    """Check the version tag and part count, then base64-decode each part."""
    version, *parts = encoded.split(SEPARATOR)
    if version != params.version:
        raise VersionMismatch(version, params.version)
    if len(parts) != expected_parts:
        raise PartCountMismatch(len(parts), expected_parts)
    return [b64decode_strict(part) for part in parts]


# =============================================================================
# Challenge / Solution
# =============================================================================

def parse_challenge(encoded: str, params: PowParams = DEFAULT_PARAMS) -> Tuple[int, int]:
    """
    Parse a challenge string.

    Returns:
        (difficulty, value)

    Raises:
        VersionMismatch, PartCountMismatch, InvalidEncoding, DifficultyOverflow
    """
    difficulty_bytes, value_bytes = _split(encoded, 2, params)
    return decode_difficulty(difficulty_bytes, params), from_be_bytes(value_bytes)


def format_challenge(difficulty: int, value: int, params: PowParams = DEFAULT_PARAMS) -> str:
    """Serialize a challenge; inverse of parse_challenge."""
    return SEPARATOR.join([
        params.version,
        b64encode(encode_difficulty(difficulty, params)),
        b64encode(to_be_bytes(value)),
    ])


def decode_solution(encoded: str, params: PowParams = DEFAULT_PARAMS) -> int:
    """
    Parse a solution string into its value.

    Raises:
        VersionMismatch, PartCountMismatch, InvalidEncoding
    """
    value_bytes, = _split(encoded, 1, params)
    return from_be_bytes(value_bytes)


def encode_solution(value: int, params: PowParams = DEFAULT_PARAMS) -> str:
    """Serialize a solution value."""
    return SEPARATOR.join([params.version, b64encode(to_be_bytes(value))])


def random_value(params: PowParams = DEFAULT_PARAMS) -> int:
    """Starting value from params.seed_bytes of CSPRNG output."""
    return from_be_bytes(secrets.token_bytes(params.seed_bytes))
