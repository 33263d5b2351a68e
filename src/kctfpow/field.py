"""
Mersenne Prime Field Arithmetic

Field: F_M where M = 2^1279 - 1

This prime has special structure enabling:
- Reduction by fold-and-add: 2^1279 ≡ 1 (mod M), so the bits above
  position 1279 can be shifted down and added back instead of dividing
- Square roots by pure squaring: M ≡ 3 (mod 4) and (M + 1) / 4 = 2^1277,
  so sqrt(x) = x^(2^1277) is exactly 1277 successive squarings

Values are plain Python ints. Reduced values lie in [0, M]; M itself is a
non-canonical representative of 0 and is left as is, since solutions on
the wire may carry it.
"""

from __future__ import annotations
from typing import Optional


# Mersenne exponent: M = 2^p - 1 with p = 1279
MERSENNE_EXPONENT = 1279

# The modulus, doubling as the mask of the low 1279 bits
MODULUS = (1 << MERSENNE_EXPONENT) - 1

# (M + 1) / 4 = 2^1277
SQRT_EXPONENT = (MODULUS + 1) >> 2

# Squarings needed to raise to SQRT_EXPONENT
ROOT_SQUARINGS = SQRT_EXPONENT.bit_length() - 1

# Largest wire size of a reduced value
MAX_VALUE_BYTES = (MERSENNE_EXPONENT + 7) // 8

_OVERFLOW_BIT = 1 << MERSENNE_EXPONENT


# =============================================================================
# Engine Functions
# =============================================================================

def square_mod(n: int) -> int:
    """
    Square n modulo 2^1279 - 1.

    The full square is split at bit 1279 and the two halves are added.
    The sum is below 2^1280, so a single extra fold finishes the job.
    Result is in [0, M].
    """
    n = n * n
    n = (n & MODULUS) + (n >> MERSENNE_EXPONENT)
    if n & _OVERFLOW_BIT:
        n = (n ^ _OVERFLOW_BIT) + 1
    return n


def negate_mod(n: int) -> int:
    """Additive inverse M - n."""
    return MODULUS - n


def xor_one(n: int) -> int:
    """Toggle the lowest bit."""
    return n ^ 1


def sqrt_mod(n: int, squarings: int = ROOT_SQUARINGS) -> int:
    """
    Modular square root by repeated squaring.

    Computes n^(2^squarings); with the default this is n^((M+1)/4), a root
    of n whenever n is a quadratic residue. Each squaring needs the previous
    result, so this cannot be split across workers.
    """
    for _ in range(squarings):
        n = square_mod(n)
    return n


def from_be_bytes(data: bytes) -> int:
    """Decode big-endian bytes; short input reads as left zero-padded."""
    return int.from_bytes(data, 'big')


def to_be_bytes(n: int) -> bytes:
    """Encode as minimal big-endian bytes (0 encodes to b'')."""
    return n.to_bytes((n.bit_length() + 7) // 8, 'big')


def is_canonical(n: int) -> bool:
    """True if n is the canonical representative in [0, M - 1]."""
    return 0 <= n < MODULUS


# =============================================================================
# Element Wrapper
# =============================================================================

class MersenneElement:
    """
    Element of F_M, M = 2^1279 - 1.

    Thin object wrapper over the engine functions. The value is stored as
    given (not reduced), so M stays distinct from 0 in byte form.
    """

    __slots__ = ('value',)

    def __init__(self, value: int):
        if value < 0:
            raise ValueError(f"Field value must be non-negative, got {value}")
        self.value = value

    # =========================================================================
    # Arithmetic Operations
    # =========================================================================

    def square_mod(self) -> MersenneElement:
        return MersenneElement(square_mod(self.value))

    def negate_mod(self) -> MersenneElement:
        return MersenneElement(negate_mod(self.value))

    def xor_one(self) -> MersenneElement:
        return MersenneElement(xor_one(self.value))

    def sqrt_mod(self, squarings: int = ROOT_SQUARINGS) -> MersenneElement:
        """Square root via ROOT_SQUARINGS successive squarings."""
        return MersenneElement(sqrt_mod(self.value, squarings))

    def __neg__(self) -> MersenneElement:
        return self.negate_mod()

    # =========================================================================
    # Comparison Operations
    # =========================================================================

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MersenneElement):
            return self.value == other.value
        if isinstance(other, int):
            return self.value == other
        return False

    def __ne__(self, other: object) -> bool:
        return not self.__eq__(other)

    def __hash__(self) -> int:
        return hash(self.value)

    def __repr__(self) -> str:
        return f"MersenneElement(0x{self.value:x})"

    def __int__(self) -> int:
        return self.value

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_bytes(self) -> bytes:
        """Serialize to minimal big-endian bytes."""
        return to_be_bytes(self.value)

    @classmethod
    def from_bytes(cls, data: bytes) -> MersenneElement:
        """Deserialize from big-endian bytes."""
        return cls(from_be_bytes(data))

    # =========================================================================
    # Predicates
    # =========================================================================

    def is_canonical(self) -> bool:
        return is_canonical(self.value)

    def is_zero(self) -> bool:
        """Residue 0, in either representation (0 or M)."""
        return self.value == 0 or self.value == MODULUS

    def canonical(self) -> Optional[MersenneElement]:
        """Canonical form, or None if the value is outside [0, M]."""
        if self.value > MODULUS:
            return None
        return MersenneElement(0 if self.value == MODULUS else self.value)
