"""
Public Parameters for the Sloth Proof-of-Work

PowParams gathers every constant the codec and the solve/check engine
share. The arithmetic constants are pinned to the 1279-bit Mersenne prime;
only the wire-level knobs (version tag, seed width) are configurable.

A single DEFAULT_PARAMS instance is built at import time and passed by
reference into the codec and engine functions.
"""

from dataclasses import dataclass

from .field import MERSENNE_EXPONENT, MODULUS, ROOT_SQUARINGS, SQRT_EXPONENT


# Wire version tag understood by existing kCTF deployments
VERSION = "s"

# Width of the difficulty field on the wire
DIFFICULTY_BYTES = 4

# Largest difficulty representable in DIFFICULTY_BYTES
MAX_DIFFICULTY = (1 << (8 * DIFFICULTY_BYTES)) - 1

# Width of a freshly generated starting value
SEED_BYTES = 16


@dataclass(frozen=True)
class PowParams:
    """
    Public parameters for challenges, solutions and their verification.

    All parameters are immutable and hashable.
    """

    # ==========================================================================
    # Wire Parameters
    # ==========================================================================

    version: str = VERSION
    """Leading tag of every challenge and solution string."""

    seed_bytes: int = SEED_BYTES
    """Random bytes drawn for a generated starting value (128 bits)."""

    def __post_init__(self):
        if not self.version or '.' in self.version:
            raise ValueError(f"Version tag must be non-empty and dot-free, got {self.version!r}")
        if self.seed_bytes <= 0:
            raise ValueError(f"Seed width must be positive, got {self.seed_bytes}")
        if self.seed_bytes * 8 >= MERSENNE_EXPONENT:
            raise ValueError(
                f"Seed width {self.seed_bytes} bytes does not fit below the modulus"
            )

    # ==========================================================================
    # Arithmetic Constants (fixed)
    # ==========================================================================

    @property
    def modulus_bits(self) -> int:
        """Exponent p of the Mersenne modulus 2^p - 1."""
        return MERSENNE_EXPONENT

    @property
    def modulus(self) -> int:
        """The Mersenne prime M = 2^1279 - 1."""
        return MODULUS

    @property
    def sqrt_exponent(self) -> int:
        """(M + 1) / 4 = 2^1277, the square-root exponent for M ≡ 3 (mod 4)."""
        return SQRT_EXPONENT

    @property
    def root_squarings(self) -> int:
        """Squarings per solve round: log2 of sqrt_exponent."""
        return ROOT_SQUARINGS

    @property
    def difficulty_bytes(self) -> int:
        """Width of the difficulty field emitted on the wire."""
        return DIFFICULTY_BYTES

    @property
    def max_difficulty(self) -> int:
        """Largest difficulty a challenge can carry."""
        return MAX_DIFFICULTY


DEFAULT_PARAMS = PowParams()
