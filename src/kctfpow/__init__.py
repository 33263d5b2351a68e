"""
kctfpow: kCTF Sloth Proof-of-Work

Solve, check and generate proof-of-work challenges in the kCTF "s" format.
Solving is a long chain of modular square roots over the Mersenne prime
2^1279 - 1; checking undoes it with one squaring per round.

Usage:
    from kctfpow import decode_challenge, generate_challenge

    # decoding then solving a challenge
    chall = decode_challenge("s.AAAAMg==.H+fPiuL32DPbfN97cpd0nA==")
    solution = chall.solve()

    # checking a solution
    assert chall.check(solution)
    assert chall.check("s.asdf") is False

    # generating a random challenge of difficulty 50
    chall = generate_challenge(50)
    print(chall)
"""

# Field arithmetic
from .field import (
    MERSENNE_EXPONENT,
    MODULUS,
    ROOT_SQUARINGS,
    SQRT_EXPONENT,
    MersenneElement,
    square_mod,
    negate_mod,
    xor_one,
    sqrt_mod,
    from_be_bytes,
    to_be_bytes,
    is_canonical,
)

# Parameters
from .params import PowParams, DEFAULT_PARAMS

# Errors
from .errors import (
    PowError,
    VersionMismatch,
    PartCountMismatch,
    InvalidEncoding,
    DifficultyOverflow,
    SolveCancelled,
)

# Codec
from .codec import (
    parse_challenge,
    format_challenge,
    decode_solution,
    encode_solution,
    decode_difficulty,
    encode_difficulty,
)

# Main API
from .challenge import (
    Challenge,
    SolveExecutor,
    decode_challenge,
    generate_challenge,
    encode_challenge,
    solve_round,
    check_round,
    solve_batch,
    check_batch,
    solve_cost,
    check_cost,
    verification_speedup,
)

# Logging
from .log import configure_logging

__version__ = "0.1.0"

__all__ = [
    # Version
    "__version__",
    # Field
    "MERSENNE_EXPONENT",
    "MODULUS",
    "ROOT_SQUARINGS",
    "SQRT_EXPONENT",
    "MersenneElement",
    "square_mod",
    "negate_mod",
    "xor_one",
    "sqrt_mod",
    "from_be_bytes",
    "to_be_bytes",
    "is_canonical",
    # Parameters
    "PowParams",
    "DEFAULT_PARAMS",
    # Errors
    "PowError",
    "VersionMismatch",
    "PartCountMismatch",
    "InvalidEncoding",
    "DifficultyOverflow",
    "SolveCancelled",
    # Codec
    "parse_challenge",
    "format_challenge",
    "decode_solution",
    "encode_solution",
    "decode_difficulty",
    "encode_difficulty",
    # Main API
    "Challenge",
    "SolveExecutor",
    "decode_challenge",
    "generate_challenge",
    "encode_challenge",
    "solve_round",
    "check_round",
    "solve_batch",
    "check_batch",
    "solve_cost",
    "check_cost",
    "verification_speedup",
    # Logging
    "configure_logging",
]
