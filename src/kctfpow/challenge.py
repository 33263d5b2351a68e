"""
Sloth Solve/Check Engine

A verifiable delay function built from modular square roots over
M = 2^1279 - 1:

    solve round:  x ← sqrt(x) ⊕ 1      (1277 squarings)
    check round:  x ← (x ⊕ 1)^2        (1 squaring)

Each solve round needs the previous round's output, so the work cannot be
parallelized or shortcut. Checking runs the rounds backwards and accepts
either square root of the original value, since both r and M - r square
to the same residue. The parity toggle between rounds breaks that sign
symmetry from one round to the next.

Cost:
    solve: difficulty × 1277 squarings
    check: difficulty × 1 squaring
"""

from __future__ import annotations
from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Tuple
import time

from .codec import (
    decode_solution,
    encode_solution,
    format_challenge,
    parse_challenge,
    random_value,
)
from .errors import DifficultyOverflow, SolveCancelled
from .field import ROOT_SQUARINGS, negate_mod, sqrt_mod, square_mod, xor_one
from .log import get_logger
from .params import DEFAULT_PARAMS, PowParams

log = get_logger(__name__)


# =============================================================================
# Round Primitives
# =============================================================================

def solve_round(value: int, squarings: int = ROOT_SQUARINGS) -> int:
    """One solve round: extract a square root, then toggle the low bit."""
    return xor_one(sqrt_mod(value, squarings))


def check_round(value: int) -> int:
    """One check round: undo the toggle, then square."""
    return square_mod(xor_one(value))


def run_solve(value: int, difficulty: int, squarings: int = ROOT_SQUARINGS) -> int:
    """Apply difficulty solve rounds to value."""
    for _ in range(difficulty):
        value = solve_round(value, squarings)
    return value


def run_check(value: int, difficulty: int) -> int:
    """Apply difficulty check rounds to value."""
    for _ in range(difficulty):
        value = check_round(value)
    return value


# =============================================================================
# Challenge
# =============================================================================

@dataclass(frozen=True, order=True)
class Challenge:
    """
    A proof-of-work challenge.

    difficulty is the number of rounds; val is the starting value. The
    instance is never mutated: solve() threads its own copy of the value.
    """

    difficulty: int
    """Round count, an unsigned 32-bit integer."""

    val: int
    """Starting value, conceptually in [0, M - 1]."""

    params: PowParams = field(default=DEFAULT_PARAMS, compare=False, repr=False)
    """Wire and arithmetic constants shared by every challenge."""

    def __post_init__(self):
        if self.difficulty < 0:
            raise ValueError(f"Difficulty must be non-negative, got {self.difficulty}")
        if self.difficulty > self.params.max_difficulty:
            raise DifficultyOverflow(
                f"Difficulty {self.difficulty} does not fit in 32 bits"
            )
        if self.val < 0:
            raise ValueError(f"Value must be non-negative, got {self.val}")

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def decode(cls, encoded: str, params: PowParams = DEFAULT_PARAMS) -> Challenge:
        """Parse a challenge string, see kctfpow.codec for the format."""
        difficulty, val = parse_challenge(encoded, params)
        return cls(difficulty=difficulty, val=val, params=params)

    @classmethod
    def generate(cls, difficulty: int, params: PowParams = DEFAULT_PARAMS) -> Challenge:
        """Random challenge; the starting value is params.seed_bytes wide."""
        challenge = cls(difficulty=difficulty, val=random_value(params), params=params)
        log.debug("challenge.generated", difficulty=difficulty)
        return challenge

    def encode(self) -> str:
        return format_challenge(self.difficulty, self.val, self.params)

    def __str__(self) -> str:
        return self.encode()

    # =========================================================================
    # Protocol
    # =========================================================================

    def solve(self) -> str:
        """
        Solve the challenge and return the encoded solution.

        Runs difficulty × 1277 sequential squarings.
        """
        start = time.perf_counter()
        value = run_solve(self.val, self.difficulty, self.params.root_squarings)
        log.debug(
            "challenge.solved",
            difficulty=self.difficulty,
            elapsed=round(time.perf_counter() - start, 6),
        )
        return encode_solution(value, self.params)

    def check(self, solution: str) -> bool:
        """
        Verify a solution string.

        Returns:
            True if the solution reaches this challenge's value (or its
            negation) after difficulty check rounds, False otherwise

        Raises:
            PowError: if the solution string is malformed
        """
        value = run_check(decode_solution(solution, self.params), self.difficulty)
        if value == self.val or value == negate_mod(self.val):
            return True
        log.debug("solution.rejected", difficulty=self.difficulty)
        return False

    def executor(self) -> SolveExecutor:
        """Incremental solver for this challenge."""
        return SolveExecutor(self)


def decode_challenge(encoded: str, params: PowParams = DEFAULT_PARAMS) -> Challenge:
    """Parse a challenge string."""
    return Challenge.decode(encoded, params)


def generate_challenge(difficulty: int, params: PowParams = DEFAULT_PARAMS) -> Challenge:
    """Random challenge of the given difficulty."""
    return Challenge.generate(difficulty, params)


def encode_challenge(challenge: Challenge) -> str:
    """Serialize a challenge."""
    return challenge.encode()


# =============================================================================
# Incremental Execution
# =============================================================================

class SolveExecutor:
    """
    Round-by-round solver for one challenge.

    Supports:
    - Incremental execution
    - Progress tracking
    - Cancellation between rounds

    Round boundaries are the only suspension points; the squarings inside
    a round always run to completion.
    """

    def __init__(self, challenge: Challenge):
        self.challenge = challenge
        self.value = challenge.val
        self.rounds_done = 0

    def step(self) -> bool:
        """
        Execute one round.

        Returns:
            True if more rounds remain, False if complete
        """
        if self.is_complete:
            return False

        self.value = solve_round(self.value, self.challenge.params.root_squarings)
        self.rounds_done += 1

        return not self.is_complete

    def run_to_completion(self, should_cancel: Optional[Callable[[], bool]] = None) -> str:
        """
        Execute all remaining rounds and return the solution.

        Args:
            should_cancel: Polled before each round; returning True stops
                the solve with SolveCancelled

        Raises:
            SolveCancelled: if should_cancel returned True
        """
        while not self.is_complete:
            if should_cancel is not None and should_cancel():
                log.info(
                    "solve.cancelled",
                    rounds_done=self.rounds_done,
                    difficulty=self.challenge.difficulty,
                )
                raise SolveCancelled(self.rounds_done, self.challenge.difficulty)
            self.step()
        return self.solution()

    def solution(self) -> str:
        """Encoded solution; only valid once every round has run."""
        if not self.is_complete:
            raise RuntimeError(
                f"Solve incomplete: {self.rounds_done}/{self.challenge.difficulty} rounds"
            )
        return encode_solution(self.value, self.challenge.params)

    @property
    def progress(self) -> float:
        """Get progress as fraction [0, 1]."""
        if self.challenge.difficulty == 0:
            return 1.0
        return self.rounds_done / self.challenge.difficulty

    @property
    def is_complete(self) -> bool:
        return self.rounds_done >= self.challenge.difficulty


# =============================================================================
# Batch Interface
# =============================================================================

def _solve_one(challenge: Challenge) -> str:
    return challenge.solve()


def solve_batch(challenges: Iterable[Challenge], max_workers: Optional[int] = None) -> List[str]:
    """
    Solve independent challenges in parallel processes.

    Each challenge runs in a single worker; its rounds are never split.
    Results are in input order.
    """
    challenges = list(challenges)
    if len(challenges) <= 1:
        return [challenge.solve() for challenge in challenges]

    with ProcessPoolExecutor(max_workers=max_workers) as executor:
        return list(executor.map(_solve_one, challenges))


def check_batch(items: Iterable[Tuple[Challenge, str]]) -> List[bool]:
    """
    Verify multiple (challenge, solution) pairs.

    Returns list of verification results.
    """
    return [challenge.check(solution) for challenge, solution in items]


# =============================================================================
# Cost Model
# =============================================================================

def solve_cost(difficulty: int, params: PowParams = DEFAULT_PARAMS) -> int:
    """Squarings performed by solve()."""
    return difficulty * params.root_squarings


def check_cost(difficulty: int, params: PowParams = DEFAULT_PARAMS) -> int:
    """Squarings performed by check(); one per round whatever the params."""
    return difficulty


def verification_speedup(params: PowParams = DEFAULT_PARAMS) -> int:
    """Ratio of solve to check squarings, independent of difficulty."""
    return params.root_squarings
