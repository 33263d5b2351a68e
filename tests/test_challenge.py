"""
Tests for the solve/check engine.

Golden vectors come from challenges and solutions produced by existing
kCTF deployments; they pin the exact bit-level behaviour of the solver.
"""

import pytest

from kctfpow import (
    Challenge,
    DifficultyOverflow,
    InvalidEncoding,
    MODULUS,
    PartCountMismatch,
    PowParams,
    SolveCancelled,
    SolveExecutor,
    VersionMismatch,
    check_batch,
    check_cost,
    check_round,
    decode_challenge,
    encode_solution,
    encode_challenge,
    generate_challenge,
    solve_batch,
    solve_cost,
    solve_round,
    verification_speedup,
)
from kctfpow.challenge import run_check, run_solve


GOLDEN_CHALLENGE = "s.AAAAZA==.KskOPzEduBg+z0cbeBsA1A=="
GOLDEN_SOLUTION = (
    "s.aNL1WVbhmQGstx2jyfYcYTmguYKzEugAMwYL9LP4Z36Q5CVgAbvbCpZNSfHWclBqUWSBFswrQcHo"
    "EGmhFK+QCIFNEdDY5diLBXNQ3CWO8DGceDmMqyVmEU0r7bBUtuXAFfP7c2CPUYHm7FviyUW3PTpr"
    "zJMk3hjBINvW76j2Vu5pM931Ex0RTTBMYge8/Zjnlz/KuSiqptUDiaRHtbxkqQ=="
)

CHECK_CHALLENGE = "s.AAAAMg==.NDtqORW1uZlIgzszbdMGZA=="
CHECK_SOLUTION = (
    "s.NUH3arymnKB+ysUGdv+67ypDamn4wOKCPORB2ivWE1Yhinam2v4S6q4nAoC5LP97LScdVoq+NuFV"
    "F++Win5mNRYZS6bJAs8fk0h8XgvfcC/7JfmFISqeCIo/CIUgIucVAM+eGDjqitRULGXqIOyviJoJ"
    "jW8DMouMRuJM/3eg/z18kutQHkX0N3sqPeF7Nzkk8S3Bs6aiHUORM30syUKYug=="
)


class TestGoldenVectors:
    """Interoperability with existing challenges and solutions."""

    def test_solve_golden(self):
        chall = decode_challenge(GOLDEN_CHALLENGE)
        assert chall.solve() == GOLDEN_SOLUTION

    def test_check_golden(self):
        chall = decode_challenge(GOLDEN_CHALLENGE)
        assert chall.check(GOLDEN_SOLUTION) is True

    def test_check_known_solution(self):
        chall = decode_challenge(CHECK_CHALLENGE)
        assert chall.difficulty == 50
        assert chall.check(CHECK_SOLUTION) is True

    def test_solution_for_other_challenge_rejected(self):
        chall = decode_challenge(CHECK_CHALLENGE)
        assert chall.check(GOLDEN_SOLUTION) is False

    def test_wrong_solution_is_false_not_error(self):
        chall = decode_challenge(CHECK_CHALLENGE)
        assert chall.check("s.asdf") is False


class TestCheck:
    """Verification semantics."""

    def test_malformed_solution_raises(self):
        chall = decode_challenge(CHECK_CHALLENGE)
        with pytest.raises(VersionMismatch):
            chall.check("x.asdf")
        with pytest.raises(PartCountMismatch):
            chall.check("s.asdf.asdf")
        with pytest.raises(InvalidEncoding):
            chall.check("s.as")

    def test_negated_root_accepted(self):
        """Both square roots of the final value verify."""
        chall = Challenge(difficulty=2, val=123456789)
        value = run_solve(chall.val, chall.difficulty)
        other = MODULUS - value
        assert chall.check(encode_solution(value))
        assert chall.check(encode_solution(other))

    def test_negated_value_accepted(self):
        """A solution landing on M - val is accepted too."""
        chall = Challenge(difficulty=1, val=5)
        # (x ^ 1)^2 = M - 5 has a root because 5 is not a square mod M
        root = pow(MODULUS - 5, (MODULUS + 1) // 4, MODULUS)
        assert pow(root, 2, MODULUS) == MODULUS - 5
        assert chall.check(encode_solution(root ^ 1))

    def test_zero_difficulty(self):
        chall = Challenge(difficulty=0, val=42)
        assert chall.solve() == "s.Kg=="
        assert chall.check("s.Kg==")
        assert not chall.check("s.Kw==")

    def test_check_does_not_mutate(self):
        chall = decode_challenge(CHECK_CHALLENGE)
        before = (chall.difficulty, chall.val)
        chall.check(CHECK_SOLUTION)
        chall.check("s.asdf")
        assert (chall.difficulty, chall.val) == before


class TestSolve:
    """Solving semantics."""

    def test_solve_does_not_mutate(self):
        chall = Challenge(difficulty=2, val=99)
        first = chall.solve()
        assert chall.val == 99
        assert chall.solve() == first

    def test_round_inverse(self):
        """check_round undoes solve_round up to sign."""
        x = 0xDEADBEEFCAFE
        y = check_round(solve_round(x))
        assert y in (x, MODULUS - x)

    def test_run_check_inverts_run_solve(self):
        x = 0x1234
        result = run_check(run_solve(x, 3), 3)
        assert result in (x, MODULUS - x)

    @pytest.mark.parametrize("difficulty", [1, 2, 5])
    def test_generated_roundtrip(self, difficulty):
        chall = generate_challenge(difficulty)
        assert chall.check(chall.solve())

    @pytest.mark.slow
    def test_generated_difficulty_100(self):
        chall = generate_challenge(100)
        assert chall.difficulty == 100
        assert len(str(chall)) <= 35
        assert chall.check(chall.solve())


class TestChallengeType:
    """Construction, equality and encoding."""

    def test_equality_ignores_params(self):
        assert Challenge(3, 7) == Challenge(3, 7, PowParams(seed_bytes=8))

    def test_ordering(self):
        assert Challenge(1, 9) < Challenge(2, 0)
        assert Challenge(1, 1) < Challenge(1, 2)

    def test_hashable(self):
        assert len({Challenge(1, 2), Challenge(1, 2), Challenge(2, 1)}) == 2

    def test_frozen(self):
        chall = Challenge(1, 2)
        with pytest.raises(AttributeError):
            chall.val = 3

    def test_invalid_construction(self):
        with pytest.raises(ValueError):
            Challenge(-1, 0)
        with pytest.raises(ValueError):
            Challenge(1, -5)
        with pytest.raises(DifficultyOverflow):
            Challenge(2 ** 32, 0)

    def test_encode(self):
        chall = decode_challenge(GOLDEN_CHALLENGE)
        assert encode_challenge(chall) == GOLDEN_CHALLENGE
        assert chall.encode() == GOLDEN_CHALLENGE
        assert Challenge.decode(GOLDEN_CHALLENGE) == chall


class TestSolveExecutor:
    """Incremental solving."""

    def test_matches_solve(self):
        chall = Challenge(difficulty=3, val=0xABCDEF)
        executor = chall.executor()
        assert executor.progress == 0.0
        assert executor.step() is True
        assert executor.rounds_done == 1
        assert executor.step() is True
        assert executor.step() is False
        assert executor.is_complete
        assert executor.progress == 1.0
        assert executor.solution() == chall.solve()

    def test_step_after_completion(self):
        executor = SolveExecutor(Challenge(difficulty=1, val=3))
        executor.run_to_completion()
        assert executor.step() is False
        assert executor.rounds_done == 1

    def test_zero_difficulty_complete(self):
        executor = SolveExecutor(Challenge(difficulty=0, val=3))
        assert executor.is_complete
        assert executor.progress == 1.0
        assert executor.run_to_completion() == "s.Aw=="

    def test_solution_before_completion(self):
        executor = SolveExecutor(Challenge(difficulty=2, val=3))
        executor.step()
        with pytest.raises(RuntimeError):
            executor.solution()

    def test_cancellation_between_rounds(self):
        chall = Challenge(difficulty=4, val=11)
        executor = chall.executor()
        polls = []

        def should_cancel():
            polls.append(executor.rounds_done)
            return executor.rounds_done >= 2

        with pytest.raises(SolveCancelled) as info:
            executor.run_to_completion(should_cancel)

        assert info.value.rounds_done == 2
        assert info.value.difficulty == 4
        assert polls == [0, 1, 2]

    def test_resume_after_cancellation(self):
        chall = Challenge(difficulty=3, val=11)
        executor = chall.executor()
        with pytest.raises(SolveCancelled):
            executor.run_to_completion(lambda: executor.rounds_done == 1)
        assert executor.run_to_completion() == chall.solve()


class TestBatch:
    """Batch helpers over independent challenges."""

    def test_solve_batch_order(self):
        challenges = [Challenge(1, 5), Challenge(2, 6), Challenge(1, 7)]
        solutions = solve_batch(challenges, max_workers=2)
        assert solutions == [c.solve() for c in challenges]

    def test_solve_batch_small(self):
        assert solve_batch([]) == []
        chall = Challenge(1, 5)
        assert solve_batch([chall]) == [chall.solve()]

    def test_check_batch(self):
        a = Challenge(1, 5)
        b = Challenge(1, 6)
        results = check_batch([(a, a.solve()), (b, a.solve()), (b, b.solve())])
        assert results == [True, False, True]


class TestCostModel:
    """Solve/check cost asymmetry."""

    def test_costs(self):
        assert solve_cost(100) == 127700
        assert check_cost(100) == 100
        assert verification_speedup() == 1277

    def test_zero(self):
        assert solve_cost(0) == 0
        assert check_cost(0) == 0

    def test_helpers_accept_params(self):
        params = PowParams(version="t")
        assert solve_cost(3, params) == 3 * 1277
        assert check_cost(3, params) == 3
        assert verification_speedup(params) == solve_cost(1, params) // check_cost(1, params)
