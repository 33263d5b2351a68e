"""
Errors raised while parsing challenges and solutions.

All parse failures are deterministic: re-parsing the same string always
fails the same way. A well-formed solution that does not verify is not an
error; Challenge.check returns False for it.
"""


class PowError(ValueError):
    """Base class for malformed challenge or solution strings."""


class VersionMismatch(PowError):
    """The leading version tag is missing or not the expected one."""

    def __init__(self, found: str, expected: str):
        self.found = found
        self.expected = expected
        super().__init__(f"Incorrect version: expected {expected!r}, got {found!r}")


class PartCountMismatch(PowError):
    """Wrong number of dot-separated fields after the version tag."""

    def __init__(self, found: int, expected: int):
        self.found = found
        self.expected = expected
        super().__init__(
            f"Incorrect number of parts: expected {expected}, got {found}"
        )


class InvalidEncoding(PowError):
    """A field is not valid standard base64."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Part is not valid base64: {field!r}")


class DifficultyOverflow(PowError):
    """The difficulty does not fit in an unsigned 32-bit integer."""

    def __init__(self, detail: str = "Difficulty is too large"):
        super().__init__(detail)


class SolveCancelled(Exception):
    """A solve was stopped at a round boundary by its cancellation check."""

    def __init__(self, rounds_done: int, difficulty: int):
        self.rounds_done = rounds_done
        self.difficulty = difficulty
        super().__init__(f"Solve cancelled after {rounds_done}/{difficulty} rounds")
