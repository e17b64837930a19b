"""
Booking Reference Generator

References look like BK250619143012A1B2C3D4E5F6: a prefix, the UTC creation
time to the second and 12 random hex digits from the OS CSPRNG. The random
part carries the uniqueness (48 bits); the timestamp keeps references
roughly sortable for support staff.
"""

import secrets
from datetime import datetime, timezone
from typing import Callable, Optional

DEFAULT_PREFIX = 'BK'
RANDOM_HEX_DIGITS = 12
MAX_ATTEMPTS = 5


class ReferenceExhausted(RuntimeError):
    """Every candidate reference collided with an existing one."""


class ReferenceGenerator:
    """
    Produces booking references

    The optional ``exists`` callback checks a candidate against stored
    references; colliding candidates are discarded and redrawn. The unique
    index on the reference column stays the final guard.
    """

    def __init__(
        self,
        prefix: str = DEFAULT_PREFIX,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
        max_attempts: int = MAX_ATTEMPTS,
    ):
        self.prefix = prefix
        self.clock = clock
        self.max_attempts = max_attempts

    def candidate(self) -> str:
        timestamp = self.clock().strftime('%y%m%d%H%M%S')
        random_part = secrets.token_hex(RANDOM_HEX_DIGITS // 2).upper()
        return f"{self.prefix}{timestamp}{random_part}"

    def generate(self, exists: Optional[Callable[[str], bool]] = None) -> str:
        for _ in range(self.max_attempts):
            reference = self.candidate()
            if exists is None or not exists(reference):
                return reference
        raise ReferenceExhausted(
            f"Could not generate a unique booking reference in {self.max_attempts} attempts"
        )


def generate_reference(exists: Optional[Callable[[str], bool]] = None) -> str:
    return ReferenceGenerator().generate(exists)
