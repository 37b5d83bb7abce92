"""Product and plugin versions.

Versions look like ``7.9``, ``8.9.0.43852`` or ``5.6-RC1``: up to four
numeric fields followed by an optional qualifier. A version with a
qualifier sorts before the same version without one.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import total_ordering
from typing import Optional

_VERSION_PATTERN = re.compile(r"^(\d+(?:\.\d+){0,3})(?:[-.]?([A-Za-z][\w.-]*))?$")


@total_ordering
@dataclass(frozen=True, eq=False)
class Version:
    """A parsed version string.

    Attributes:
        raw: The string the version was parsed from.
        numbers: Numeric fields, padded with zeros to four entries.
        qualifier: Trailing qualifier such as ``RC1`` or ``SNAPSHOT``.
    """
    raw: str
    numbers: tuple[int, int, int, int]
    qualifier: Optional[str] = None

    @classmethod
    def create(cls, raw: Optional[str]) -> Version:
        """Parse ``raw``.

        Raises:
            ValueError: If ``raw`` is missing or is not a version.
        """
        if raw is None or not raw.strip():
            raise ValueError("Version must be set")
        text = raw.strip()
        match = _VERSION_PATTERN.match(text)
        if match is None:
            raise ValueError(f"Version is not valid: {raw}")
        fields = [int(part) for part in match.group(1).split(".")]
        fields += [0] * (4 - len(fields))
        return cls(raw=text, numbers=tuple(fields), qualifier=match.group(2))

    @property
    def major(self) -> int:
        return self.numbers[0]

    @property
    def minor(self) -> int:
        return self.numbers[1]

    @property
    def patch(self) -> int:
        return self.numbers[2]

    @property
    def build_number(self) -> int:
        return self.numbers[3]

    def is_greater_than_or_equals(self, major: int, minor: int = 0) -> bool:
        return (self.major, self.minor) >= (major, minor)

    def _key(self) -> tuple:
        # Releases (no qualifier) sort after their qualified pre-releases
        return (self.numbers, self.qualifier is None, (self.qualifier or "").upper())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() == other._key()

    def __lt__(self, other: Version) -> bool:
        if not isinstance(other, Version):
            return NotImplemented
        return self._key() < other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __str__(self) -> str:
        return self.raw
