"""Odoo server version parsing."""

import collections
import re
from typing import Optional

from packaging.version import InvalidVersion, _BaseVersion

__all__ = ["Version", "InvalidVersion"]


_Version = collections.namedtuple("_Version", ["major", "minor", "build", "saas", "edition"])

VERSION_PATTERN = r"""
    (?P<saas>saas[-~])?             # saas prefix
    (?P<major>[0-9]+)               # major version
    (?:\.(?P<minor>[0-9]+))?        # minor version
    (?P<edition>\+[a-z])?           # edition
    (?:[-.]?(?P<build>[0-9a-z.~-]+))?   # build, ex: 20130216-002451
"""


class Version(_BaseVersion):
    """Version of an Odoo server, for example 7.0-20130216-002451 or 6.1-1"""

    _regex = re.compile(r"^\s*" + VERSION_PATTERN + r"\s*$", re.VERBOSE | re.IGNORECASE)

    _version: _Version

    def __init__(self, version: str):
        match = self._regex.search(version)
        if not match:
            raise InvalidVersion(f"Invalid version: '{version}'")

        self._text = version.strip()
        self._version = _Version(
            major=int(match.group("major")),
            minor=int(match.group("minor") or 0),
            build=match.group("build") or '',
            saas=match.group("saas") is not None,
            edition=match.group("edition"),
        )
        # only the numeric groups of the build take part in the ordering
        build_key = tuple(int(i) for i in re.findall(r"[0-9]+", self._version.build))
        self._key = (self.major, self.minor, build_key, int(self.saas))

    def __str__(self) -> str:
        return self._text

    def __repr__(self) -> str:
        return f"Version({self._text!r})"

    @property
    def major(self) -> int:
        return self._version.major

    @property
    def minor(self) -> int:
        return self._version.minor

    @property
    def build(self) -> str:
        """Build part of the version (after the major.minor)"""
        return self._version.build

    @property
    def saas(self) -> bool:
        return self._version.saas

    @property
    def edition(self) -> Optional[str]:
        return self._version.edition

    @property
    def major_minor(self) -> str:
        """Get the version as major.minor"""
        return f"{self.major}.{self.minor}"
