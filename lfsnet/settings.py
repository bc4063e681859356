"""Configuration lookup shared by the endpoint and trust resolvers."""

import os
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from dotenv import load_dotenv

_TRUE_VALUES = frozenset({"true", "yes", "on", "1"})
_FALSE_VALUES = frozenset({"false", "no", "off", "0", ""})


def parse_git_bool(value: str | None, default: bool = False) -> bool:
    """Interpret a value the way ``git config --type=bool`` does."""
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    try:
        return int(lowered) != 0
    except ValueError:
        return default


def canonical_git_key(key: str) -> str:
    """
    Lower-case the section and variable name of a git key.

    The subsection (``https://Host.example`` in ``http.https://Host.example.sslcainfo``)
    is case-sensitive and kept verbatim.
    """
    section, dot, rest = key.partition(".")
    if not dot:
        return key.lower()
    subsection, dot, name = rest.rpartition(".")
    if not dot:
        return f"{section.lower()}.{rest.lower()}"
    return f"{section.lower()}.{subsection}.{name.lower()}"


def parse_config_pairs(pairs: Iterable[str]) -> dict[str, str]:
    """Turn ``key=value`` strings (as given to ``git -c``) into a mapping."""
    parsed: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        key = key.strip()
        if not key:
            raise ValueError(f"Invalid config pair {pair!r}: key must be non-empty.")
        # A bare key is git's shorthand for a boolean true.
        parsed[key] = value if sep else "true"
    return parsed


@dataclass(frozen=True, slots=True)
class ConfigLookup:
    """Read-only view over the process environment and git settings."""

    environ: Mapping[str, str] = field(default_factory=dict)
    git: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "environ", MappingProxyType(dict(self.environ)))
        object.__setattr__(
            self,
            "git",
            MappingProxyType(
                {canonical_git_key(key): value for key, value in self.git.items()}
            ),
        )

    @classmethod
    def load(cls, git_config: Mapping[str, str] | None = None) -> "ConfigLookup":
        """
        Snapshot the process environment once at startup.

        Python-dotenv is used so developers can keep ``GIT_SSL_*`` overrides in
        a local .env file without exporting them globally.
        """
        load_dotenv()
        return cls(environ=dict(os.environ), git=dict(git_config or {}))

    def get(self, key: str) -> str | None:
        """Return a git setting; section and variable names match case-insensitively."""
        return self.git.get(canonical_git_key(key))

    def getenv(self, key: str) -> str | None:
        """Return an environment variable from the startup snapshot."""
        return self.environ.get(key)

    def get_bool(self, key: str, default: bool = False) -> bool:
        """Return a git setting interpreted as a git boolean."""
        return parse_git_bool(self.get(key), default)

    def getenv_bool(self, key: str, default: bool = False) -> bool:
        """Return an environment variable interpreted as a git boolean."""
        return parse_git_bool(self.getenv(key), default)

    def git_keys(self) -> Iterator[str]:
        """Iterate canonical git keys in insertion order."""
        return iter(self.git)
