"""
TLS trust resolution for outbound large-file requests.

A ``TrustDecision`` is computed fresh for every host: which certificate
authorities to trust (``pool``; ``None`` means the default trust store) and
whether verification is switched off. Both are pure reads of a
``ConfigLookup``; the only I/O is reading the PEM files that configuration
points at.
"""

import logging
import re
import ssl
from dataclasses import dataclass
from pathlib import Path
from collections.abc import Callable

from lfsnet.settings import ConfigLookup, parse_git_bool

logger = logging.getLogger(__name__)

NATIVE_TLS_BACKEND = "schannel"

_PEM_CERT_RE = re.compile(
    r"-----BEGIN CERTIFICATE-----.*?-----END CERTIFICATE-----",
    re.DOTALL,
)


@dataclass(frozen=True, slots=True)
class CertPool:
    """An explicit set of trusted CA certificates (DER encoded)."""

    certificates: tuple[bytes, ...]
    sources: tuple[str, ...] = ()

    def __len__(self) -> int:
        return len(self.certificates)

    def merge(self, other: "CertPool") -> "CertPool":
        """Return a pool holding both sets of certificates, without duplicates."""
        known = set(self.certificates)
        extra = tuple(der for der in other.certificates if der not in known)
        return CertPool(self.certificates + extra, self.sources + other.sources)

    def pem(self) -> str:
        return "".join(ssl.DER_cert_to_PEM_cert(der) for der in self.certificates)


@dataclass(frozen=True, slots=True)
class TrustDecision:
    pool: CertPool | None = None
    skip_verify: bool = False


def parse_pem_certificates(data: str) -> list[bytes]:
    """Return the DER form of every usable certificate block in ``data``."""
    scratch = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    accepted: list[bytes] = []
    for block in _PEM_CERT_RE.findall(data):
        try:
            der = ssl.PEM_cert_to_DER_cert(block)
            scratch.load_verify_locations(cadata=der)
        except (ValueError, ssl.SSLError):
            logger.debug("Skipping unparseable certificate block")
            continue
        accepted.append(der)
    return accepted


def load_certs_from_file(path: str) -> CertPool | None:
    """Load every PEM certificate in ``path``; None when the file is unusable."""
    try:
        data = Path(path).read_bytes().decode("ascii", errors="ignore")
    except OSError as exc:
        logger.debug("Cannot read CA file", extra={"path": path, "error": str(exc)})
        return None

    certificates = parse_pem_certificates(data)
    if not certificates:
        logger.debug("CA file holds no certificates", extra={"path": path})
        return None
    return CertPool(tuple(certificates), (path,))


def load_certs_from_dir(path: str) -> CertPool | None:
    """Merge the certificates of each regular file directly inside ``path``."""
    directory = Path(path)
    try:
        entries = sorted(entry for entry in directory.iterdir() if entry.is_file())
    except OSError as exc:
        logger.debug("Cannot list CA directory", extra={"path": path, "error": str(exc)})
        return None

    pool: CertPool | None = None
    for entry in entries:
        loaded = load_certs_from_file(str(entry))
        if loaded is None:
            continue
        pool = loaded if pool is None else pool.merge(loaded)
    return pool


def host_base_url(host: str, scheme: str = "https") -> str:
    """Return ``scheme://host[:port]`` with one trailing slash removed."""
    return f"{scheme}://{host.removesuffix('/')}"


def host_setting(config: ConfigLookup, base_url: str, name: str) -> str | None:
    """Look up ``http.<base_url>.<name>``, tolerating one trailing slash on the URL."""
    for candidate in (base_url, f"{base_url}/"):
        value = config.get(f"http.{candidate}.{name}")
        if value is not None:
            return value
    return None


def env_ca_allowed(config: ConfigLookup) -> bool:
    """The native backend reads the OS store and ignores ``GIT_SSL_*`` unless opted in."""
    backend = (config.get("http.sslbackend") or "").strip().lower()
    if backend != NATIVE_TLS_BACKEND:
        return True
    return config.get_bool("http.schannelusesslcainfo", False)


_SourceLookup = Callable[[ConfigLookup, str], str | None]
_Loader = Callable[[str], CertPool | None]


def _from_host(name: str) -> _SourceLookup:
    return lambda config, base_url: host_setting(config, base_url, name)


def _from_global(name: str) -> _SourceLookup:
    return lambda config, _base_url: config.get(f"http.{name}")


def _from_env(variable: str) -> _SourceLookup:
    def lookup(config: ConfigLookup, _base_url: str) -> str | None:
        if not env_ca_allowed(config):
            return None
        return config.getenv(variable)

    return lookup


# Most specific first; the first source that yields a pool wins.
CA_SOURCES: tuple[tuple[str, _SourceLookup, _Loader], ...] = (
    ("http.<url>.sslcainfo", _from_host("sslcainfo"), load_certs_from_file),
    ("http.<url>.sslcapath", _from_host("sslcapath"), load_certs_from_dir),
    ("http.sslcainfo", _from_global("sslcainfo"), load_certs_from_file),
    ("http.sslcapath", _from_global("sslcapath"), load_certs_from_dir),
    ("GIT_SSL_CAINFO", _from_env("GIT_SSL_CAINFO"), load_certs_from_file),
    ("GIT_SSL_CAPATH", _from_env("GIT_SSL_CAPATH"), load_certs_from_dir),
)


def root_cas_for_host(host: str, config: ConfigLookup, *, scheme: str = "https") -> CertPool | None:
    """Return the explicit CA pool for ``host``, or None for the default store."""
    base_url = host_base_url(host, scheme)
    for source, lookup, loader in CA_SOURCES:
        location = lookup(config, base_url)
        if not location:
            continue
        pool = loader(location)
        if pool is not None:
            logger.debug(
                "Using CA pool",
                extra={"host": host, "source": source, "location": location, "count": len(pool)},
            )
            return pool
    return None


def _negated(value: str | None) -> bool | None:
    if value is None:
        return None
    return not parse_git_bool(value, default=True)


def verification_disabled_for_host(host: str, config: ConfigLookup, *, scheme: str = "https") -> bool:
    """Per-host ``sslverify``, then ``http.sslverify``, then ``GIT_SSL_NO_VERIFY``."""
    base_url = host_base_url(host, scheme)
    steps: tuple[Callable[[], bool | None], ...] = (
        lambda: _negated(host_setting(config, base_url, "sslverify")),
        lambda: _negated(config.get("http.sslverify")),
        lambda: True if config.getenv_bool("GIT_SSL_NO_VERIFY") else None,
    )
    for step in steps:
        skip = step()
        if skip is not None:
            return skip
    return False


def resolve_trust(host: str, config: ConfigLookup, *, scheme: str = "https") -> TrustDecision:
    """Compute the trust decision for one outbound connection to ``host``."""
    return TrustDecision(
        pool=root_cas_for_host(host, config, scheme=scheme),
        skip_verify=verification_disabled_for_host(host, config, scheme=scheme),
    )
