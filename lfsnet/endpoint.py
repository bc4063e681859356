"""
Endpoint resolution for large-file remotes.

Turns the remote syntaxes git accepts (ssh URLs, scp-like aliases, http(s),
file URLs and local paths) into an immutable ``Endpoint``. Every resolver is
total: unparseable input yields ``URL_UNKNOWN`` instead of raising.
"""

import ipaddress
import logging
import os
import re
from dataclasses import dataclass, replace
from urllib.parse import SplitResult, unquote, urlsplit

from lfsnet.settings import ConfigLookup

logger = logging.getLogger(__name__)

URL_UNKNOWN = "<unknown>"

_HOST_PORT_RE = re.compile(r"([^:]+)(?::([0-9]+))?")
_WINDOWS_DRIVE_RE = re.compile(r"[A-Za-z]:[\\/]")

_SSH_SCHEMES = frozenset({"ssh", "git+ssh", "ssh+git"})
_HTTP_SCHEMES = frozenset({"http", "https"})


@dataclass(frozen=True, slots=True)
class SSHMetadata:
    """Connection details kept alongside the HTTPS fallback of an SSH remote."""

    user_and_host: str
    port: str = ""
    path: str = ""
    scheme: str = "ssh"


@dataclass(frozen=True, slots=True)
class Endpoint:
    """Resolved locator for a large-file server."""

    url: str
    ssh_metadata: SSHMetadata | None = None
    operation: str = ""

    def __post_init__(self) -> None:
        if not self.url:
            object.__setattr__(self, "url", URL_UNKNOWN)

    @property
    def is_unknown(self) -> bool:
        return self.url == URL_UNKNOWN


def endpoint_operation(endpoint: Endpoint, method: str) -> str:
    """Return the explicit operation, or infer it from the HTTP method."""
    if endpoint.operation:
        return endpoint.operation
    if method.upper() in ("GET", "HEAD"):
        return "download"
    return "upload"


def _split(url: str | SplitResult) -> SplitResult | None:
    if isinstance(url, SplitResult):
        return url
    try:
        return urlsplit(url)
    except ValueError:
        return None


def endpoint_from_ssh_url(url: str | SplitResult) -> Endpoint:
    """Build an endpoint from an ``ssh://`` (or ``git+ssh://``/``ssh+git://``) URL."""
    parts = _split(url)
    if parts is None:
        return Endpoint(url=URL_UNKNOWN)

    # netloc still carries the userinfo; the port is needed separately for SSH.
    host_port = parts.netloc.rpartition("@")[2]
    match = _HOST_PORT_RE.fullmatch(host_port)
    if match is None:
        return Endpoint(url=URL_UNKNOWN)

    host = match.group(1)
    username = unquote(parts.username) if parts.username else ""
    user_and_host = f"{username}@{host}" if username else host
    path = unquote(parts.path)

    metadata = SSHMetadata(
        user_and_host=user_and_host,
        port=match.group(2) or "",
        path=path,
    )
    # The SSH port says nothing about where the HTTPS service listens.
    return Endpoint(url=f"https://{host}{path}", ssh_metadata=metadata)


def endpoint_from_bare_ssh_url(raw: str) -> Endpoint:
    """
    Build an endpoint from an scp-like alias.

    Accepted shapes::

        user@host.com:path/to/repo.git
        [user@host.com:port]:path/to/repo.git
        user@[::1]:path/to/repo.git

    The splitting mirrors git's own ``parse_connect_url``/``host_end``: an
    ``@[`` or leading ``[`` opens a bracketed host, otherwise the first colon
    separates ``host[:port]`` from the path. Input with no separating colon
    is not an alias and is returned unchanged as the URL.
    """
    user_host_port = ""
    rest = raw
    at = raw.find("@[")
    if at >= 0:
        user_host_port = raw[: at + 1]
        rest = raw[at + 1 :]

    bracketed = False
    if rest.startswith("["):
        close = rest.find("]")
        if close >= 0:
            user_host_port += rest[1:close]
            rest = rest[close + 1 :]
            bracketed = True

    colon = rest.find(":")
    if colon < 0:
        return Endpoint(url=raw)

    path = rest[colon + 1 :]
    if not bracketed:
        user_host_port += rest[:colon]

    match = _HOST_PORT_RE.fullmatch(user_host_port)
    if match is not None:
        user_and_host = match.group(1)
        port = match.group(2) or ""
        _, at_sign, after = user_and_host.partition("@")
        host = after if at_sign else user_and_host
    elif bracketed and _is_ipv6_literal(user_host_port.rpartition("@")[2]):
        user_and_host = user_host_port
        port = ""
        # A zone ID separator must be escaped inside a URL host (RFC 6874).
        literal = user_host_port.rpartition("@")[2].replace("%", "%25")
        host = f"[{literal}]"
    else:
        return Endpoint(url=URL_UNKNOWN)

    metadata = SSHMetadata(user_and_host=user_and_host, port=port, path=path)
    return Endpoint(
        url=f"https://{host}/{path.lstrip('/')}",
        ssh_metadata=metadata,
    )


def _is_ipv6_literal(value: str) -> bool:
    try:
        ipaddress.IPv6Address(value)
    except ValueError:
        return False
    return True


def endpoint_from_http_url(url: str | SplitResult) -> Endpoint:
    """Pass an http(s) URL straight through."""
    parts = _split(url)
    if parts is None:
        return Endpoint(url=URL_UNKNOWN)
    return Endpoint(url=parts.geturl())


def endpoint_from_file_url(url: str | SplitResult) -> Endpoint:
    """Pass a file URL straight through."""
    parts = _split(url)
    if parts is None:
        return Endpoint(url=URL_UNKNOWN)
    return Endpoint(url=parts.geturl())


def endpoint_from_git_url(url: str | SplitResult) -> Endpoint:
    """The git daemon protocol has no large-file service; use HTTPS on the same location."""
    parts = _split(url)
    if parts is None:
        return Endpoint(url=URL_UNKNOWN)
    return Endpoint(url=parts._replace(scheme="https").geturl())


def is_local_path(raw: str) -> bool:
    """True for absolute POSIX paths and Windows drive paths."""
    return raw.startswith("/") or _WINDOWS_DRIVE_RE.match(raw) is not None


def rewrite_local_path_as_url(path: str) -> str:
    """Rewrite a filesystem path as a ``file://`` URL with forward slashes."""
    if _WINDOWS_DRIVE_RE.match(path):
        return "file:///" + path.replace("\\", "/")
    return "file://" + os.path.abspath(path).replace(os.sep, "/")


def endpoint_from_local_path(path: str) -> Endpoint:
    """Build an endpoint for a repository on the local filesystem."""
    return Endpoint(url=rewrite_local_path_as_url(path))


def new_endpoint(raw: str, operation: str = "") -> Endpoint:
    """Resolve a user-supplied remote string into an Endpoint."""
    if not raw:
        endpoint = Endpoint(url=URL_UNKNOWN)
    elif is_local_path(raw):
        endpoint = endpoint_from_local_path(raw)
    else:
        parts = _split(raw)
        if parts is None:
            endpoint = endpoint_from_bare_ssh_url(raw)
        elif parts.scheme in _SSH_SCHEMES:
            endpoint = endpoint_from_ssh_url(parts)
        elif parts.scheme in _HTTP_SCHEMES:
            endpoint = endpoint_from_http_url(parts)
        elif parts.scheme == "git":
            endpoint = endpoint_from_git_url(parts)
        elif parts.scheme == "file":
            endpoint = endpoint_from_file_url(parts)
        else:
            # No scheme, or a host the URL parser mistook for one ("host:path").
            endpoint = endpoint_from_bare_ssh_url(raw)

    if operation:
        endpoint = replace(endpoint, operation=operation)

    logger.debug(
        "Resolved endpoint",
        extra={
            "remote": raw,
            "url": endpoint.url,
            "ssh": endpoint.ssh_metadata is not None,
            "operation": endpoint.operation,
        },
    )
    return endpoint


def apply_url_aliases(raw: str, config: ConfigLookup, operation: str = "") -> str:
    """
    Rewrite ``raw`` using ``url.<base>.insteadOf`` settings.

    The longest matching alias wins. Uploads consult ``pushInsteadOf`` first
    and fall back to ``insteadOf``.
    """
    kinds = ("pushinsteadof", "insteadof") if operation == "upload" else ("insteadof",)
    for kind in kinds:
        suffix = f".{kind}"
        best_alias = ""
        best_base: str | None = None
        for key in config.git_keys():
            if not key.startswith("url.") or not key.endswith(suffix):
                continue
            alias = config.get(key) or ""
            if alias and raw.startswith(alias) and len(alias) > len(best_alias):
                best_alias = alias
                best_base = key[len("url.") : -len(suffix)]
        if best_base is not None:
            rewritten = best_base + raw[len(best_alias) :]
            logger.debug(
                "Applied URL alias",
                extra={"remote": raw, "rewritten": rewritten, "kind": kind},
            )
            return rewritten
    return raw


def resolve_remote(raw: str, config: ConfigLookup, operation: str = "") -> Endpoint:
    """Apply URL aliases from ``config`` and resolve the result."""
    return new_endpoint(apply_url_aliases(raw, config, operation), operation)
