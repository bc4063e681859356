"""HTTP client factory that applies a resolved Endpoint and its TLS trust decision."""

import logging
import ssl
from urllib.parse import urlsplit

import certifi
import httpx

from lfsnet.certs import TrustDecision, resolve_trust
from lfsnet.endpoint import Endpoint
from lfsnet.settings import ConfigLookup

logger = logging.getLogger(__name__)


class UnresolvedEndpointError(RuntimeError):
    """Raised when an endpoint is the unknown sentinel or is not served over HTTP."""


def build_ssl_context(decision: TrustDecision) -> ssl.SSLContext:
    """
    Translate a trust decision into an SSLContext.

    An explicit pool replaces the default trust store entirely; without one the
    certifi bundle is used, as httpx does by default.
    """
    if decision.pool is not None:
        ctx = ssl.create_default_context(cadata=decision.pool.pem())
    else:
        ctx = ssl.create_default_context(cafile=certifi.where())

    if decision.skip_verify:
        ctx.check_hostname = False
        ctx.verify_mode = ssl.CERT_NONE
        logger.warning("TLS certificate verification is disabled for this connection.")
    return ctx


def endpoint_host(endpoint: Endpoint) -> str:
    """Return ``host[:port]`` of the endpoint URL, without user info."""
    return urlsplit(endpoint.url).netloc.rpartition("@")[2]


def create_lfs_client(
    endpoint: Endpoint,
    config: ConfigLookup,
    *,
    timeout: float = 30.0,
) -> httpx.AsyncClient:
    """Build an AsyncClient rooted at the endpoint URL with per-host TLS trust."""
    if endpoint.is_unknown:
        raise UnresolvedEndpointError("Endpoint URL could not be resolved.")
    scheme = urlsplit(endpoint.url).scheme
    if scheme not in ("http", "https"):
        raise UnresolvedEndpointError(
            f"Endpoint {endpoint.url!r} is not served over HTTP ({scheme or 'no scheme'})."
        )

    host = endpoint_host(endpoint)
    decision = resolve_trust(host, config)
    logger.debug(
        "Creating LFS client",
        extra={
            "url": endpoint.url,
            "host": host,
            "custom_ca": decision.pool is not None,
            "skip_verify": decision.skip_verify,
        },
    )
    return httpx.AsyncClient(
        base_url=endpoint.url,
        timeout=timeout,
        verify=build_ssl_context(decision),
    )
