"""
Endpoint and TLS trust resolution for a Git large-file storage client.

``lfsnet.endpoint`` resolves remotes into Endpoints, ``lfsnet.certs`` decides
per-host TLS trust, and ``lfsnet.http_client`` applies both to an httpx client.
"""

from lfsnet.certs import CertPool, TrustDecision, resolve_trust
from lfsnet.endpoint import (
    URL_UNKNOWN,
    Endpoint,
    SSHMetadata,
    endpoint_operation,
    new_endpoint,
    resolve_remote,
)
from lfsnet.settings import ConfigLookup

__all__ = [
    "URL_UNKNOWN",
    "CertPool",
    "ConfigLookup",
    "Endpoint",
    "SSHMetadata",
    "TrustDecision",
    "endpoint_operation",
    "new_endpoint",
    "resolve_remote",
    "resolve_trust",
]
