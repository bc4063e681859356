"""Entry point that shows how a remote resolves to an endpoint and TLS trust."""

import argparse
import json
import logging
import os
import sys
from dataclasses import asdict

from lfsnet.certs import resolve_trust
from lfsnet.endpoint import endpoint_operation, resolve_remote
from lfsnet.http_client import endpoint_host
from lfsnet.settings import ConfigLookup, parse_config_pairs


def _configure_logging() -> None:
    log_level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve a git remote into an LFS endpoint and its TLS trust decision.",
    )
    parser.add_argument("remote", help="Remote URL, scp-like alias, or local path.")
    parser.add_argument(
        "-c",
        dest="config",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Git setting, repeatable (e.g. -c http.sslverify=false).",
    )
    parser.add_argument("--operation", default="", help="Explicit operation (download/upload).")
    parser.add_argument("--method", default="GET", help="HTTP method used to infer the operation.")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Resolve the remote and print the result as JSON."""
    _configure_logging()
    logger = logging.getLogger("lfsnet")
    args = _build_parser().parse_args(argv)

    try:
        config = ConfigLookup.load(parse_config_pairs(args.config))
    except ValueError as exc:
        logger.error("%s", exc)
        return 2

    endpoint = resolve_remote(args.remote, config, args.operation)
    if endpoint.is_unknown:
        logger.error("Could not resolve remote %r.", args.remote)
        print(json.dumps({"url": endpoint.url, "ssh": None}, indent=2))
        return 2

    decision = resolve_trust(endpoint_host(endpoint), config)
    document = {
        "url": endpoint.url,
        "ssh": asdict(endpoint.ssh_metadata) if endpoint.ssh_metadata else None,
        "operation": endpoint_operation(endpoint, args.method),
        "trust": {
            "skip_verify": decision.skip_verify,
            "ca_certificates": len(decision.pool) if decision.pool is not None else None,
            "ca_sources": list(decision.pool.sources) if decision.pool is not None else [],
        },
    }
    print(json.dumps(document, indent=2))
    return 0


if __name__ == "__main__":
    sys.exit(main())
