"""httpet CLI — serve pet pictures for HTTP status codes.

Entry point registered as ``httpet`` in ``pyproject.toml``::

    [project.scripts]
    httpet = "httpet.cli:main"

Every flag falls back to an ``HTTPET_*`` environment variable, then to
the ``HttpetConfig`` default.
"""

import argparse
import logging
import os
import sys
from collections.abc import Mapping

from httpet.config import HttpetConfig
from httpet.errors import ConfigurationError
from httpet.log import setup_logging

logger = logging.getLogger("httpet.cli")

_TRUE = frozenset({"1", "true", "yes", "on"})


def env_flag(env: Mapping[str, str], name: str) -> bool:
    return env.get(name, "").strip().lower() in _TRUE


def env_int(env: Mapping[str, str], name: str, default: int) -> int:
    value = env.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        msg = f"{name} must be an integer, got {value!r}"
        raise ConfigurationError(msg) from None


def build_parser(env: Mapping[str, str]) -> argparse.ArgumentParser:
    defaults = HttpetConfig()
    parser = argparse.ArgumentParser(
        prog="httpet",
        description="httpet — HTTP status codes, illustrated by pets.",
    )
    parser.add_argument(
        "--base-domain",
        default=env.get("HTTPET_BASE_DOMAIN", defaults.base_domain),
        help="Domain whose subdomains name the animals (env: HTTPET_BASE_DOMAIN)",
    )
    parser.add_argument(
        "--image-dir",
        default=env.get("HTTPET_IMAGE_DIR", str(defaults.image_dir)),
        help="Directory holding default.<ext> and one folder per animal (env: HTTPET_IMAGE_DIR)",
    )
    parser.add_argument(
        "--listen-address",
        default=env.get("HTTPET_LISTEN_ADDRESS", defaults.host),
        help="Bind address (env: HTTPET_LISTEN_ADDRESS)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=env_int(env, "HTTPET_PORT", defaults.port),
        help="Bind port (env: HTTPET_PORT)",
    )
    parser.add_argument(
        "--frontend-url",
        default=env.get("HTTPET_FRONTEND_URL") or None,
        help="Public URL used for absolute links (env: HTTPET_FRONTEND_URL)",
    )
    parser.add_argument(
        "--template-dir",
        default=env.get("HTTPET_TEMPLATE_DIR") or None,
        help="Directory searched before the bundled templates (env: HTTPET_TEMPLATE_DIR)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=env_int(env, "HTTPET_WORKERS", defaults.workers),
        help="Worker count, 0 to auto-detect (env: HTTPET_WORKERS)",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=env_flag(env, "HTTPET_DEBUG"),
        help="Debug logging, single worker with reload (env: HTTPET_DEBUG)",
    )
    parser.add_argument(
        "--check",
        action="store_true",
        help="Validate configuration and images, print a summary, and exit",
    )
    return parser


def config_from_args(args: argparse.Namespace) -> HttpetConfig:
    return HttpetConfig(
        base_domain=args.base_domain,
        image_dir=args.image_dir,
        host=args.listen_address,
        port=args.port,
        debug=args.debug,
        workers=args.workers,
        frontend_url=args.frontend_url,
        template_dir=args.template_dir,
    )


def main(argv: list[str] | None = None, env: Mapping[str, str] | None = None) -> None:
    """CLI entry point for the ``httpet`` command."""
    from httpet.app import create_app

    env = os.environ if env is None else env
    try:
        parser = build_parser(env)
    except ConfigurationError as exc:
        setup_logging(debug=False)
        logger.error("%s", exc)
        sys.exit(1)
    args = parser.parse_args(argv)
    setup_logging(debug=args.debug)

    try:
        app = create_app(config_from_args(args))
    except ConfigurationError as exc:
        logger.error("Configuration error: %s", exc)
        sys.exit(1)

    if args.check:
        print(f"base domain: {app.config.base_domain}")
        print(f"site url:    {app.config.base_url()}")
        print(f"animals:     {len(app.registry)}")
        for entry in app.registry:
            codes = ", ".join(str(code) for code in entry.codes) or "(default only)"
            print(f"  {entry.name}: {codes}")
        return

    app.run()
