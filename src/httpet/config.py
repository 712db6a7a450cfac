"""Application configuration.

HttpetConfig is a frozen dataclass — immutable after creation and passed
explicitly into the app, so tests can build isolated apps side by side.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, replace
from pathlib import Path
from urllib.parse import urlsplit

from httpet.errors import ConfigurationError

PACKAGE_DIR = Path(__file__).parent

_LABEL_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?$")


def normalize_base_domain(value: str) -> str:
    """Trim, lower-case, and strip trailing dots/slashes from a base domain."""
    return value.strip().rstrip("./").lower()


@dataclass(frozen=True, slots=True)
class HttpetConfig:
    """Service configuration. Immutable after creation.

    All fields have defaults suitable for local development::

        config = HttpetConfig(base_domain="httpet.org", image_dir="/data/images")
    """

    # Resolution
    base_domain: str = "localhost"
    image_dir: str | Path = "./images"

    # Server
    host: str = "127.0.0.1"
    port: int = 9000
    debug: bool = False
    workers: int = 0  # 0 = auto-detect from CPU count

    # Public URL used when building absolute links (e.g. https://httpet.org)
    frontend_url: str | None = None

    # Templates: extra directory searched before the bundled templates
    template_dir: str | Path | None = None

    # Static files
    static_dir: str | Path | None = PACKAGE_DIR / "static"
    static_url: str = "/static"

    # Image responses
    image_cache_control: str = "public, max-age=86400"

    def validate(self) -> HttpetConfig:
        """Return a copy with a normalized base domain.

        Raises ``ConfigurationError`` if the base domain is empty, carries
        a scheme, port or path, or has labels that are not valid DNS labels.
        """
        domain = normalize_base_domain(self.base_domain)
        if not domain:
            msg = "base domain must not be empty"
            raise ConfigurationError(msg)
        if "://" in domain or "/" in domain or ":" in domain:
            msg = (
                f"base domain {self.base_domain!r} must be a bare host name"
                " without scheme, port or path"
            )
            raise ConfigurationError(msg)
        if not all(_LABEL_RE.match(label) for label in domain.split(".")):
            msg = f"base domain {self.base_domain!r} is not a valid host name"
            raise ConfigurationError(msg)
        if self.frontend_url is not None:
            parts = urlsplit(self.frontend_url)
            if parts.scheme not in ("http", "https") or not parts.hostname:
                msg = f"frontend URL {self.frontend_url!r} must be an absolute http(s) URL"
                raise ConfigurationError(msg)
        return replace(self, base_domain=domain)

    def base_url(self) -> str:
        """Absolute URL of the apex site, without a trailing slash."""
        return self._url_for(self.base_domain)

    def pet_base_url(self, animal: str) -> str:
        """Absolute URL of an animal's subdomain, without a trailing slash."""
        return self._url_for(f"{animal}.{self.base_domain}")

    def _url_for(self, hostname: str) -> str:
        if self.frontend_url is not None:
            parts = urlsplit(self.frontend_url)
            netloc = hostname if parts.port is None else f"{hostname}:{parts.port}"
            return f"{parts.scheme}://{netloc}"
        if self.port == 443:
            return f"https://{hostname}"
        if self.port == 80:
            return f"http://{hostname}"
        return f"http://{hostname}:{self.port}"
