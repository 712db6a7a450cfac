"""Request dispatch — from (Host, path) to a response descriptor.

The dispatcher derives the animal from the Host header relative to the
configured base domain, takes the first path segment as the status code,
and runs the resolver. It never raises for request-shape problems.

Response status policy: the status line is always 200. The status the
client asked for is content, not a transport outcome, and echoing it
would make caches and uptime monitors treat ``/500`` as a broken site.
The requested code travels in ``X-Httpet-Status`` instead.
"""

import logging
from dataclasses import dataclass

from httpet.pets.registry import AnimalAsset, normalize_animal_name
from httpet.pets.resolver import (
    AnimalFallback,
    AssetResolver,
    ExactAsset,
    GlobalFallback,
    ResolutionResult,
)
from httpet.pets.status_codes import Invalid, StatusCode, parse_status_code

logger = logging.getLogger("httpet.pets")

X_HTTPET_ANIMAL = "X-Httpet-Animal"
X_HTTPET_STATUS = "X-Httpet-Status"
X_HTTPET_RESOLUTION = "X-Httpet-Resolution"


def normalize_host(host: str) -> str:
    """Drop any port and trailing dot, lower-case."""
    return host.strip().split(":", 1)[0].rstrip(".").lower()


def animal_from_host(base_domain: str, host: str | None) -> str | None:
    """Extract the animal identifier from a Host header value.

    Returns ``None`` for the apex (``base`` or ``www.base``), for hosts
    outside the base domain, and for labels that are not valid identifiers
    (including nested subdomains such as ``a.b.base``).
    """
    if not host:
        return None
    host = normalize_host(host)
    if host in (base_domain, f"www.{base_domain}"):
        return None
    suffix = f".{base_domain}"
    if not host.endswith(suffix):
        return None
    return normalize_animal_name(host[: -len(suffix)])


def status_segment(path: str) -> str:
    """First segment after the leading slash (``"/404/x"`` -> ``"404"``)."""
    if not path.startswith("/"):
        return ""
    return path[1:].split("/", 1)[0]


@dataclass(frozen=True, slots=True)
class ResponseDescriptor:
    """What to send back: status, content type, and which asset to stream."""

    status: int
    content_type: str
    asset: AnimalAsset
    resolution: ResolutionResult
    headers: tuple[tuple[str, str], ...] = ()

    @property
    def animal(self) -> str | None:
        match self.resolution:
            case ExactAsset(animal=animal) | AnimalFallback(animal=animal):
                return animal
            case GlobalFallback():
                return None

    @property
    def code(self) -> StatusCode | None:
        """The requested status code, if it parsed."""
        code = self.resolution.code
        return code if isinstance(code, StatusCode) else None


class RequestDispatcher:
    """Maps (host, path) to a ``ResponseDescriptor``.

    ``base_domain`` must already be normalized (see ``HttpetConfig.validate``).
    Holds no per-request state; one instance serves all requests.
    """

    __slots__ = ("_base_domain", "_resolver")

    def __init__(self, base_domain: str, resolver: AssetResolver) -> None:
        self._base_domain = base_domain
        self._resolver = resolver

    @property
    def base_domain(self) -> str:
        return self._base_domain

    @property
    def resolver(self) -> AssetResolver:
        return self._resolver

    def identify(self, host: str | None) -> str | None:
        return animal_from_host(self._base_domain, host)

    def resolve(self, host: str | None, path: str) -> ResolutionResult:
        return self.resolve_animal(self.identify(host), status_segment(path))

    def resolve_animal(self, identifier: str | None, segment: str) -> ResolutionResult:
        """Resolve *segment* for an animal named outright rather than by Host.

        *identifier* is normalized like a subdomain label; ``None`` or an
        invalid label resolves to the site default.
        """
        animal = normalize_animal_name(identifier) if identifier else None
        code = parse_status_code(segment)
        result = self._resolver.resolve(animal, code)
        if isinstance(code, Invalid):
            logger.debug(
                "%s %r -> %s (%s status segment)",
                animal or "-",
                code.segment,
                result.label,
                code.reason,
            )
        else:
            logger.debug("%s %r -> %s %s", animal or "-", segment, result.label, result.asset.key)
        return result

    def dispatch(self, host: str | None, path: str) -> ResponseDescriptor:
        return _describe(self.resolve(host, path))

    def dispatch_animal(self, identifier: str | None, segment: str) -> ResponseDescriptor:
        return _describe(self.resolve_animal(identifier, segment))


def _describe(result: ResolutionResult) -> ResponseDescriptor:
    headers: list[tuple[str, str]] = [(X_HTTPET_RESOLUTION, result.label)]
    match result:
        case ExactAsset(animal=animal) | AnimalFallback(animal=animal):
            headers.append((X_HTTPET_ANIMAL, animal))
    if isinstance(result.code, StatusCode):
        headers.append((X_HTTPET_STATUS, str(result.code)))
    return ResponseDescriptor(
        status=200,
        content_type=result.asset.content_type,
        asset=result.asset,
        resolution=result,
        headers=tuple(headers),
    )
