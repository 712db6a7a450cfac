"""Asset resolution — the fallback ladder.

Given an (optional) animal identifier and a parsed status code, pick the
image to serve. First match wins:

1. no identifier                     -> GlobalFallback
2. identifier not in the registry    -> GlobalFallback
3. status segment invalid            -> AnimalFallback
4. no bespoke image for that code    -> AnimalFallback
5. otherwise                         -> ExactAsset

Every input resolves to something renderable. Unknown or hostile
subdomains and garbage paths degrade to a default image, never an error.
"""

from dataclasses import dataclass
from typing import ClassVar

from httpet.pets.registry import AnimalAsset, AnimalEntry, AnimalRegistry
from httpet.pets.status_codes import Invalid, StatusCode


@dataclass(frozen=True, slots=True)
class ExactAsset:
    """The animal has a bespoke image for the requested code."""

    asset: AnimalAsset
    animal: str
    code: StatusCode

    label: ClassVar[str] = "exact"


@dataclass(frozen=True, slots=True)
class AnimalFallback:
    """Known animal, but the code is invalid or has no bespoke image."""

    asset: AnimalAsset
    animal: str
    code: StatusCode | Invalid

    label: ClassVar[str] = "animal-fallback"


@dataclass(frozen=True, slots=True)
class GlobalFallback:
    """No usable animal: serve the site default."""

    asset: AnimalAsset
    code: StatusCode | Invalid

    label: ClassVar[str] = "global-fallback"


type ResolutionResult = ExactAsset | AnimalFallback | GlobalFallback


class AssetResolver:
    """Applies the fallback ladder against a registry snapshot."""

    __slots__ = ("_registry",)

    def __init__(self, registry: AnimalRegistry) -> None:
        self._registry = registry

    @property
    def registry(self) -> AnimalRegistry:
        return self._registry

    def resolve(self, identifier: str | None, code: StatusCode | Invalid) -> ResolutionResult:
        if identifier is None:
            return GlobalFallback(self._registry.site_default, code)

        entry = self._registry.lookup(identifier)
        if entry is None:
            return GlobalFallback(self._registry.site_default, code)

        match code:
            case Invalid():
                return _animal_fallback(entry, code)
            case StatusCode():
                asset = entry.asset_for(code)
                if asset is None:
                    return _animal_fallback(entry, code)
                return ExactAsset(asset, entry.name, code)


def _animal_fallback(entry: AnimalEntry, code: StatusCode | Invalid) -> AnimalFallback:
    return AnimalFallback(entry.fallback, entry.name, code)
