"""Host-and-path resolution: which pet picture answers a request.

- ``registry``      — animals and their images, scanned once at startup
- ``status_codes``  — status segment validation and status metadata
- ``resolver``      — the fallback ladder
- ``dispatcher``    — Host/path parsing and response descriptors
- ``assets``        — reading images and HTTP cache validators
"""

from httpet.pets.dispatcher import RequestDispatcher, ResponseDescriptor
from httpet.pets.registry import AnimalAsset, AnimalEntry, AnimalRegistry
from httpet.pets.resolver import (
    AnimalFallback,
    AssetResolver,
    ExactAsset,
    GlobalFallback,
    ResolutionResult,
)
from httpet.pets.status_codes import Invalid, InvalidReason, StatusCode, parse_status_code

__all__ = [
    "AnimalAsset",
    "AnimalEntry",
    "AnimalFallback",
    "AnimalRegistry",
    "AssetResolver",
    "ExactAsset",
    "GlobalFallback",
    "Invalid",
    "InvalidReason",
    "RequestDispatcher",
    "ResolutionResult",
    "ResponseDescriptor",
    "StatusCode",
    "parse_status_code",
]
