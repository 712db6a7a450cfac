"""httpet — HTTP status codes, illustrated by pets.

``dog.httpet.org/404`` answers with a dog-themed "Not Found" picture.
The animal comes from the subdomain, the status code from the first
path segment, and anything unrecognised falls back to a default image.

Basic usage::

    from httpet import HttpetConfig, create_app

    app = create_app(HttpetConfig(base_domain="httpet.org", image_dir="./images"))
    app.run()
"""

__version__ = "0.3.0"
__all__ = [
    "AnimalRegistry",
    "App",
    "AssetResolver",
    "ConfigurationError",
    "HTTPError",
    "HttpetConfig",
    "HttpetError",
    "RequestDispatcher",
    "create_app",
    "parse_status_code",
]


def __getattr__(name: str) -> object:
    """Lazy imports for the public API; ``import httpet`` stays cheap."""
    if name in ("App", "create_app"):
        from httpet import app

        return getattr(app, name)

    if name == "HttpetConfig":
        from httpet.config import HttpetConfig

        return HttpetConfig

    if name in ("ConfigurationError", "HTTPError", "HttpetError"):
        from httpet import errors

        return getattr(errors, name)

    if name in ("AnimalRegistry", "AssetResolver", "RequestDispatcher", "parse_status_code"):
        from httpet import pets

        return getattr(pets, name)

    msg = f"module 'httpet' has no attribute {name!r}"
    raise AttributeError(msg)
