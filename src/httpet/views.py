"""Route handlers.

- ``/healthz``: ``healthz``
- ``/animals``: ``animals``
- ``/info/<code>`` and ``/info/<animal>/<code>``: ``info``
- ``/preview/<code>`` and ``/preview/<animal>/<code>``: ``preview``
- ``/{segment}/info``: ``info_redirect``
- ``/`` and ``/{rest:path}``: ``image``

Static segments win over captures, so ``/animals`` is never read as a
status code; anything unmatched falls to the image handler. The
one-segment ``info`` and ``preview`` forms take the animal from Host;
the two-segment forms name it in the path, which is how the apex site
links to a particular animal.
"""

from __future__ import annotations

from typing import TYPE_CHECKING
from urllib.parse import quote

from httpet.errors import NotFound
from httpet.http.request import Request
from httpet.http.response import Response, json_response, redirect
from httpet.pets.assets import is_not_modified, read_asset
from httpet.pets.dispatcher import ResponseDescriptor
from httpet.pets.resolver import AnimalFallback, ExactAsset, ResolutionResult
from httpet.pets.status_codes import Invalid, StatusCode, parse_status_code, status_info
from httpet.templating import Template, render_template

if TYPE_CHECKING:
    from httpet.app import App


def split_target(target: str) -> tuple[str | None, str]:
    """Split ``"404"`` or ``"dog/404"`` into (animal, segment).

    Raises ``NotFound`` for anything with more than two segments.
    """
    parts = [part for part in target.split("/") if part]
    match parts:
        case [segment]:
            return None, segment
        case [animal, segment]:
            return animal, segment
        case _:
            raise NotFound(f"No page for {target!r}")


def valid_code(segment: str) -> StatusCode:
    """Parse *segment* or raise ``NotFound``."""
    code = parse_status_code(segment)
    if isinstance(code, Invalid):
        raise NotFound(f"{code.segment!r} is not a status code ({code.reason})")
    return code


class PetViews:
    """Handlers bound to one app's dispatcher, registry, and templates."""

    __slots__ = ("_app",)

    def __init__(self, app: App) -> None:
        self._app = app

    async def image(self, request: Request) -> Response:
        """Serve the resolved picture for this Host and path."""
        descriptor = self._app.dispatcher.dispatch(request.host, request.path)
        return await self._picture(request, descriptor)

    async def preview(self, request: Request) -> Response:
        """Serve the picture for a code, the animal named in the path or Host."""
        animal, segment = split_target(request.path_params["target"])
        dispatcher = self._app.dispatcher
        if animal is None:
            animal = dispatcher.identify(request.host)
        descriptor = dispatcher.dispatch_animal(animal, segment)
        return await self._picture(request, descriptor)

    async def _picture(self, request: Request, descriptor: ResponseDescriptor) -> Response:
        loaded = await read_asset(descriptor.asset)
        response = (
            Response(status=descriptor.status, content_type=descriptor.content_type)
            .with_headers(descriptor.headers)
            .with_headers(loaded.cache.as_headers())
            .with_header("Cache-Control", self._app.config.image_cache_control)
            .with_header("Vary", "Host")
        )
        if is_not_modified(request.headers, loaded.cache):
            return response.with_status(304)
        return response.with_body(loaded.body)

    async def info(self, request: Request) -> Response:
        """HTML page describing a status code, illustrated by an animal."""
        animal, segment = split_target(request.path_params["target"])
        code = valid_code(segment)

        dispatcher = self._app.dispatcher
        if animal is None:
            result = dispatcher.resolve_animal(dispatcher.identify(request.host), segment)
            image_url = f"/{code.value}"
        else:
            result = dispatcher.resolve_animal(animal, segment)
            image_url = f"/preview/{quote(animal, safe='')}/{code.value}"

        meta = status_info(code.value)
        body = render_template(
            self._app.kida_env,
            Template(
                "info.html",
                code=code.value,
                name=meta.name if meta else "Unknown status",
                summary=meta.summary if meta else "",
                mdn_url=meta.mdn_url if meta else "",
                animal=_animal_of(result),
                image_url=image_url,
                exact=isinstance(result, ExactAsset),
                resolution=result.label,
            ),
        )
        return Response(body=body)

    async def info_redirect(self, request: Request) -> Response:
        code = valid_code(request.path_params["segment"])
        return redirect(f"/info/{code.value}")

    async def animals(self, request: Request) -> Response:
        """HTML listing of every animal with links to its subdomain."""
        config = self._app.config
        animals = [
            {
                "name": entry.name,
                "url": config.pet_base_url(entry.name),
                "codes": [
                    {"code": code, "name": _status_name(code)} for code in entry.codes
                ],
            }
            for entry in self._app.registry
        ]
        body = render_template(self._app.kida_env, Template("animals.html", animals=animals))
        return Response(body=body)

    async def healthz(self, request: Request) -> Response:
        return json_response({"status": "ok", "animals": len(self._app.registry)})


def _status_name(code: int) -> str:
    meta = status_info(code)
    return meta.name if meta else "Unknown status"


def _animal_of(result: ResolutionResult) -> str | None:
    match result:
        case ExactAsset(animal=animal) | AnimalFallback(animal=animal):
            return animal
    return None


def register_views(app: App) -> PetViews:
    views = PetViews(app)
    app.add_route("/healthz", views.healthz, name="healthz")
    app.add_route("/animals", views.animals, name="animals")
    app.add_route("/info/{target:path}", views.info, name="info")
    app.add_route("/preview/{target:path}", views.preview, name="preview")
    app.add_route("/{segment}/info", views.info_redirect, name="info_redirect")
    app.add_route("/", views.image, name="index")
    app.add_route("/{rest:path}", views.image, name="image")
    return views
