"""Kida environment for the HTML pages.

Created once when the app freezes. A configured ``template_dir`` is
searched before the bundled templates, so a deployment can override
any page (``info.html``, ``error.html``) without touching the package.
"""

from dataclasses import dataclass, field
from typing import Any

from kida import ChoiceLoader, Environment, FileSystemLoader, PackageLoader

from httpet import __version__
from httpet.config import HttpetConfig


@dataclass(frozen=True, slots=True)
class Template:
    """A template name plus its render context.

    ::

        Template("info.html", code=404, animal="dog")
    """

    name: str
    context: dict[str, Any] = field(default_factory=dict)

    def __init__(self, name: str, /, **context: Any) -> None:
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "context", context)


def create_environment(config: HttpetConfig) -> Environment:
    loaders = []
    if config.template_dir is not None:
        loaders.append(FileSystemLoader(str(config.template_dir)))
    loaders.append(PackageLoader("httpet", "templates"))

    env = Environment(
        loader=ChoiceLoader(loaders),
        autoescape=True,
        auto_reload=config.debug,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.add_global("site_url", config.base_url())
    env.add_global("base_domain", config.base_domain)
    env.add_global("static_url", config.static_url)
    env.add_global("version", __version__)
    return env


def render_template(env: Environment, tpl: Template) -> str:
    return env.get_template(tpl.name).render(tpl.context)
