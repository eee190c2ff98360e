"""
Template engine

A minimal host for native Python templates. A template is any callable
taking a Template handle; it writes markup to the ambient output through
the handle and calls registered functions on it:

    def card(t):
        t.echo(f'<div class="card"><h2>{t.e(t["title"])}</h2>')
        t.echo(t.get("footer", ""))
        t.echo('</div>')

    engine = Engine()
    engine.template_add("components::card", card)
    engine.render("components::card", {"title": "Hi"})

Template names are conventionally namespaced as folder::name.
"""

import html
from functools import partial
from typing import Any, Callable, Dict, Mapping, Optional

from ..config import appsettings, AppSettings
from ..models.functions import FunctionCategory, FunctionSpec
from ..models.protocols import FileSystem
from .assets import AssetLoader, AssetResolver
from .context import RenderContext, context_activate, context_active, context_current
from .errors import UnknownTemplate
from .functions import FunctionRegistry
from .log import LOG
from .transforms import Pipeline, Transform, TransformRegistry

TemplateBody = Callable[['Template'], Any]


class Template:
    """
    Handle passed to a template body while it renders

    Attributes:
        engine: Engine rendering the template
        context: Render pass the template belongs to
        name: Template name
        data: Data bound to the template
    """

    def __init__(
        self,
        engine: 'Engine',
        context: RenderContext,
        name: str,
        data: Dict[str, Any],
    ) -> None:
        self.engine = engine
        self.context = context
        self.name = name
        self.data = data

    def __getitem__(self, key: str) -> Any:
        return self.data[key]

    def __contains__(self, key: str) -> bool:
        return key in self.data

    def get(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def echo(self, *values: Any) -> None:
        """Write values to the ambient output; None is skipped"""
        for value in values:
            self.context.output.write(value)

    def e(self, value: Any) -> str:
        """HTML-escape a value for output; None becomes an empty string"""
        if value is None:
            return ''
        return html.escape(str(value), quote=True)

    def insert(self, name: str, data: Optional[Mapping[str, Any]] = None) -> None:
        self.engine.insert(name, data)

    def fetch(self, name: str, data: Optional[Mapping[str, Any]] = None) -> str:
        return self.engine.render(name, data)

    def batch(self, value: Any, functions: Pipeline) -> str:
        """Run a value through named transforms (e.g., "trim|lower|title")"""
        return self.engine.transforms.pipeline_apply(str(value), functions)

    def call(self, function_name: str, *args: Any, **kwargs: Any) -> Any:
        """
        Call a registered function by name

        Raises:
            UnknownFunction: If nothing is registered under that name
        """
        return self.engine.functions.get(function_name)(self, *args, **kwargs)

    def __getattr__(self, function_name: str) -> Callable[..., Any]:
        # Only consulted for names that are not real attributes
        engine = self.__dict__.get('engine')
        if engine is None or function_name.startswith('_'):
            raise AttributeError(function_name)
        return partial(engine.functions.get(function_name), self)


class Engine:
    """
    Registry of named templates, template functions and transforms

    Implements the TemplateHost protocol used by embeds.
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        filesystem: Optional[FileSystem] = None,
    ) -> None:
        """
        Args:
            settings: Configuration; defaults to the environment-driven singleton
            filesystem: File access for asset helpers; defaults to the local disk
        """
        self.settings = settings or appsettings
        self.templates: Dict[str, TemplateBody] = {}
        self.transforms = TransformRegistry(self.settings)
        self.assets = AssetLoader(AssetResolver.fromSettings(self.settings, filesystem))
        self.functions = FunctionRegistry()

    # Registration

    def template_add(self, name: str, body: TemplateBody) -> 'Engine':
        """Register a template body under a name"""
        self.templates[name] = body
        return self

    def template_exists(self, name: str) -> bool:
        return name in self.templates

    def template_get(self, name: str) -> TemplateBody:
        """
        Raises:
            UnknownTemplate: If no template is registered under name
        """
        try:
            return self.templates[name]
        except KeyError:
            raise UnknownTemplate(f"The template '{name}' could not be found") from None

    def register_function(self, name: str, handler: Callable, description: str = "") -> None:
        """Expose a callable (template, *args) -> Any to template bodies"""
        self.functions.register(FunctionSpec(
            name=name,
            category=FunctionCategory.CUSTOM,
            description=description,
            handler=handler,
        ))

    def transform_register(self, name: str, transform: Transform) -> None:
        """Make a text transform available to capture pipelines and batch()"""
        self.transforms.register(name, transform)

    # Rendering

    def context_create(self, verbosity: Optional[int] = None) -> RenderContext:
        return RenderContext(self, self.transforms, self.settings, verbosity)

    def render(self, name: str, data: Optional[Mapping[str, Any]] = None) -> str:
        """
        Render a named template and return its markup

        Starts a new render pass unless one is already active.

        Raises:
            UnknownTemplate: If no template is registered under name
        """
        body = self.template_get(name)

        context = context_active()
        if context is not None:
            return self.template_execute(body, name, data, context)

        with context_activate(self.context_create()) as context:
            return self.template_execute(body, name, data, context)

    def fetch(self, name: str, data: Optional[Mapping[str, Any]] = None) -> str:
        """Alias for render()"""
        return self.render(name, data)

    def insert(self, name: str, data: Optional[Mapping[str, Any]] = None) -> None:
        """
        Render a named template into the ambient output of the active pass

        Raises:
            NoActiveRender: Outside of a render pass
        """
        context = context_current()
        context.output.write(self.render(name, data))

    def template_execute(
        self,
        body: TemplateBody,
        name: str,
        data: Optional[Mapping[str, Any]],
        context: RenderContext,
    ) -> str:
        """
        Run a template body with its output captured

        Every buffer opened while the body runs is released if it raises.
        """
        template = Template(self, context, name, dict(data or {}))
        depth = context.output.depth
        buffer = context.output.buffer_open()
        LOG(f"Rendering '{name}'", level=2)

        try:
            body(template)
            return buffer.stop()
        except Exception:
            context.output.unwind(depth)
            raise
