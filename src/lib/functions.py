"""
Template function implementations for platecraft

Each function is called from a template body as t.<name>(...) or
t.call("<name>", ...) and receives the Template handle first. Uses
FunctionSpec for metadata and lookup.
"""

import re
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..models.functions import FunctionSpec, FunctionCategory
from .assets import AssetLoader
from .errors import UnknownFunction
from .tags import attributes_build, openingTag_build

_LEADING_INTEGER = re.compile(r'\s*[+-]?\d+')


def make_conditional(handler: Callable[..., Any]) -> Callable[..., Any]:
    """Factory for ...If variants: call handler only when the first argument is truthy"""
    def conditional_handler(t: Any, conditional: Any, *args: Any, **kwargs: Any) -> Any:
        return handler(t, *args, **kwargs) if conditional else ''
    return conditional_handler


def integer_cast(value: Any) -> int:
    """
    Lenient int conversion for matchInt()

    Strings use their leading integer ("12px" -> 12); anything that does
    not convert becomes 0.
    """
    if isinstance(value, str):
        found = _LEADING_INTEGER.match(value)
        return int(found.group()) if found else 0
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return 0


def values_equal(left: Any, right: Any, strict: bool = True) -> bool:
    """Strict: equal and of the same type. Loose: equal, or equal as strings"""
    if strict:
        return left == right and type(left) is type(right)
    return left == right or str(left) == str(right)


class FunctionRegistry:
    """
    Registry of template function specifications and handlers

    Maps function names (and aliases) to FunctionSpec objects.
    """

    def __init__(self) -> None:
        """Initialize the registry and register all built-in functions"""
        self.specs: Dict[str, FunctionSpec] = {}
        self.embedFunctions_register()
        self.captureFunctions_register()
        self.conditionalFunctions_register()
        self.assetFunctions_register()

    def register(self, spec: FunctionSpec) -> None:
        """Register a function specification"""
        self.specs[spec.name] = spec
        for alias in spec.aliases:
            self.specs[alias] = spec

    def spec_get(self, name: str) -> Optional[FunctionSpec]:
        """Get full function specification by name"""
        return self.specs.get(name)

    def get(self, name: str) -> Callable[..., Any]:
        """
        Get function handler by name

        Raises:
            UnknownFunction: If the name is not registered
        """
        spec = self.specs.get(name)
        if spec is None:
            raise UnknownFunction(f"The template function '{name}' is not registered")
        return spec.handler

    def functions_listByCategory(self, category: FunctionCategory) -> List[FunctionSpec]:
        """Get all functions in a category, each listed once"""
        seen: List[FunctionSpec] = []
        for spec in self.specs.values():
            if spec.category == category and spec not in seen:
                seen.append(spec)
        return seen

    def embedFunctions_register(self) -> None:
        """Register embed and block functions"""

        def embed_handler(t: Any, name: str, data: Optional[Mapping[str, Any]] = None) -> None:
            t.context.embeds.embed_begin(name, data)

        def end_handler(t: Any) -> None:
            t.context.embeds.embed_end()

        def block_start_handler(t: Any, name: str) -> None:
            t.context.embeds.block_start(name)

        def block_stop_handler(t: Any) -> None:
            t.context.embeds.block_stop()

        def block_value_handler(t: Any, name: str, value: Any) -> None:
            t.context.embeds.value_bind(name, value)

        def embeds_handler(t: Any, method: Optional[str] = None, *args: Any) -> Any:
            return t.context.embeds.dispatch(method, *args)

        embed_specs = [
            ('embed', embed_handler, 'Start an embed of a named template', ['startEmbed'],
             ["t.embed('components::card', {'title': 'Hi'})"]),
            ('endEmbed', end_handler, 'End the embed and render its template', ['stopEmbed'],
             ['t.endEmbed()']),
            ('startBlock', block_start_handler, 'Capture output into a template variable', [],
             ["t.startBlock('footer')"]),
            ('stopBlock', block_stop_handler, 'Stop the current block', ['endBlock'],
             ['t.stopBlock()']),
            ('blockValue', block_value_handler, 'Bind a value to a template variable', ['to'],
             ["t.blockValue('title', 'Hi')"]),
            ('embeds', embeds_handler, 'Call an embed operation by name, or embed a template', [],
             ["t.embeds('components::card')", "t.embeds('startBlock', 'footer')"]),
        ]

        for name, handler, desc, aliases, examples in embed_specs:
            self.register(FunctionSpec(
                name=name,
                category=FunctionCategory.EMBED,
                description=desc,
                handler=handler,
                aliases=aliases,
                examples=examples,
            ))

    def captureFunctions_register(self) -> None:
        """Register capture functions"""

        def capture_handler(t: Any) -> Any:
            return t.context.capture()

        def batch_handler(t: Any, value: Any, functions: Any) -> str:
            return t.batch(value, functions)

        self.register(FunctionSpec(
            name='capture',
            category=FunctionCategory.CAPTURE,
            description='Start capturing output; stop() returns the capture',
            handler=capture_handler,
            examples=["c = t.capture(); ...; c.stop('trim')"],
        ))

        self.register(FunctionSpec(
            name='batch',
            category=FunctionCategory.CAPTURE,
            description='Run a value through named transforms',
            handler=batch_handler,
            examples=["t.call('batch', name, 'trim|title')"],
        ))

    def conditionalFunctions_register(self) -> None:
        """Register conditional value, attribute and tag functions"""

        def if_handler(t: Any, conditional: Any, valueTrue: Any = None, valueFalse: Any = None) -> Any:
            return valueTrue if conditional else valueFalse

        def or_handler(t: Any, value: Any, fallback: Any = None) -> Any:
            return value or fallback

        def if_eq_handler(t: Any, value: Any, match: Any, returnTrue: Any = True, strict: bool = True) -> Any:
            return returnTrue if values_equal(value, match, strict) else None

        def wrap_if_handler(
            t: Any,
            conditional: Any,
            value: Any,
            tag: str,
            fallbackTag: Optional[str] = None,
            attributes: Any = None,
        ) -> Any:
            """value wrapped in tag, or in fallbackTag when falsy; unwrapped if there is no fallback"""
            if not conditional and not fallbackTag:
                return value
            tagName = (tag if conditional else fallbackTag).strip()
            return f"{openingTag_build(tagName, attributes)}{value}</{tagName}>"

        def attr_if_handler(
            t: Any,
            conditional: Any,
            attr: str,
            valueTrue: Any = None,
            valueFalse: Any = None,
        ) -> str:
            """attr, attr="valueTrue", attr="valueFalse" or '' depending on the conditional"""
            if not conditional and not valueFalse:
                return ''
            if conditional and not valueTrue and not valueFalse:
                return attr
            value = valueTrue if conditional else valueFalse
            return attributes_build({attr: value}) if value else ''

        def attr_if_not_handler(
            t: Any,
            conditional: Any,
            attr: str,
            valueFalse: Any = None,
            valueTrue: Any = None,
        ) -> str:
            return attr_if_handler(t, not conditional, attr, valueFalse, valueTrue)

        def class_if_handler(t: Any, conditional: Any, valueTrue: Any = None, valueFalse: Any = None) -> str:
            return attr_if_handler(t, conditional, 'class', valueTrue, valueFalse)

        def tag_if_handler(t: Any, tag: str, conditional: Any, attributes: Any = None) -> str:
            return t.context.tags.tag_open(tag, conditional, attributes)

        def if_tag_handler(t: Any, tag: str) -> str:
            return t.context.tags.tag_close(tag)

        def or_tag_handler(t: Any) -> str:
            return t.context.orTags.frame_pop().tagName

        def tag_or_handler(
            t: Any,
            conditional: Any = None,
            tagTrue: Optional[str] = None,
            tagFalse: Optional[str] = None,
        ) -> str:
            """Tag name chosen by the conditional; with no arguments, closes like orTag()"""
            if not conditional and not tagTrue and not tagFalse:
                return or_tag_handler(t)
            tag = tagTrue if conditional else tagFalse
            if not tag:
                return ''
            return t.context.orTags.frame_push(tag, True).tagName

        def match_handler(t: Any, conditional: Any, cases: Optional[Mapping[Any, Any]] = None, default: Any = None) -> Any:
            for candidate, value in (cases or {}).items():
                if values_equal(conditional, candidate):
                    return value
            return default

        def match_int_handler(t: Any, conditional: Any, cases: Optional[Mapping[Any, Any]] = None, default: Any = None) -> Any:
            return match_handler(t, integer_cast(conditional), cases, default)

        def match_str_handler(t: Any, conditional: Any, cases: Optional[Mapping[Any, Any]] = None, default: Any = None) -> Any:
            return match_handler(t, str(conditional), cases, default)

        def match_true_handler(t: Any, cases: Optional[Mapping[Any, Any]] = None, default: Any = None) -> Any:
            for value, conditional in (cases or {}).items():
                if conditional:
                    return value
            return default

        def insert_if_handler(t: Any, name: str, conditional: Any = None, data: Optional[Mapping[str, Any]] = None) -> None:
            if conditional:
                t.insert(name, data)

        def fetch_if_handler(t: Any, name: str, conditional: Any = None, data: Optional[Mapping[str, Any]] = None) -> str:
            return t.fetch(name, data) if conditional else ''

        conditional_specs = [
            ('if', if_handler, 'Value chosen by truthiness', [], ["t.call('if', active, 'on', 'off')"]),
            ('or', or_handler, 'First value if truthy, else the fallback', [], ["t.call('or', title, 'Untitled')"]),
            ('ifEq', if_eq_handler, 'returnTrue if the value equals the match, else None', [], ["t.ifEq(page_id, 1, 'current')"]),
            ('wrapIf', wrap_if_handler, 'Wrap a value in a tag if conditional', [], ["t.wrapIf(url, label, 'strong', 'span')"]),
            ('attrIf', attr_if_handler, 'Attribute if conditional', [], ["t.attrIf(selected, 'aria-current', 'page')"]),
            ('attrIfNot', attr_if_not_handler, 'Attribute unless conditional', [], ["t.attrIfNot(enabled, 'disabled')"]),
            ('classIf', class_if_handler, 'class attribute if conditional', [], ["t.classIf(active, 'active')"]),
            ('tagIf', tag_if_handler, 'Opening tag if conditional', [], ["t.tagIf('a', url, {'href': url})"]),
            ('ifTag', if_tag_handler, 'Closing tag matching the last tagIf()', [], ["t.ifTag('a')"]),
            ('tagOr', tag_or_handler, 'Pick one of two tag names', [], ["t.tagOr(primary, 'h1', 'h2')"]),
            ('orTag', or_tag_handler, 'Tag name picked by the last tagOr()', [], ['t.orTag()']),
            ('match', match_handler, 'Value of the case equal to the conditional', ['switch'], ["t.match(color, {'black': 'text-black'})"]),
            ('matchInt', match_int_handler, 'match() with the conditional cast leniently to int', [], ["t.matchInt('2', {2: 'two'})"]),
            ('matchStr', match_str_handler, 'match() with the conditional cast to str', [], ["t.matchStr(2, {'2': 'two'})"]),
            ('matchTrue', match_true_handler, 'First key whose value is truthy', [], ["t.matchTrue({'dark': is_dark})"]),
            ('insertIf', insert_if_handler, 'Insert a template if conditional', [], ["t.insertIf('components::gallery', images)"]),
            ('fetchIf', fetch_if_handler, 'Fetch a template if conditional', [], ["t.fetchIf('components::gallery', images)"]),
        ]

        for name, handler, desc, aliases, examples in conditional_specs:
            self.register(FunctionSpec(
                name=name,
                category=FunctionCategory.CONDITIONAL,
                description=desc,
                handler=handler,
                aliases=aliases,
                examples=examples,
            ))

    def assetFunctions_register(self) -> None:
        """Register asset path, link, inline and preload functions"""

        def asset_path_handler(t: Any, folderFile: str, absolute: bool = False) -> str:
            return t.engine.assets.resolver.path_get(folderFile, absolute)

        def make_loader_call(method: Callable[..., str]) -> Callable[..., str]:
            """Factory binding an AssetLoader method to the calling template's engine"""
            def handler(t: Any, *args: Any, **kwargs: Any) -> str:
                return method(t.engine.assets, *args, **kwargs)
            return handler

        asset_specs = [
            ('linkAsset', AssetLoader.asset_link, 'Link a CSS/JS asset by folder::file', "t.linkAsset('css::app.css')"),
            ('linkAssets', AssetLoader.assets_link, 'Link several assets', "t.linkAssets(['css::app.css', 'js::app.js'])"),
            ('inlineAsset', AssetLoader.asset_inline, 'Inline a CSS/JS asset by folder::file', "t.inlineAsset('css::critical.css')"),
            ('inlineAssets', AssetLoader.assets_inline, 'Inline several assets', "t.inlineAssets(['css::a.css'])"),
            ('preloadAsset', AssetLoader.asset_preload, 'Preload a CSS/JS/font asset', "t.preloadAsset('fonts::inter.woff2')"),
            ('preloadAssets', AssetLoader.assets_preload, 'Preload several assets', "t.preloadAssets(['js::app.js'])"),
            ('linkCss', AssetLoader.css_link, 'Link a stylesheet by path', "t.linkCss('/styles/app.css')"),
            ('inlineCss', AssetLoader.css_inline, 'Inline a stylesheet by path', "t.inlineCss('/styles/app.css')"),
            ('linkJs', AssetLoader.js_link, 'Link a script by path', "t.linkJs('/scripts/app.js')"),
            ('inlineJs', AssetLoader.js_inline, 'Inline a script by path', "t.inlineJs('/scripts/app.js')"),
            ('preloadCss', AssetLoader.css_preload, 'Preload a stylesheet by path', "t.preloadCss('/styles/app.css')"),
            ('preloadJs', AssetLoader.js_preload, 'Preload a script by path', "t.preloadJs('/scripts/app.js')"),
            ('preloadFont', AssetLoader.font_preload, 'Preload a font by path', "t.preloadFont('/fonts/inter.woff2')"),
        ]

        self.register(FunctionSpec(
            name='getAssetPath',
            category=FunctionCategory.ASSET,
            description='Web path of a folder::file token',
            handler=asset_path_handler,
            examples=["t.getAssetPath('css::app.css')"],
        ))

        for name, method, desc, example in asset_specs:
            handler = make_loader_call(method)
            self.register(FunctionSpec(
                name=name,
                category=FunctionCategory.ASSET,
                description=desc,
                handler=handler,
                examples=[example],
            ))
            self.register(FunctionSpec(
                name=f'{name}If',
                category=FunctionCategory.ASSET,
                description=f'{desc}, if the first argument is truthy',
                handler=make_conditional(handler),
                examples=[example.replace(f'{name}(', f'{name}If(condition, ')],
            ))
