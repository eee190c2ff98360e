"""
Named text transforms

Capture pipelines and the batch() template helper apply a sequence of
single-argument text functions chosen by name:

    capture.stop("trim|upper")
    t.batch(person["title"], "trim|lower|title")

Names resolve against an explicit registry; there is no fallback lookup
of arbitrary Python callables.
"""

import html
import re
from typing import Callable, Dict, Iterable, List, Optional, Union

from ..config import appsettings, AppSettings
from .errors import UnknownTransform
from .log import LOG

Transform = Callable[[str], str]
Pipeline = Union[str, Iterable[str]]

_TAG_PATTERN = re.compile(r'<[^>]*>')
_WHITESPACE_PATTERN = re.compile(r'\s+')


def striptags(text: str) -> str:
    """Remove markup tags, keeping their text content"""
    return _TAG_PATTERN.sub('', text)


def singlespaced(text: str) -> str:
    """Collapse every whitespace run to a single space and trim the ends"""
    return _WHITESPACE_PATTERN.sub(' ', text).strip()


class TransformRegistry:
    """
    Registry of text transforms available to capture pipelines

    Ships with a small set of built-ins; hosts add their own with register().
    """

    def __init__(self, settings: Optional[AppSettings] = None) -> None:
        self.settings = settings or appsettings
        self.transforms: Dict[str, Transform] = {}
        self.builtins_register()

    def builtins_register(self) -> None:
        """Register the built-in transforms"""
        self.register('trim', str.strip)
        self.register('upper', str.upper)
        self.register('lower', str.lower)
        self.register('title', str.title)
        self.register('capitalize', str.capitalize)
        self.register('reverse', lambda text: text[::-1])
        self.register('escape', lambda text: html.escape(text, quote=True))
        self.register('striptags', striptags)
        self.register('singlespaced', singlespaced)

    def register(self, name: str, transform: Transform) -> None:
        """Register (or replace) a transform under a name"""
        self.transforms[name] = transform

    def get(self, name: str) -> Transform:
        """
        Look up a transform by name

        Raises:
            UnknownTransform: If nothing is registered under that name
        """
        try:
            return self.transforms[name]
        except KeyError:
            raise UnknownTransform(
                f"Unknown transform '{name}'. Registered: {', '.join(sorted(self.transforms))}"
            ) from None

    def names_resolve(self, pipeline: Pipeline) -> List[str]:
        """Normalize a pipeline string or sequence into a list of names"""
        if isinstance(pipeline, str):
            return self.settings.transformNames_split(pipeline)
        return [name.strip() for name in pipeline if name and name.strip()]

    def pipeline_apply(self, text: str, pipeline: Pipeline) -> str:
        """
        Apply each named transform in order

        Every name is resolved before any transform runs, so an unknown
        name fails without partial work.

        Args:
            text: Input text
            pipeline: "a|b|c" string or sequence of names

        Returns:
            Transformed text

        Raises:
            UnknownTransform: If any name does not resolve
        """
        transforms = [self.get(name) for name in self.names_resolve(pipeline)]
        for transform in transforms:
            text = transform(text)
        LOG(f"Applied {len(transforms)} transform(s)", level=3)
        return text
