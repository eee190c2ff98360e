"""
Transform registry tests
"""

import pytest

from platecraft.config import AppSettings
from platecraft.lib.errors import TemplateLookupError, UnknownTransform
from platecraft.lib.transforms import TransformRegistry, singlespaced, striptags


@pytest.fixture
def transforms():
    return TransformRegistry()


class TestBuiltins:
    """Test the shipped transforms"""

    @pytest.mark.parametrize("name, text, expected", [
        ("trim", "  x  ", "x"),
        ("upper", "abc", "ABC"),
        ("lower", "ABC", "abc"),
        ("title", "hello world", "Hello World"),
        ("capitalize", "hello World", "Hello world"),
        ("reverse", "abc", "cba"),
        ("escape", '<a href="x">', "&lt;a href=&quot;x&quot;&gt;"),
    ])
    def test_builtin(self, transforms, name, text, expected):
        assert transforms.get(name)(text) == expected

    def test_striptags(self):
        assert striptags("<p>Hello <b>there</b></p>") == "Hello there"

    def test_singlespaced(self):
        assert singlespaced("  a \n\t b   c ") == "a b c"


class TestPipelines:
    """Test name resolution and ordered application"""

    def test_string_pipeline_order(self, transforms):
        """Transforms apply left to right"""
        assert transforms.pipeline_apply(" ab ", "trim|reverse|upper") == "BA"

    def test_whitespace_and_empty_names_are_ignored(self, transforms):
        assert transforms.names_resolve(" trim | |upper|") == ["trim", "upper"]

    def test_sequence_pipeline(self, transforms):
        assert transforms.pipeline_apply("Hi", ["lower", "reverse"]) == "ih"

    def test_empty_pipeline_is_identity(self, transforms):
        assert transforms.pipeline_apply("same", "") == "same"

    def test_unknown_name_runs_nothing(self, transforms):
        """Every name resolves before the first transform runs"""
        calls = []
        transforms.register("spy", lambda text: calls.append(text) or text)
        with pytest.raises(UnknownTransform):
            transforms.pipeline_apply("x", "spy|missing")
        assert calls == []

    def test_unknown_transform_is_lookup_error(self, transforms):
        with pytest.raises(TemplateLookupError):
            transforms.get("missing")
        with pytest.raises(LookupError):
            transforms.get("missing")

    def test_register_replaces(self, transforms):
        transforms.register("upper", lambda text: "replaced")
        assert transforms.pipeline_apply("x", "upper") == "replaced"

    def test_custom_delimiter(self):
        """The pipeline delimiter comes from settings"""
        registry = TransformRegistry(AppSettings(batch_delimiter=","))
        assert registry.pipeline_apply(" a ", "trim,upper") == "A"
