"""
Conditional tag matcher tests

Tests opening/closing markup, nesting, mismatches, the single-slot
variant and attribute serialization.
"""

import pytest

from platecraft.lib.errors import TagCapacityExceeded, TagMismatch, UnbalancedClose
from platecraft.lib.tags import TagMatcher, attributes_build


class TestOpenClose:
    """Test the basic open/close pairing"""

    def test_rendered_pair(self):
        matcher = TagMatcher()
        assert matcher.tag_open("h1", True) == "<h1>"
        assert matcher.tag_close("h1") == "</h1>"
        assert matcher.depth == 0

    def test_skipped_pair(self):
        """A skipped opening tag makes the closing call return nothing, without raising"""
        matcher = TagMatcher()
        assert matcher.tag_open("h1", False) == ""
        assert matcher.tag_close("h1") == ""

    def test_truthiness_of_condition(self):
        """Any truthy value renders, any falsy value skips"""
        matcher = TagMatcher()
        assert matcher.tag_open("a", "/about") == "<a>"
        assert matcher.tag_open("span", []) == ""
        assert matcher.tag_close("span") == ""
        assert matcher.tag_close("a") == "</a>"

    def test_attributes_on_opening_tag(self):
        matcher = TagMatcher()
        markup = matcher.tag_open("a", True, {"href": "/about", "class": "nav"})
        assert markup == '<a href="/about" class="nav">'

    def test_tag_name_is_trimmed(self):
        matcher = TagMatcher()
        assert matcher.tag_open("  div ", True) == "<div>"
        assert matcher.tag_close(" div") == "</div>"


class TestNesting:
    """Test stack discipline across nested tags"""

    def test_nested_mixed_render(self):
        """Each close follows its own open's decision"""
        matcher = TagMatcher()
        opened = [
            matcher.tag_open("section", True),
            matcher.tag_open("a", False),
            matcher.tag_open("strong", True),
        ]
        closed = [
            matcher.tag_close("strong"),
            matcher.tag_close("a"),
            matcher.tag_close("section"),
        ]
        assert opened == ["<section>", "", "<strong>"]
        assert closed == ["</strong>", "", "</section>"]

    def test_close_is_lifo(self):
        """Closing the outer tag first is a mismatch"""
        matcher = TagMatcher()
        matcher.tag_open("div", True)
        matcher.tag_open("span", True)
        with pytest.raises(TagMismatch):
            matcher.tag_close("div")

    def test_mismatch_when_not_rendered(self):
        """Names are checked even when the markup was skipped"""
        matcher = TagMatcher()
        matcher.tag_open("h1", False)
        with pytest.raises(TagMismatch):
            matcher.tag_close("h2")

    def test_case_insensitive_match(self):
        matcher = TagMatcher()
        matcher.tag_open("DIV", True)
        assert matcher.tag_close("div") == "</DIV>"

    def test_close_on_empty_stack(self):
        matcher = TagMatcher()
        with pytest.raises(UnbalancedClose):
            matcher.tag_close("div")

    def test_extra_close_after_balanced_pairs(self):
        matcher = TagMatcher()
        matcher.tag_open("p", True)
        matcher.tag_close("p")
        with pytest.raises(UnbalancedClose):
            matcher.tag_close("p")


class TestSingleSlot:
    """Test the capacity-1 matcher used by tagOr()/orTag()"""

    def test_second_open_fails(self):
        """A pending tag is never silently replaced"""
        matcher = TagMatcher(capacity=1)
        matcher.frame_push("h1", True)
        with pytest.raises(TagCapacityExceeded):
            matcher.frame_push("h2", True)
        assert matcher.frame_pop().tagName == "h1"

    def test_slot_is_reusable(self):
        matcher = TagMatcher(capacity=1)
        matcher.frame_push("h1", True)
        matcher.frame_pop()
        matcher.frame_push("h2", True)
        assert matcher.frame_pop("h2").tagName == "h2"


class TestAttributes:
    """Test attribute serialization"""

    def test_empty(self):
        assert attributes_build(None) == ""
        assert attributes_build({}) == ""

    def test_booleans_become_literals(self):
        assert attributes_build({"data-open": True, "hidden": False}) == 'data-open="true" hidden="false"'

    def test_integer_keys_are_bare_tokens(self):
        assert attributes_build({"type": "checkbox", 0: "disabled"}) == 'type="checkbox" disabled'

    def test_sequence_items_are_bare_tokens(self):
        assert attributes_build(["required", "disabled"]) == "required disabled"

    def test_none_values_are_omitted(self):
        assert attributes_build({"id": None, "class": "x", 0: None}) == 'class="x"'

    def test_values_are_escaped(self):
        assert attributes_build({"title": 'Say "hi" & go'}) == 'title="Say &quot;hi&quot; &amp; go"'

    def test_deterministic_order(self):
        """Output follows insertion order"""
        attributes = {"b": 1, "a": 2}
        assert attributes_build(attributes) == attributes_build(dict(attributes)) == 'b="1" a="2"'
