"""
Tests for bracketed form-key decoding (wanderlust.forms).
"""

import pytest

from wanderlust.forms import split_key, unflatten


class TestSplitKey:

    @pytest.mark.parametrize("key,parts", [
        ("title", ["title"]),
        ("listing[title]", ["listing", "title"]),
        ("listing[image][url]", ["listing", "image", "url"]),
        ("tags[]", ["tags", ""]),
        ("broken[key", ["broken[key"]),
    ])
    def test_split(self, key, parts):
        assert split_key(key) == parts


class TestUnflatten:

    def test_listing_form(self):
        payload = unflatten([
            ("listing[title]", "Cabin"),
            ("listing[price]", "100"),
            ("listing[location]", "X"),
            ("_method", "PUT"),
        ])

        assert payload == {
            "listing": {"title": "Cabin", "price": "100", "location": "X"},
            "_method": "PUT",
        }

    def test_deep_nesting(self):
        payload = unflatten([("listing[image][url]", "https://example.com/a.jpg")])

        assert payload == {"listing": {"image": {"url": "https://example.com/a.jpg"}}}

    def test_repeated_empty_brackets_build_a_list(self):
        payload = unflatten([("tags[]", "a"), ("tags[]", "b")])

        assert payload == {"tags": ["a", "b"]}

    def test_later_value_wins_for_plain_keys(self):
        assert unflatten([("review[rating]", "2"), ("review[rating]", "4")]) == {
            "review": {"rating": "4"}
        }

    def test_empty_input(self):
        assert unflatten([]) == {}
