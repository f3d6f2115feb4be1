"""Shortcode rendering, extraction and validation tests."""

from __future__ import annotations

import pytest

from arcanalinks.engine import shortcodes
from arcanalinks.engine.config import load_config
from arcanalinks.engine.types import LinkType


@pytest.mark.parametrize(
    ("link_type", "slug", "expected"),
    [
        ("tarot", "the-fool", "/tarot/the-fool"),
        ("blog", "moon-rituals", "/blog/moon-rituals"),
        ("horoscope", "aries", "/horoscopes/aries"),
        ("spread", "cups", "/tarot/cards/cups"),
        ("spread", "major-arcana", "/tarot/cards/major-arcana"),
        ("spread", "celtic-cross-reading", "/reading/celtic-cross"),
        ("spread", "single-card", "/reading/single"),
        ("spread", "unknown-spread", "/reading"),
        ("oracle", "anything", "#"),
    ],
)
def test_url_for_type(link_type, slug, expected):
    assert shortcodes.get_url_for_type(link_type, slug) == expected


def test_render_uses_registry_title_and_exact_anchor_markup(registry):
    html = shortcodes.process_shortcodes("See [[tarot:the-fool]].", registry)

    assert html == (
        'See <a href="/tarot/the-fool" class="internal-link" data-link-type="tarot" '
        'target="_blank" rel="noopener noreferrer">The Fool</a>.'
    )


def test_render_label_fallbacks(registry):
    custom = shortcodes.process_shortcodes("[[spread:celtic-cross|this spread]]", registry)
    missing = shortcodes.process_shortcodes("[[blog:no-such-post]]", registry)
    no_registry = shortcodes.process_shortcodes("[[horoscope:aries]]")

    assert custom.endswith(">this spread</a>")
    assert 'href="/reading/celtic-cross"' in custom
    assert missing.endswith(">no-such-post</a>")
    assert no_registry.endswith(">aries</a>")


def test_render_is_idempotent_and_leaves_malformed_tokens(registry):
    content = "[[tarot:death|Death]] then [[Tarot:death]] then [[tarot:a:b]] then [[tarot:]]"

    once = shortcodes.process_shortcodes(content, registry)

    assert once.count("<a ") == 1
    assert "[[Tarot:death]]" in once
    assert "[[tarot:a:b]]" in once
    assert "[[tarot:]]" in once
    assert shortcodes.process_shortcodes(once, registry) == once


def test_render_escapes_href(registry):
    html = shortcodes.process_shortcodes('[[blog:a"b]]', registry)

    assert 'href="/blog/a&quot;b"' in html


def test_render_empty_content():
    assert shortcodes.process_shortcodes("") == ""
    assert shortcodes.process_shortcodes(None) == ""


def test_extract_reports_positions_and_custom_text():
    content = "Intro [[tarot:the-fool|Fool]] and [[blog:moon-rituals]] plus [[tarot:a:b]]"

    found = shortcodes.extract_shortcodes(content)

    assert [(item.type, item.slug, item.custom_text) for item in found] == [
        (LinkType.TAROT, "the-fool", "Fool"),
        (LinkType.BLOG, "moon-rituals", None),
    ]
    assert found[0].position == content.index("[[tarot:the-fool")
    assert found[0].full_match == "[[tarot:the-fool|Fool]]"
    assert found[1].as_dict()["type"] == "blog"


def test_validate_names_missing_slugs(registry):
    content = "[[tarot:the-fool]] [[tarot:the-magician]] [[spread:celtic-cross]] [[horoscope:leo|Leo]]"

    invalid = shortcodes.validate_shortcodes(content, registry)

    assert [item.shortcode for item in invalid] == ["[[tarot:the-magician]]", "[[horoscope:leo|Leo]]"]
    assert invalid[0].reason == 'No tarot found with slug "the-magician"'
    assert invalid[1].reason == 'No horoscope found with slug "leo"'


def test_count_shortcodes():
    content = "[[tarot:a]] [[tarot:b|B]] [[blog:c]] [[spread:d]] [[oracle:e]]"

    assert shortcodes.count_shortcodes(content) == {
        "tarot": 2,
        "blog": 1,
        "spread": 1,
        "horoscope": 0,
        "total": 4,
    }
    assert shortcodes.count_shortcodes("")["total"] == 0


def test_strip_shortcodes_prefers_custom_text_then_title(registry):
    content = "[[tarot:the-fool]] meets [[tarot:death|the reaper]] in [[blog:gone]]."

    assert shortcodes.strip_shortcodes(content, registry) == "The Fool meets the reaper in gone."
    assert shortcodes.strip_shortcodes(None) == ""


def test_format_shortcode():
    assert shortcodes.format_shortcode(LinkType.TAROT, "the-fool") == "[[tarot:the-fool]]"
    assert shortcodes.format_shortcode(LinkType.BLOG, "x", "Read this") == "[[blog:x|Read this]]"


def test_yaml_overrides_spreads_and_anchor(tmp_path):
    config_path = tmp_path / "engine.yaml"
    config_path.write_text(
        "spread_aliases:\n"
        "  year-ahead: year-ahead\n"
        "category_slugs: [court-cards]\n"
        "anchor:\n"
        "  target: _self\n",
        encoding="utf-8",
    )
    config = load_config(config_path)

    assert shortcodes.get_url_for_type("spread", "year-ahead", config) == "/reading/year-ahead"
    assert shortcodes.get_url_for_type("spread", "celtic-cross", config) == "/reading/celtic-cross"
    assert shortcodes.get_url_for_type("spread", "court-cards", config) == "/tarot/cards/court-cards"
    assert shortcodes.get_url_for_type("spread", "cups", config) == "/reading"

    html = shortcodes.process_shortcodes("[[tarot:death]]", config=config)
    assert 'target="_self"' in html
    assert 'rel="noopener noreferrer"' in html


def test_colon_in_slug_is_not_a_token():
    assert shortcodes.extract_shortcodes("[[tarot:death:Renewal]]") == []

    found = shortcodes.extract_shortcodes("[[tarot:death|Renewal]]")
    assert len(found) == 1
    assert found[0].custom_text == "Renewal"


def test_spread_routing_examples():
    assert shortcodes.get_url_for_type("spread", "wands") == "/tarot/cards/wands"
    assert shortcodes.get_url_for_type("spread", "celtic-cross") == "/reading/celtic-cross"
    assert shortcodes.get_url_for_type("spread", "unknown-slug") == "/reading"
