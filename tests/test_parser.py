"""Tests for the HTML signal extractor."""

import pytest

from seotoolkit.parser import (
    extract,
    get_canonical,
    get_headings,
    get_images,
    get_links,
    get_meta_content,
    get_schema_markup,
    get_text_content,
    get_title,
)


FULL_PAGE = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>  Coffee Brewing Guide  </title>
    <meta name="description" content="Learn how to brew great coffee at home.">
    <meta content="noindex, follow" name="robots">
    <meta property="og:title" content="Brew Better Coffee">
    <meta property="og:description" content="A practical brewing guide">
    <meta property="og:image" content="https://example.com/og.png">
    <meta name="twitter:card" content="summary_large_image">
    <link rel="canonical" href="https://example.com/coffee">
    <script type="application/ld+json">{"@context": "https://schema.org", "@type": "Article"}</script>
    <script>var hidden = "script text";</script>
    <style>.x { color: red; }</style>
</head>
<body>
    <h1>Coffee <b>Brewing</b></h1>
    <h2>Grind</h2>
    <h2>Water</h2>
    <p>Fresh beans &amp; clean water make great coffee.</p>
    <a href="/about">About us</a>
    <a href="https://example.com/shop" rel="nofollow sponsored">Shop</a>
    <a href="https://other.com/">Other</a>
    <a href="#top">Top</a>
    <a href="mailto:hi@example.com">Mail</a>
    <img src="/a.png" alt="A cup">
    <img src="/b.png">
    <img data-src="/lazy.png" alt="lazy">
</body>
</html>
"""


class TestMetaExtraction:
    """Test cases for title and meta tag extraction."""

    def test_missing_title_is_empty(self):
        """Test a page without a title tag yields an empty title."""
        assert extract("<html><body><p>No title</p></body></html>", "https://example.com").title == ""

    def test_title_is_trimmed(self):
        """Test the title text is stripped of surrounding whitespace."""
        assert get_title(FULL_PAGE) == "Coffee Brewing Guide"

    def test_meta_name_before_content(self):
        """Test name/content attribute order."""
        assert get_meta_content(FULL_PAGE, "description") == "Learn how to brew great coffee at home."

    def test_meta_content_before_name(self):
        """Test content/name attribute order."""
        assert get_meta_content(FULL_PAGE, "robots") == "noindex, follow"

    def test_meta_property(self):
        """Test Open Graph tags declared with property."""
        assert get_meta_content(FULL_PAGE, "og:title") == "Brew Better Coffee"

    def test_meta_single_quotes(self):
        """Test single-quoted attribute values."""
        html = "<meta name='description' content='Single quoted'>"
        assert get_meta_content(html, "description") == "Single quoted"

    def test_missing_meta_is_empty(self):
        """Test absent meta tags yield empty strings."""
        assert get_meta_content(FULL_PAGE, "keywords") == ""

    def test_canonical_either_order(self):
        """Test canonical link with href before rel."""
        assert get_canonical(FULL_PAGE) == "https://example.com/coffee"
        assert get_canonical('<link href="/c" rel="canonical">') == "/c"


class TestHeadings:
    """Test cases for heading extraction."""

    def test_nested_tags_stripped(self):
        """Test nested markup is removed from heading text."""
        assert get_headings("<h1>A <b>B</b></h1>", 1) == ["A B"]

    def test_document_order_preserved(self):
        """Test headings are returned in document order."""
        html = "<h2>First</h2><p>x</p><h2>Second</h2><h2>Third</h2>"
        assert get_headings(html, 2) == ["First", "Second", "Third"]

    def test_empty_headings_skipped(self):
        """Test headings with no text are dropped."""
        assert get_headings("<h3> </h3><h3><img src='x'></h3><h3>Kept</h3>", 3) == ["Kept"]

    def test_case_insensitive_tags(self):
        """Test upper-case heading tags are matched."""
        assert get_headings('<H1 class="t">Upper</H1>', 1) == ["Upper"]


class TestLinks:
    """Test cases for link classification."""

    def test_internal_external_classification(self):
        """Test same-host links are internal and others external."""
        html = (
            '<a href="https://example.com/page">In</a>'
            '<a href="https://other.com">Out</a>'
            '<a href="#section">Anchor</a>'
        )
        internal, external = get_links(html, "https://example.com")

        assert [link.href for link in internal] == ["https://example.com/page"]
        assert [link.href for link in external] == ["https://other.com"]

    def test_skipped_schemes(self):
        """Test fragment, javascript, mailto and tel links are ignored."""
        html = (
            '<a href="#x">a</a><a href="javascript:void(0)">b</a>'
            '<a href="MAILTO:me@example.com">c</a><a href="tel:123">d</a>'
        )
        assert get_links(html, "https://example.com") == ([], [])

    def test_relative_links_are_internal(self):
        """Test relative hrefs resolve against the base URL."""
        internal, external = get_links('<a href="/about">About</a>', "https://example.com/blog/")
        assert len(internal) == 1
        assert external == []

    def test_nofollow_and_text(self):
        """Test rel and anchor text are captured."""
        internal, _ = get_links(FULL_PAGE, "https://example.com")
        shop = [link for link in internal if link.href.endswith("/shop")][0]

        assert shop.text == "Shop"
        assert shop.rel == "nofollow sponsored"
        assert shop.is_nofollow is True

    def test_unparseable_href_is_internal(self):
        """Test hrefs that cannot be resolved count as internal."""
        internal, external = get_links('<a href="http://[::1">Broken</a>', "https://example.com")
        assert len(internal) == 1
        assert external == []


class TestImages:
    """Test cases for image extraction."""

    def test_images_and_missing_alt(self):
        """Test images are collected and those without alt flagged."""
        images, without_alt = get_images(FULL_PAGE)

        assert [image.src for image in images] == ["/a.png", "/b.png"]
        assert [image.src for image in without_alt] == ["/b.png"]
        assert images[0].alt == "A cup"

    def test_optional_attributes(self):
        """Test width, height and loading are captured when present."""
        images, _ = get_images('<img src="x.png" alt="x" width="10" height="20" loading="lazy">')

        assert images[0].width == "10"
        assert images[0].height == "20"
        assert images[0].loading == "lazy"

    def test_data_src_is_not_src(self):
        """Test lazy-loading data-src attributes are not mistaken for src."""
        images, _ = get_images('<img data-src="/lazy.png" alt="lazy">')
        assert images == []


class TestTextContent:
    """Test cases for visible text extraction."""

    def test_scripts_and_styles_removed(self):
        """Test script, style and noscript bodies are not counted."""
        text, _ = get_text_content(FULL_PAGE)

        assert "hidden" not in text
        assert "color" not in text

    def test_entities_decoded(self):
        """Test common entities are decoded."""
        text, _ = get_text_content("<p>Fish &amp; chips&nbsp;&lt;3 &quot;yum&quot;</p>")
        assert text == 'Fish & chips <3 "yum"'

    def test_ampersand_decoded_before_other_entities(self):
        """Test an encoded ampersand feeds the entities decoded after it."""
        assert get_text_content("<p>a &amp;lt; b</p>")[0] == "a < b"
        assert get_text_content("<p>&amp;lt;tag&amp;gt;</p>")[0] == "<tag>"
        assert get_text_content("<p>c &amp;#169; d</p>")[0] == "c d"

    def test_numeric_entities_dropped(self):
        """Test numeric character references are removed."""
        text, _ = get_text_content("<p>caf&#233; &#x2014; bar</p>")
        assert text == "caf bar"

    def test_word_count(self):
        """Test words are counted after whitespace collapse."""
        text, count = get_text_content("<p>one   two</p>\n<div>three</div>")

        assert text == "one two three"
        assert count == 3

    def test_empty_html(self):
        """Test empty input yields no text."""
        assert get_text_content("") == ("", 0)


class TestSchemaMarkup:
    """Test cases for JSON-LD extraction."""

    def test_valid_blocks_parsed(self):
        """Test JSON-LD blocks are parsed into objects."""
        assert get_schema_markup(FULL_PAGE) == [
            {"@context": "https://schema.org", "@type": "Article"}
        ]

    def test_invalid_block_skipped(self):
        """Test malformed JSON-LD is skipped without raising."""
        html = (
            '<script type="application/ld+json">{not json</script>'
            '<script type="application/ld+json">{"@type": "Person"}</script>'
        )
        assert get_schema_markup(html) == [{"@type": "Person"}]


class TestExtract:
    """Test cases for full signal extraction."""

    def test_full_page(self):
        """Test every signal on a realistic page."""
        signals = extract(FULL_PAGE, "https://example.com/coffee")

        assert signals.title == "Coffee Brewing Guide"
        assert signals.robots == "noindex, follow"
        assert signals.og_image == "https://example.com/og.png"
        assert signals.twitter_card == "summary_large_image"
        assert signals.canonical_url == "https://example.com/coffee"
        assert signals.h1 == ("Coffee Brewing",)
        assert signals.h2 == ("Grind", "Water")
        assert len(signals.internal_links) == 2
        assert len(signals.external_links) == 1
        assert len(signals.nofollow_links) == 1
        assert signals.has_viewport is True
        assert signals.has_charset is True
        assert signals.language == "en"
        assert signals.schema_types == ["Article"]
        assert signals.heading_structure == {"h1": 1, "h2": 2, "h3": 0, "h4": 0, "h5": 0, "h6": 0}
        assert "Fresh beans & clean water" in signals.text_content

    def test_empty_document(self):
        """Test an empty document yields empty signals."""
        signals = extract("", "")

        assert signals.title == ""
        assert signals.h1 == ()
        assert signals.internal_links == ()
        assert signals.word_count == 0
        assert signals.has_viewport is False
        assert signals.language == ""

    def test_malformed_markup_does_not_raise(self):
        """Test broken markup degrades instead of failing."""
        signals = extract("<html><head><title>Open<h1>Unclosed <a href='", "https://example.com")
        assert signals.h1 == ()

    def test_headings_level_guard(self):
        """Test heading levels outside 1-6 are rejected."""
        signals = extract("<h1>x</h1>", "https://example.com")
        with pytest.raises(ValueError):
            signals.headings(7)
