"""HTML signal extractor - pulls SEO-relevant signals out of raw markup.

Extraction is pattern based and tolerant: the markup is treated as flat
text, so malformed documents degrade to empty values instead of errors.
Nothing here executes scripts or builds a DOM.
"""

import json
import logging
import re
from typing import Optional
from urllib.parse import urljoin, urlparse

from seotoolkit.models import ImageRecord, LinkRecord, PageSignals

logger = logging.getLogger(__name__)

# Attribute names must not be the tail of a longer name (data-src, og-name)
_ATTR_START = r'(?<![\w:-])'

# A quoted attribute value in either quote style
_QUOTED = r'''(?:"(?P<dq>[^"]*)"|'(?P<sq>[^']*)')'''

_TAG_RE = re.compile(r'<[^>]+>')
_WHITESPACE_RE = re.compile(r'\s+')

_TITLE_RE = re.compile(r'<title\b[^>]*>([^<]*)</title>', re.IGNORECASE)

_CANONICAL_RES = [
    re.compile(
        rf'<link\b[^>]*{_ATTR_START}rel=["\']canonical["\'][^>]*{_ATTR_START}href={_QUOTED}',
        re.IGNORECASE,
    ),
    re.compile(
        rf'<link\b[^>]*{_ATTR_START}href={_QUOTED}[^>]*{_ATTR_START}rel=["\']canonical["\']',
        re.IGNORECASE,
    ),
]

_HEADING_RES = {
    level: re.compile(rf'<h{level}\b[^>]*>(.*?)</h{level}\s*>', re.IGNORECASE | re.DOTALL)
    for level in range(1, 7)
}

_LINK_RE = re.compile(
    rf'<a\b[^>]*{_ATTR_START}href={_QUOTED}[^>]*>(?P<body>.*?)</a\s*>',
    re.IGNORECASE | re.DOTALL,
)

_IMG_RE = re.compile(r'<img\b[^>]*>', re.IGNORECASE)

_BLOCK_RES = [
    re.compile(rf'<{tag}\b[^>]*>.*?</{tag}\s*>', re.IGNORECASE | re.DOTALL)
    for tag in ('script', 'style', 'noscript')
]

_NUMERIC_ENTITY_RE = re.compile(r'&#(?:\d+|[xX][0-9a-fA-F]+);')

# Decoded in this order, then numeric references are dropped
_ENTITIES = [
    ('&nbsp;', ' '),
    ('&amp;', '&'),
    ('&lt;', '<'),
    ('&gt;', '>'),
    ('&quot;', '"'),
]

_JSON_LD_RE = re.compile(
    r'<script\b[^>]*type=["\']application/ld\+json["\'][^>]*>(.*?)</script\s*>',
    re.IGNORECASE | re.DOTALL,
)

_VIEWPORT_RE = re.compile(rf'<meta\b[^>]*{_ATTR_START}name=["\']viewport["\']', re.IGNORECASE)
_CHARSET_RES = [
    re.compile(rf'<meta\b[^>]*{_ATTR_START}charset=', re.IGNORECASE),
    re.compile(rf'<meta\b[^>]*{_ATTR_START}http-equiv=["\']Content-Type["\']', re.IGNORECASE),
]
_LANG_RE = re.compile(rf'<html\b[^>]*{_ATTR_START}lang={_QUOTED}', re.IGNORECASE)

_SKIPPED_HREF_PREFIXES = ('#', 'javascript:', 'mailto:', 'tel:')


def _quoted_value(match: Optional[re.Match]) -> str:
    """Return the quoted attribute value captured by ``_QUOTED``."""
    if match is None:
        return ''
    value = match.group('dq')
    if value is None:
        value = match.group('sq')
    return value or ''


def _attribute(tag: str, name: str) -> Optional[str]:
    """Read a single attribute from a tag, None when it is absent."""
    match = re.search(rf'{_ATTR_START}{re.escape(name)}={_QUOTED}', tag, re.IGNORECASE)
    if match is None:
        return None
    return _quoted_value(match)


def _strip_tags(markup: str) -> str:
    return _TAG_RE.sub('', markup).strip()


def _meta_patterns(name: str) -> list[re.Pattern]:
    key = re.escape(name)
    patterns = []
    for attr in ('name', 'property'):
        patterns.append(re.compile(
            rf'<meta\b[^>]*{_ATTR_START}{attr}=["\']{key}["\'][^>]*{_ATTR_START}content={_QUOTED}',
            re.IGNORECASE,
        ))
        patterns.append(re.compile(
            rf'<meta\b[^>]*{_ATTR_START}content={_QUOTED}[^>]*{_ATTR_START}{attr}=["\']{key}["\']',
            re.IGNORECASE,
        ))
    return patterns


_META_FIELDS = {
    'meta_description': 'description',
    'meta_keywords': 'keywords',
    'robots': 'robots',
    'og_title': 'og:title',
    'og_description': 'og:description',
    'og_image': 'og:image',
    'og_type': 'og:type',
    'og_url': 'og:url',
    'twitter_card': 'twitter:card',
    'twitter_title': 'twitter:title',
    'twitter_description': 'twitter:description',
    'twitter_image': 'twitter:image',
}

_META_RES = {meta_name: _meta_patterns(meta_name) for meta_name in _META_FIELDS.values()}


def get_meta_content(html: str, name: str) -> str:
    """Get the content of a meta tag by ``name`` or ``property``.

    Tries name/content, content/name, property/content and
    content/property in that order; the first hit wins.
    """
    patterns = _META_RES.get(name) or _meta_patterns(name)
    for pattern in patterns:
        match = pattern.search(html)
        if match:
            return _quoted_value(match)
    return ''


def get_title(html: str) -> str:
    match = _TITLE_RE.search(html)
    return match.group(1).strip() if match else ''


def get_canonical(html: str) -> str:
    for pattern in _CANONICAL_RES:
        match = pattern.search(html)
        if match:
            return _quoted_value(match)
    return ''


def get_headings(html: str, level: int) -> list[str]:
    """Text of every heading of ``level`` with nested markup removed."""
    headings = []
    for match in _HEADING_RES[level].finditer(html):
        text = _strip_tags(match.group(1))
        if text:
            headings.append(text)
    return headings


def _hostname(url: str) -> Optional[str]:
    try:
        return urlparse(url).hostname
    except ValueError:
        return None


def get_links(html: str, base_url: str) -> tuple[list[LinkRecord], list[LinkRecord]]:
    """Split the page's anchors into internal and external links.

    A link is internal when its resolved hostname equals the page's
    hostname. Hrefs that cannot be resolved are treated as internal.
    """
    internal: list[LinkRecord] = []
    external: list[LinkRecord] = []
    base_host = _hostname(base_url)

    for match in _LINK_RE.finditer(html):
        href = _quoted_value(match)
        if not href or href.lower().startswith(_SKIPPED_HREF_PREFIXES):
            continue

        rel = _attribute(match.group(0)[:match.start('body') - match.start()], 'rel') or ''
        link = LinkRecord(
            href=href,
            text=_strip_tags(match.group('body')),
            rel=rel,
            is_nofollow='nofollow' in rel.lower(),
        )

        try:
            link_host = urlparse(urljoin(base_url, href)).hostname
        except ValueError:
            internal.append(link)
            continue

        if link_host == base_host:
            internal.append(link)
        else:
            external.append(link)

    return internal, external


def get_images(html: str) -> tuple[list[ImageRecord], list[ImageRecord]]:
    """Every image with a src, and the subset lacking alt text."""
    images: list[ImageRecord] = []
    without_alt: list[ImageRecord] = []

    for match in _IMG_RE.finditer(html):
        tag = match.group(0)
        src = _attribute(tag, 'src')
        if not src:
            continue

        image = ImageRecord(
            src=src,
            alt=_attribute(tag, 'alt') or '',
            width=_attribute(tag, 'width'),
            height=_attribute(tag, 'height'),
            loading=_attribute(tag, 'loading'),
        )
        images.append(image)
        if not image.alt:
            without_alt.append(image)

    return images, without_alt


def get_text_content(html: str) -> tuple[str, int]:
    """Visible text of the page and its word count."""
    text = html
    for pattern in _BLOCK_RES:
        text = pattern.sub('', text)

    text = _TAG_RE.sub(' ', text)

    for entity, replacement in _ENTITIES:
        text = text.replace(entity, replacement)
    text = _NUMERIC_ENTITY_RE.sub('', text)

    text = _WHITESPACE_RE.sub(' ', text).strip()
    return text, len(text.split())


def get_schema_markup(html: str) -> list:
    """Parsed JSON-LD blocks; invalid blocks are skipped."""
    schemas = []
    for match in _JSON_LD_RE.finditer(html):
        try:
            schemas.append(json.loads(match.group(1)))
        except (ValueError, RecursionError) as e:
            logger.debug(f"Skipping invalid JSON-LD block: {e}")
    return schemas


def has_viewport(html: str) -> bool:
    return bool(_VIEWPORT_RE.search(html))


def has_charset(html: str) -> bool:
    return any(pattern.search(html) for pattern in _CHARSET_RES)


def get_language(html: str) -> str:
    return _quoted_value(_LANG_RE.search(html))


def extract(html: str, base_url: str) -> PageSignals:
    """Extract all SEO signals from raw HTML.

    Args:
        html: Raw markup as delivered by the server
        base_url: URL the markup was fetched from (used to classify links)

    Returns:
        PageSignals; absent tags yield empty strings, empty tuples or False
    """
    html = html or ''
    base_url = base_url or ''

    internal_links, external_links = get_links(html, base_url)
    images, images_without_alt = get_images(html)
    text, word_count = get_text_content(html)

    meta = {field_name: get_meta_content(html, meta_name)
            for field_name, meta_name in _META_FIELDS.items()}

    return PageSignals(
        title=get_title(html),
        canonical_url=get_canonical(html),
        **meta,
        h1=tuple(get_headings(html, 1)),
        h2=tuple(get_headings(html, 2)),
        h3=tuple(get_headings(html, 3)),
        h4=tuple(get_headings(html, 4)),
        h5=tuple(get_headings(html, 5)),
        h6=tuple(get_headings(html, 6)),
        internal_links=tuple(internal_links),
        external_links=tuple(external_links),
        images=tuple(images),
        images_without_alt=tuple(images_without_alt),
        text_content=text,
        word_count=word_count,
        has_viewport=has_viewport(html),
        has_charset=has_charset(html),
        language=get_language(html),
        schema_markup=tuple(get_schema_markup(html)),
    )
