import logging
import re
from dataclasses import dataclass

from lxml import etree, html
from lxml.cssselect import CSSSelector

from .errors import DocumentError
from .rewriter import rewrite_element
from .selectors import STYLE_SELECTOR, URL_DESCRIPTORS
from .styles import rewrite_element_style

logger = logging.getLogger('safe_links.document')

# byte-order mark, xml declaration and comments ahead of the markup; carried
# through verbatim so libxml2 cannot reorder or rewrite them
PROLOG_RE = re.compile(r'\A\ufeff?\s*(?:<\?xml[^>]*>\s*)?(?:<!--.*?-->\s*)*', re.DOTALL)

# any of these anywhere means a whole document, not a snippet
FULL_DOCUMENT_RE = re.compile(r'<(?:!doctype|html|head|body)[\s/>]', re.IGNORECASE)

_selectors = {}


def _select(root, selector):
    compiled = _selectors.get(selector)
    if compiled is None:
        compiled = _selectors[selector] = CSSSelector(selector)
    return compiled(root)


@dataclass
class DocumentStats:
    links: int = 0
    local: int = 0
    external: int = 0
    styles: int = 0

    def add(self, other):
        self.links += other.links
        self.local += other.local
        self.external += other.external
        self.styles += other.styles


def _parser():
    return html.HTMLParser(default_doctype=False)


def split_prolog(text):
    """Return (prolog, markup) where prolog is the leading BOM/declaration/comment run."""
    prolog = PROLOG_RE.match(text).group(0)
    return prolog, text[len(prolog):]


def is_full_document(markup):
    return bool(FULL_DOCUMENT_RE.search(markup))


def parse(markup):
    """Parse ``markup`` into (root, is_full_document)."""
    full = is_full_document(markup)
    try:
        if full:
            return html.document_fromstring(markup, parser=_parser()), True
        return html.fragment_fromstring(markup, create_parent='div', parser=_parser()), False
    except (etree.ParserError, ValueError) as e:
        raise DocumentError(f'Failed to parse HTML: {e}') from e


def serialize(root, is_full_document):
    if is_full_document:
        # the tree carries its own doctype
        return html.tostring(root.getroottree(), encoding='unicode')
    # drop the <div> wrapper added by parse()
    out = html.tostring(root, encoding='unicode', with_tail=False)
    return out[len('<div>'):-len('</div>')]


def rewrite_tree(root, config, descriptors=URL_DESCRIPTORS):
    """Rewrite every URL attribute and inline style under ``root`` in place."""
    stats = DocumentStats()
    for descriptor in descriptors:
        for el in _select(root, descriptor.selector):
            if not el.get(descriptor.attr):
                continue
            stats.links += 1
            result = rewrite_element(el, descriptor.attr, descriptor.is_anchor, config)
            stats.local += result.local
            stats.external += result.external

    # styles after attributes; they never share an attribute
    for el in _select(root, STYLE_SELECTOR):
        if not el.get('style'):
            continue
        result = rewrite_element_style(el, config)
        stats.local += result.local
        stats.external += result.external
        if result.changed:
            stats.styles += 1
    return stats


def process_html(text, config, descriptors=URL_DESCRIPTORS):
    """Rewrite the links in an HTML string; returns (html, DocumentStats)."""
    if not config.enabled or not text or not text.strip():
        return text, DocumentStats()
    prolog, markup = split_prolog(text)
    if not markup.strip():
        return text, DocumentStats()
    root, is_full = parse(markup)
    stats = rewrite_tree(root, config, descriptors)
    return prolog + serialize(root, is_full), stats
