"""Rewrite ``url(...)`` references inside inline ``style`` attributes."""

import logging
import re
from dataclasses import dataclass

from .classifier import classify

logger = logging.getLogger('safe_links.styles')

# url(<space><quote>TOKEN<same quote><space>)
CSS_URL_RE = re.compile(r'''url\((\s*)(['"]?)([^'")]+)\2(\s*)\)''', re.IGNORECASE)

SKIP_CSS_PREFIXES = ('data:', '#')


@dataclass
class StyleRewrite:
    style: str
    local: int = 0
    external: int = 0
    changed: bool = False


def rewrite_style(style, config):
    if not style or not isinstance(style, str):
        return StyleRewrite(style)

    result = StyleRewrite(style)

    def replace(match):
        leading, quote, url, trailing = match.groups()
        if url.startswith(SKIP_CSS_PREFIXES):
            logger.debug('Skipping special CSS url: %s', url)
            return match.group(0)

        # css references are never navigable, so never anchors
        c = classify(url, False, config)
        if c.rewritten:
            logger.debug('Converting CSS url: %s to %s', url, c.value)
            result.local += 1
            result.changed = True
            return 'url(%s%s%s%s%s)' % (leading, quote, c.value, quote, trailing)
        if c.is_foreign:
            logger.debug('Found external CSS url: %s', url)
            result.external += 1
        return match.group(0)

    updated = CSS_URL_RE.sub(replace, style)
    if result.changed:
        result.style = updated
    return result


def rewrite_element_style(element, config):
    """Apply rewrite_style to an lxml element's style attribute in place."""
    result = rewrite_style(element.get('style'), config)
    if result.changed:
        element.set('style', result.style)
    return result
