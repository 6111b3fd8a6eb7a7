"""Decide what a single URL reference is and what it should become.

The checks run in a fixed order and the first match wins:

1. anchors pointing at ``#``, ``mailto:`` or ``tel:`` are skipped
2. root-relative paths (``/x`` but not ``//x``) get the base path prepended,
   unless they already carry it
3. absolute URLs on a local hostname lose their scheme and host
4. absolute URLs on any other host mark anchors as safe to open in a new tab

Anything else is unrecognized and left alone.
"""

import enum
import logging
from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import urlsplit

logger = logging.getLogger('safe_links.classifier')

SKIP_ANCHOR_PREFIXES = ('#', 'mailto:', 'tel:')
SAFE_OPEN_ATTRIBUTES = (('target', '_blank'), ('rel', 'noopener noreferrer'))


class Kind(enum.Enum):
    SKIP = 'skip'
    ROOT_RELATIVE = 'root-relative'
    LOCAL_ABSOLUTE = 'local-absolute'
    EXTERNAL_ABSOLUTE = 'external-absolute'
    UNRECOGNIZED = 'unrecognized'


@dataclass(frozen=True)
class Classification:
    kind: Kind
    value: Optional[str] = None
    extra: Optional[Dict[str, str]] = None
    # parsed host of an absolute URL, kept for diagnostics
    hostname: Optional[str] = None

    @property
    def rewritten(self):
        return self.value is not None

    @property
    def is_foreign(self):
        """True for an absolute URL on a non-local host, anchor or not."""
        return self.kind is Kind.EXTERNAL_ABSOLUTE or (
            self.kind is Kind.UNRECOGNIZED and self.hostname is not None)


def parse_absolute(url):
    """Split ``url`` if it has both a scheme and a hostname, else return None."""
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError as e:
        logger.debug('Error parsing URL %s: %s', url, e)
        return None
    if not parts.scheme or not hostname:
        return None
    return parts


def strip_origin(url, parts):
    """Return everything after the host of ``url`` exactly as written, rooted at ``/``."""
    start = url.find(parts.netloc, url.find('//') + 2)
    if start == -1:
        # urlsplit dropped characters; rebuild from the components
        rest = parts.path
        if parts.query:
            rest += '?' + parts.query
        if parts.fragment:
            rest += '#' + parts.fragment
    else:
        rest = url[start + len(parts.netloc):]
    if not rest.startswith('/'):
        rest = '/' + rest
    return rest


def has_base_path(url, base_path):
    """True when a root-relative ``url`` already lives under ``/base_path``."""
    if not base_path:
        return False
    prefix = '/' + base_path
    if not url.startswith(prefix):
        return False
    rest = url[len(prefix):]
    return rest == '' or rest[0] in '/?#'


def is_root_relative(url):
    return url.startswith('/') and not url.startswith('//')


def classify(url, is_anchor, config):
    if is_anchor and url.startswith(SKIP_ANCHOR_PREFIXES):
        logger.debug('Skipping special link: %s', url)
        return Classification(Kind.SKIP)

    if is_root_relative(url) and config.base_path:
        if has_base_path(url, config.base_path):
            logger.debug('Already under base path, leaving: %s', url)
            return Classification(Kind.SKIP)
        return Classification(Kind.ROOT_RELATIVE, value=config.prefix + url)

    parts = parse_absolute(url)
    if parts is None:
        return Classification(Kind.UNRECOGNIZED)

    hostname = parts.hostname
    if hostname in config.hostnames:
        return Classification(Kind.LOCAL_ABSOLUTE,
                              value=config.prefix + strip_origin(url, parts),
                              hostname=hostname)
    if is_anchor:
        return Classification(Kind.EXTERNAL_ABSOLUTE, extra=dict(SAFE_OPEN_ATTRIBUTES), hostname=hostname)
    return Classification(Kind.UNRECOGNIZED, hostname=hostname)
