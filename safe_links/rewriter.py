import logging
from dataclasses import dataclass, field
from typing import Dict

from .classifier import Kind, classify

logger = logging.getLogger('safe_links.rewriter')


@dataclass
class AttributeRewrite:
    """Attribute writes computed for one element, plus counters."""

    writes: Dict[str, str] = field(default_factory=dict)
    local: int = 0
    external: int = 0

    @property
    def changed(self):
        return bool(self.writes)


def rewrite_attribute(attr, value, is_anchor, config):
    """Compute the writes for one ``attr=value`` pair without touching any element."""
    result = AttributeRewrite()
    if not value or not isinstance(value, str):
        return result

    c = classify(value, is_anchor, config)
    if c.kind in (Kind.ROOT_RELATIVE, Kind.LOCAL_ABSOLUTE):
        logger.debug('Converting %s %s: %s to %s', c.kind.value, attr, value, c.value)
        result.local = 1
        result.writes[attr] = c.value
    elif c.kind is Kind.EXTERNAL_ABSOLUTE:
        logger.debug('Adding target and rel to external link: %s', value)
        result.external = 1
        result.writes.update(c.extra)
    return result


def apply_writes(element, writes):
    for name, value in writes.items():
        element.set(name, value)


def rewrite_element(element, attr, is_anchor, config):
    """Rewrite ``attr`` on an lxml element in place; returns the AttributeRewrite."""
    result = rewrite_attribute(attr, element.get(attr), is_anchor, config)
    apply_writes(element, result.writes)
    return result
