"""Element/attribute pairs that carry URL references."""

from collections import namedtuple

LinkDescriptor = namedtuple('LinkDescriptor', ['selector', 'attr', 'is_anchor'])

URL_DESCRIPTORS = (
    LinkDescriptor('a[href]', 'href', True),
    LinkDescriptor('link[href]', 'href', False),
    LinkDescriptor('area[href]', 'href', False),
    LinkDescriptor('script[src]', 'src', False),
    LinkDescriptor('img[src]', 'src', False),
    LinkDescriptor('iframe[src]', 'src', False),
    LinkDescriptor('source[src]', 'src', False),
    LinkDescriptor('embed[src]', 'src', False),
    LinkDescriptor('track[src]', 'src', False),
    LinkDescriptor('form[action]', 'action', False),
    LinkDescriptor('object[data]', 'data', False),
    LinkDescriptor('video[poster]', 'poster', False),
    LinkDescriptor('meta[content]', 'content', False),
)

STYLE_SELECTOR = '[style]'
