"""Rewrite site-local URLs and mark external anchors in static HTML."""

from .classifier import Classification, Kind, classify
from .config import SafeLinksConfig
from .document import DocumentStats, process_html
from .errors import DocumentError, SafeLinksError
from .pipeline import BatchReport, SafeLinks, build_directory, is_html_file
from .rewriter import AttributeRewrite, rewrite_attribute
from .selectors import URL_DESCRIPTORS, LinkDescriptor
from .styles import StyleRewrite, rewrite_style

__version__ = '0.1.0'

__all__ = [
    'AttributeRewrite',
    'BatchReport',
    'Classification',
    'DocumentError',
    'DocumentStats',
    'Kind',
    'LinkDescriptor',
    'SafeLinks',
    'SafeLinksConfig',
    'SafeLinksError',
    'StyleRewrite',
    'URL_DESCRIPTORS',
    'build_directory',
    'classify',
    'is_html_file',
    'process_html',
    'rewrite_attribute',
    'rewrite_style',
]
