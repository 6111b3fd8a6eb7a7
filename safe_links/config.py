import logging
import os
from dataclasses import dataclass, field
from urllib.parse import urlparse

logger = logging.getLogger('safe_links.config')

HOSTNAMES_ENV = 'SAFE_LINKS_HOSTNAMES'
BASE_PATH_ENV = 'SAFE_LINKS_BASE_PATH'


def normalize_hostname(value):
    """Reduce 'site.example', 'https://Site.example/' or 'site.example:8080' to a bare hostname."""
    if not value:
        return ''
    v = value.strip().lower()
    if not v:
        return ''
    if '//' not in v:
        v = '//' + v
    try:
        host = urlparse(v).hostname
    except ValueError:
        logger.debug('Could not parse hostname entry %r', value)
        return ''
    return host or ''


def split_hostnames(raw):
    """Accept a comma-separated string or an iterable of entries."""
    if raw is None:
        return []
    if isinstance(raw, str):
        raw = raw.split(',')
    hosts = []
    for entry in raw:
        host = normalize_hostname(entry)
        if host and host not in hosts:
            hosts.append(host)
    return hosts


@dataclass(frozen=True)
class SafeLinksConfig:
    """Immutable settings for one pipeline run."""

    hostnames: frozenset = field(default_factory=frozenset)
    base_path: str = ''

    def __post_init__(self):
        # normalize in place; frozen dataclasses need object.__setattr__
        object.__setattr__(self, 'hostnames', frozenset(split_hostnames(self.hostnames)))
        object.__setattr__(self, 'base_path', (self.base_path or '').strip().strip('/'))

    @property
    def enabled(self):
        return bool(self.hostnames)

    @property
    def prefix(self):
        return '/' + self.base_path if self.base_path else ''

    @classmethod
    def from_options(cls, hostnames=None, base_path=None):
        return cls(hostnames=hostnames or (), base_path=base_path or '')

    @classmethod
    def from_env(cls, environ=None, hostnames=None, base_path=None):
        """Build a config from explicit options, falling back to SAFE_LINKS_* environment variables."""
        env = os.environ if environ is None else environ
        if not hostnames:
            hostnames = env.get(HOSTNAMES_ENV, '')
        if base_path is None:
            base_path = env.get(BASE_PATH_ENV, '')
        return cls.from_options(hostnames, base_path)
