"""Batch processing over a built site: ``{path: {'contents': bytes}}`` in, same mapping out."""

import logging
import os
import re
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .document import DocumentStats, process_html
from .errors import SafeLinksError
from .selectors import URL_DESCRIPTORS

logger = logging.getLogger('safe_links.pipeline')

HTML_FILE_RE = re.compile(r'\.html?$', re.IGNORECASE)


def is_html_file(path):
    return bool(HTML_FILE_RE.search(os.path.splitext(str(path))[1]))


@dataclass
class BatchReport:
    files: Dict[str, DocumentStats] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)

    @property
    def totals(self):
        total = DocumentStats()
        for stats in self.files.values():
            total.add(stats)
        return total


def _decode(contents, encoding):
    if isinstance(contents, str):
        return contents
    if isinstance(contents, (bytes, bytearray, memoryview)):
        return bytes(contents).decode(encoding)
    return None


class SafeLinks:
    """Rewrite links across a batch of files.

    Non-HTML entries are left alone. HTML entries whose contents are missing
    or not text are skipped with a warning. Any other failure aborts the whole
    batch: it is raised as a SafeLinksError, or handed to ``done`` when one is
    given.
    """

    def __init__(self, config, descriptors=URL_DESCRIPTORS, encoding='utf-8'):
        self.config = config
        self.descriptors = tuple(descriptors)
        self.encoding = encoding
        if not config.enabled:
            logger.warning('safe-links: no hostnames configured; files will not be processed')

    def process_file(self, path, file_data):
        text = _decode(file_data.get('contents') if isinstance(file_data, dict) else None, self.encoding)
        if text is None:
            return None
        out, stats = process_html(text, self.config, self.descriptors)
        file_data['contents'] = out.encode(self.encoding)
        logger.debug('File %s: processed %d links (%d local, %d external, %d styles)',
                     path, stats.links, stats.local, stats.external, stats.styles)
        return stats

    def run(self, files):
        report = BatchReport()
        if not self.config.enabled:
            return report

        html_files = [p for p in files if is_html_file(p)]
        if not html_files:
            logger.debug('No HTML files found to process')
            return report
        logger.debug('Processing %d HTML files with %s', len(html_files), self.config)

        for path in html_files:
            try:
                stats = self.process_file(path, files[path])
            except UnicodeDecodeError as e:
                logger.warning('Skipping %s: contents are not %s text (%s)', path, self.encoding, e)
                report.skipped.append(path)
                continue
            except Exception as e:
                logger.error('Error processing %s: %s', path, e)
                raise SafeLinksError(f'{path}: {e}') from e
            if stats is None:
                logger.warning('Skipping %s: missing contents', path)
                report.skipped.append(path)
                continue
            report.files[path] = stats

        totals = report.totals
        logger.info('Processed %d HTML files: %d links (%d local, %d external)',
                    len(report.files), totals.links, totals.local, totals.external)
        return report

    def __call__(self, files, done=None):
        if done is None:
            return self.run(files)
        try:
            report = self.run(files)
        except SafeLinksError as e:
            done(e)
            return None
        done(None)
        return report


def load_directory(src):
    """Read every file under ``src`` into a ``{relative posix path: {'contents': bytes}}`` mapping."""
    src = Path(src)
    files = {}
    for p in sorted(src.rglob('*')):
        if p.is_file():
            files[p.relative_to(src).as_posix()] = {'contents': p.read_bytes()}
    return files


def write_directory(files, out_dir):
    out_dir = Path(out_dir)
    for rel, data in files.items():
        dst = out_dir / rel
        dst.parent.mkdir(parents=True, exist_ok=True)
        with open(dst, 'wb') as fh:
            fh.write(data['contents'])


def build_directory(src, out_dir, config):
    """Process a built site at ``src`` and write the result to ``out_dir``.

    ``out_dir`` may equal ``src`` to rewrite in place; otherwise it is
    cleared first.
    """
    src = Path(src)
    out_dir = Path(out_dir)
    if not src.is_dir():
        raise SafeLinksError(f'Source directory not found: {src}')

    files = load_directory(src)
    report = SafeLinks(config)(files)

    if out_dir.resolve() != src.resolve():
        if out_dir.exists():
            shutil.rmtree(out_dir)
        out_dir.mkdir(parents=True)
    write_directory(files, out_dir)
    return report
