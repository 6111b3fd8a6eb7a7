from lxml import html

from safe_links.config import SafeLinksConfig
from safe_links.document import process_html
from safe_links.selectors import URL_DESCRIPTORS, LinkDescriptor


def cfg(base_path='', hostnames=('site.example',)):
    return SafeLinksConfig.from_options(list(hostnames), base_path)


def test_local_link_is_made_root_relative():
    out, stats = process_html('<a href="https://site.example/page/">x</a>', cfg())
    assert out == '<a href="/page/">x</a>'
    assert stats.links == 1
    assert stats.local == 1


def test_local_link_with_base_path():
    out, _ = process_html('<a href="https://site.example/page/">x</a>', cfg('app'))
    assert out == '<a href="/app/page/">x</a>'


def test_external_anchor_gets_target_and_rel():
    out, stats = process_html('<a href="https://other.example/p">y</a>', cfg())
    assert out == '<a href="https://other.example/p" target="_blank" rel="noopener noreferrer">y</a>'
    assert stats.external == 1


def test_existing_target_and_rel_are_overwritten():
    out, _ = process_html('<a href="https://other.example/p" target="_self" rel="nofollow">y</a>', cfg())
    a = html.fragment_fromstring(out)
    assert a.get('href') == 'https://other.example/p'
    assert a.get('target') == '_blank'
    assert a.get('rel') == 'noopener noreferrer'


def test_style_attribute_scenario():
    src = '<div style="background:url(\'https://site.example/bg.png\')"></div>'
    out, stats = process_html(src, cfg('app'))
    assert out == '<div style="background:url(\'/app/bg.png\')"></div>'
    assert stats.styles == 1
    assert stats.local == 1


def test_external_non_anchor_is_untouched():
    src = '<img src="https://cdn.other.example/x.png">'
    out, stats = process_html(src, cfg('app'))
    assert out == src
    assert stats.links == 1
    assert stats.local == 0 and stats.external == 0


def test_special_anchors_are_untouched():
    src = ('<p><a href="#anchor">Anchor link</a> <a href="mailto:test@site.example">Email link</a> '
           '<a href="tel:+1234567890">Phone link</a></p>')
    out, stats = process_html(src, cfg('app'))
    assert out == src
    assert stats.links == 3
    assert stats.local == 0 and stats.external == 0


def test_missing_and_empty_href():
    out, stats = process_html('<p><a>No href attribute</a><a href="">Empty href</a></p>', cfg('app'))
    assert '<a>No href attribute</a>' in out
    anchors = html.fragment_fromstring(out).findall('a')
    assert anchors[1].get('href') == ''
    assert stats.links == 0


def test_relative_urls_untouched():
    src = ('<div><a href="/relative-link">r</a><img src="./local-image.jpg">'
           '<link href="../styles.css" rel="stylesheet"><script src="js/script.js"></script></div>')
    out, _ = process_html(src, cfg(''))
    assert 'href="/relative-link"' in out
    assert 'src="./local-image.jpg"' in out
    assert 'href="../styles.css"' in out
    assert 'src="js/script.js"' in out


FULL_PAGE = """<!DOCTYPE html>
<html>
<head>
<meta charset="utf-8">
<meta property="og:image" content="https://site.example/og.png">
<meta name="viewport" content="width=device-width">
<link rel="stylesheet" href="https://site.example/styles.css">
<script src="https://site.example/script.js"></script>
</head>
<body>
<a href="https://site.example/page/">Local</a>
<a href="https://external.example/page/">External</a>
<img src="https://site.example/image.jpg">
<img src="https://external.example/external.jpg">
<iframe src="https://site.example/iframe.html"></iframe>
<form action="https://site.example/submit"></form>
<video poster="https://site.example/poster.jpg">
<source src="https://site.example/video.mp4">
<track src="https://site.example/captions.vtt">
</video>
<object data="https://site.example/object.pdf"></object>
<embed src="https://site.example/embed.swf">
<map name="m"><area href="https://site.example/area/"></map>
<div style="background-image: url(https://site.example/bg.png)">styled</div>
</body>
</html>
"""


def test_every_supported_element_is_processed():
    out, stats = process_html(FULL_PAGE, cfg('app'))
    assert out.startswith('<!DOCTYPE html>')
    for fragment in (
        'href="/app/styles.css"',
        'src="/app/script.js"',
        'href="/app/page/"',
        'src="/app/image.jpg"',
        'src="/app/iframe.html"',
        'action="/app/submit"',
        'poster="/app/poster.jpg"',
        'src="/app/video.mp4"',
        'src="/app/captions.vtt"',
        'data="/app/object.pdf"',
        'src="/app/embed.swf"',
        'href="/app/area/"',
        'content="/app/og.png"',
        'content="width=device-width"',
        'url(/app/bg.png)',
        'href="https://external.example/page/" target="_blank" rel="noopener noreferrer"',
        'src="https://external.example/external.jpg"',
    ):
        assert fragment in out, fragment
    assert 'external.jpg" target=' not in out
    assert stats.external == 1
    assert stats.styles == 1


def test_second_run_is_a_no_op():
    once, _ = process_html(FULL_PAGE, cfg('app'))
    twice, stats = process_html(once, cfg('app'))
    assert twice == once
    assert stats.local == 0


def test_second_run_without_base_path_is_a_no_op():
    src = '<p><a href="https://site.example/a?b=1#c">a</a><a href="https://other.example/">o</a></p>'
    once, _ = process_html(src, cfg())
    twice, _ = process_html(once, cfg())
    assert twice == once
    assert 'href="/a?b=1#c"' in once


def test_disabled_config_is_identity():
    src = '<a href="https://site.example/page/">x</a>'
    out, stats = process_html(src, cfg(hostnames=()))
    assert out is src
    assert stats.links == 0


def test_blank_input():
    out, stats = process_html('   ', cfg())
    assert out == '   '
    assert stats.links == 0


def test_fragment_text_is_kept():
    src = 'Intro &amp; text <a href="https://site.example/x">x</a> tail'
    out, _ = process_html(src, cfg())
    assert out == 'Intro &amp; text <a href="/x">x</a> tail'


def test_custom_descriptor_table():
    descriptors = URL_DESCRIPTORS + (LinkDescriptor('div[data-src]', 'data-src', False),)
    out, stats = process_html('<div data-src="https://site.example/lazy.png"></div>', cfg(), descriptors)
    assert out == '<div data-src="/lazy.png"></div>'
    assert stats.local == 1


def test_descriptor_table_shape():
    assert len(URL_DESCRIPTORS) == 13
    assert [d for d in URL_DESCRIPTORS if d.is_anchor] == [LinkDescriptor('a[href]', 'href', True)]


PAGE = ('<!DOCTYPE html>\n<html><head><title>T</title></head>'
        '<body><a href="https://site.example/p">x</a></body></html>')


def _assert_document_kept(out):
    assert '<!DOCTYPE html>' in out
    assert '<head>' in out and '<body>' in out
    assert 'href="/app/p"' in out


def test_page_with_byte_order_mark_stays_a_document():
    out, stats = process_html('\ufeff' + PAGE, cfg('app'))
    assert out.startswith('\ufeff<!DOCTYPE html>')
    _assert_document_kept(out)
    assert stats.local == 1


def test_page_with_leading_comment_stays_a_document():
    out, _ = process_html('<!-- built -->\n' + PAGE, cfg('app'))
    assert out.startswith('<!-- built -->\n<!DOCTYPE html>')
    _assert_document_kept(out)


def test_page_with_xml_declaration_stays_a_document():
    decl = '<?xml version="1.0" encoding="utf-8"?>\n'
    out, _ = process_html(decl + PAGE, cfg('app'))
    assert out.startswith(decl + '<!DOCTYPE html>')
    _assert_document_kept(out)


def test_page_without_doctype_keeps_structure():
    out, _ = process_html('<!-- x --><html><body><a href="https://site.example/p">x</a></body></html>', cfg('app'))
    assert out.startswith('<!-- x --><html>')
    assert '<body>' in out and 'href="/app/p"' in out
    assert '<!DOCTYPE' not in out


def test_prefixed_page_second_run_is_a_no_op():
    once, _ = process_html('\ufeff<!-- built -->\n' + PAGE, cfg('app'))
    twice, _ = process_html(once, cfg('app'))
    assert twice == once


def test_comment_only_input_is_returned_as_is():
    out, stats = process_html('<!-- nothing here -->', cfg())
    assert out == '<!-- nothing here -->'
    assert stats.links == 0
