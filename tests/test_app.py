import pytest

from safe_links.app import create_app


@pytest.fixture
def site(tmp_path):
    (tmp_path / 'index.html').write_text('<h1>Home</h1>')
    (tmp_path / 'docs').mkdir()
    (tmp_path / 'docs' / 'index.html').write_text('<h1>Docs</h1>')
    (tmp_path / 'docs' / 'page.html').write_text('<h1>Page</h1>')
    return tmp_path


def test_serves_under_base_path(site):
    client = create_app(str(site), '/app/').test_client()
    r = client.get('/app/')
    assert r.status_code == 200
    assert b'Home' in r.data
    r2 = client.get('/app/docs/page.html')
    assert r2.status_code == 200
    assert b'Page' in r2.data
    r3 = client.get('/app/docs/')
    assert b'Docs' in r3.data


def test_root_redirects_to_base_path(site):
    client = create_app(str(site), 'app').test_client()
    r = client.get('/')
    assert r.status_code in (301, 302)
    assert r.headers['Location'].endswith('/app/')


def test_paths_outside_base_path_404(site):
    client = create_app(str(site), 'app').test_client()
    assert client.get('/docs/page.html').status_code == 404
    assert client.get('/app/missing.html').status_code == 404


def test_without_base_path(site):
    client = create_app(str(site)).test_client()
    assert b'Home' in client.get('/').data
    assert client.get('/docs/page.html').status_code == 200


def test_missing_site_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        create_app(str(tmp_path / 'missing'))
