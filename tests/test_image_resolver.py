"""
Tests for image reference resolution
"""
import requests

from motoshop.services.invoice_pdf.image_resolver import ImageResolver, split_refs


class FakeResponse:
    def __init__(self, content=b'', status_code=200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")


class FakeSession:
    """Maps URL -> FakeResponse or an exception to raise."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))
        result = self.routes.get(url)
        if isinstance(result, Exception):
            raise result
        if result is None:
            return FakeResponse(status_code=404)
        return result


def test_split_refs():
    assert split_refs('a.jpg, ,b.jpg,') == ['a.jpg', 'b.jpg']
    assert split_refs(' /uploads/x.png ') == ['/uploads/x.png']
    assert split_refs(None) == []
    assert split_refs('') == []
    assert split_refs(['a', ' ', 'b ']) == ['a', 'b']


class TestLocalImages:

    def test_site_relative_path(self, tmp_path):
        image = tmp_path / 'assets' / 'a.png'
        image.parent.mkdir()
        image.write_bytes(b'png-bytes')
        resolver = ImageResolver(tmp_path)
        assert resolver.resolve('/assets/a.png') == b'png-bytes'
        assert resolver.resolve('assets/a.png') == b'png-bytes'

    def test_uploads_resolve_against_uploads_dir(self, tmp_path):
        uploads = tmp_path / 'elsewhere'
        (uploads / 'services').mkdir(parents=True)
        (uploads / 'services' / 'b.jpg').write_bytes(b'jpg-bytes')
        resolver = ImageResolver(tmp_path / 'site', uploads_dir=uploads)
        assert resolver.resolve('/uploads/services/b.jpg') == b'jpg-bytes'

    def test_missing_file(self, tmp_path):
        assert ImageResolver(tmp_path).resolve('/uploads/services/nope.png') is None

    def test_path_traversal_rejected(self, tmp_path):
        site = tmp_path / 'site'
        site.mkdir()
        (tmp_path / 'secret.png').write_bytes(b'secret')
        assert ImageResolver(site).resolve('/../secret.png') is None

    def test_non_string_refs(self, tmp_path):
        resolver = ImageResolver(tmp_path)
        assert resolver.resolve(None) is None
        assert resolver.resolve('   ') is None
        assert resolver.resolve(42) is None


class TestRemoteImages:

    def test_fetch_success_uses_timeout(self, tmp_path):
        session = FakeSession({'https://cdn.example.com/a.png': FakeResponse(b'remote')})
        resolver = ImageResolver(tmp_path, timeout=3, session=session)
        assert resolver.resolve('https://cdn.example.com/a.png') == b'remote'
        assert session.calls == [('https://cdn.example.com/a.png', 3)]

    def test_http_error_is_no_image(self, tmp_path):
        session = FakeSession({'http://cdn.example.com/gone.png': FakeResponse(status_code=500)})
        assert ImageResolver(tmp_path, session=session).resolve('http://cdn.example.com/gone.png') is None

    def test_network_error_is_no_image(self, tmp_path):
        session = FakeSession({'https://down.example.com/a.png': requests.ConnectionError('refused')})
        assert ImageResolver(tmp_path, session=session).resolve('https://down.example.com/a.png') is None

    def test_resolve_all_keeps_reference_order(self, tmp_path):
        (tmp_path / 'local.png').write_bytes(b'local')
        session = FakeSession({
            'https://cdn.example.com/1.png': FakeResponse(b'one'),
            'https://cdn.example.com/3.png': FakeResponse(b'three'),
        })
        resolver = ImageResolver(tmp_path, max_workers=3, session=session)
        refs = ['https://cdn.example.com/1.png', 'https://cdn.example.com/2.png',
                '/local.png', 'https://cdn.example.com/3.png']
        assert resolver.resolve_all(refs) == [b'one', None, b'local', b'three']
        assert resolver.resolve_all([]) == []
