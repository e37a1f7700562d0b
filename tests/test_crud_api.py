"""
Tests for client, moto and service endpoints plus uploads
"""
import io
import os
import tempfile

from PIL import Image

from motoshop.config import TestingConfig
from motoshop.extensions import db
from motoshop.server import create_app
from motoshop.services.service_record_service import merge_image_path


def setup_module(module):
    module.tmp_dir = tempfile.mkdtemp()
    config = type('CrudTestConfig', (TestingConfig,), {
        'SITE_ROOT': module.tmp_dir,
        'INVOICES_DIR': os.path.join(module.tmp_dir, 'invoices'),
        'UPLOADS_DIR': os.path.join(module.tmp_dir, 'uploads'),
        'LOGO_PATH': None,
    })
    module.app = create_app(config)
    module.client = module.app.test_client()
    module.app_ctx = module.app.app_context()
    module.app_ctx.push()


def teardown_module(module):
    db.session.remove()
    db.drop_all()
    module.app_ctx.pop()


def png_file(name='foto.png'):
    buffer = io.BytesIO()
    Image.new('RGB', (10, 10), 'green').save(buffer, format='PNG')
    buffer.seek(0)
    return buffer, name


def create_client(name='Carlos Pérez'):
    response = client.post('/api/clients', json={'name': name, 'phone': '3110000000', 'address': 'Cra 5'})
    assert response.status_code == 201
    return response.get_json()


def create_moto(client_id):
    response = client.post('/api/motos', json={'client_id': client_id, 'brand': 'Bajaj', 'model': 'Pulsar 200', 'plate': 'QWE45R'})
    assert response.status_code == 201
    return response.get_json()


class TestClients:

    def test_create_and_get(self):
        created = create_client()
        assert created['name'] == 'Carlos Pérez'
        fetched = client.get(f"/api/clients/{created['id']}")
        assert fetched.status_code == 200
        assert fetched.get_json()['phone'] == '3110000000'

    def test_name_required(self):
        response = client.post('/api/clients', json={'phone': '1'})
        assert response.status_code == 400
        assert 'name' in response.get_json()

    def test_update_and_delete(self):
        created = create_client('Temporal')
        updated = client.put(f"/api/clients/{created['id']}", json={'address': 'Nueva dirección'})
        assert updated.status_code == 200
        assert updated.get_json()['address'] == 'Nueva dirección'
        assert updated.get_json()['name'] == 'Temporal'

        assert client.delete(f"/api/clients/{created['id']}").status_code == 200
        assert client.get(f"/api/clients/{created['id']}").status_code == 404
        assert client.delete(f"/api/clients/{created['id']}").status_code == 404

    def test_list(self):
        create_client('Zoe')
        names = [c['name'] for c in client.get('/api/clients').get_json()]
        assert 'Zoe' in names


class TestMotos:

    def test_list_includes_client_name(self):
        owner = create_client('Dueño Moto')
        moto = create_moto(owner['id'])
        assert moto['client_name'] == 'Dueño Moto'
        listing = client.get(f"/api/motos?client_id={owner['id']}").get_json()
        assert [m['id'] for m in listing] == [moto['id']]
        assert listing[0]['client_name'] == 'Dueño Moto'

    def test_unknown_client_rejected(self):
        response = client.post('/api/motos', json={'client_id': 9999, 'brand': 'KTM', 'model': 'Duke'})
        assert response.status_code == 400
        assert 'does not exist' in response.get_json()['error']

    def test_missing_fields(self):
        response = client.post('/api/motos', json={'brand': 'KTM'})
        assert response.status_code == 400
        body = response.get_json()
        assert 'client_id' in body and 'model' in body


class TestServices:

    def setup_method(self):
        owner = create_client('Cliente Servicios')
        self.moto = create_moto(owner['id'])

    def test_create_json(self):
        response = client.post('/api/services', json={
            'moto_id': self.moto['id'], 'description': 'Cambio de llantas',
            'date': '2024-05-02', 'cost': '150.75'})
        assert response.status_code == 201
        body = response.get_json()
        assert body['plate'] == 'QWE45R'
        assert body['brand'] == 'Bajaj'
        assert body['completed'] is False
        assert body['images'] == []
        assert body['date'] == '2024-05-02'

    def test_validation(self):
        base = {'moto_id': self.moto['id'], 'date': '2024-05-02', 'cost': '10'}
        assert client.post('/api/services', json=dict(base, description='')).status_code == 400
        assert client.post('/api/services', json=dict(base, description='x', cost='-1')).status_code == 400
        assert client.post('/api/services', json={'description': 'x'}).status_code == 400
        missing_moto = dict(base, description='x', moto_id=99999)
        assert client.post('/api/services', json=missing_moto).status_code == 400

    def test_multipart_create_and_update_images(self):
        data = {'moto_id': str(self.moto['id']), 'description': 'Pintura', 'date': '2024-06-01',
                'cost': '300', 'image': png_file()}
        response = client.post('/api/services', data=data, content_type='multipart/form-data')
        assert response.status_code == 201
        created = response.get_json()
        first_image = created['image_path']
        assert first_image.startswith('/uploads/services/')
        assert first_image.endswith('_foto.png')

        served = client.get(first_image)
        assert served.status_code == 200
        served.close()

        # upload without explicit image_path appends
        response = client.put(f"/api/services/{created['id']}", data={'image': png_file('otra.png')},
                              content_type='multipart/form-data')
        assert response.status_code == 200
        images = response.get_json()['images']
        assert len(images) == 2 and images[0] == first_image

        # explicit value plus upload: explicit list, then the new file
        response = client.put(f"/api/services/{created['id']}",
                              data={'image_path': 'https://cdn.example.com/a.jpg', 'image': png_file('tres.png')},
                              content_type='multipart/form-data')
        images = response.get_json()['images']
        assert images[0] == 'https://cdn.example.com/a.jpg'
        assert images[1].endswith('_tres.png')

        # explicit empty string clears
        response = client.put(f"/api/services/{created['id']}", json={'image_path': ''})
        assert response.get_json()['image_path'] is None

    def test_update_keeps_images_when_untouched(self):
        response = client.post('/api/services', json={
            'moto_id': self.moto['id'], 'description': 'Frenos', 'date': '2024-05-03',
            'cost': '20', 'image_path': '/uploads/services/a.png'})
        service_id = response.get_json()['id']
        response = client.put(f"/api/services/{service_id}", json={'completed': True, 'cost': '25.5'})
        body = response.get_json()
        assert body['completed'] is True
        assert body['image_path'] == '/uploads/services/a.png'

    def test_missing_service(self):
        assert client.get('/api/services/424242').status_code == 404
        assert client.put('/api/services/424242', json={'cost': '1'}).status_code == 404
        assert client.delete('/api/services/424242').status_code == 404


class TestSystemEndpoints:

    def test_health(self):
        assert client.get('/api/health').get_json() == {'status': 'ok'}

    def test_db_check(self):
        body = client.get('/api/db-check').get_json()
        assert body['ok'] is True
        assert body['rows'] == [{'ok': 1}]

    def test_features(self):
        assert client.get('/api/features').get_json() == {'uploadEnabled': True}

    def test_upload(self):
        response = client.post('/api/upload', data={'image': png_file()}, content_type='multipart/form-data')
        assert response.status_code == 200
        body = response.get_json()
        assert body['ok'] is True
        assert body['localPath'].startswith('/uploads/services/')

    def test_upload_rejects_non_images(self):
        data = {'image': (io.BytesIO(b'plain text'), 'notes.txt', 'text/plain')}
        response = client.post('/api/upload', data=data, content_type='multipart/form-data')
        assert response.status_code == 400

    def test_upload_requires_file(self):
        response = client.post('/api/upload', data={}, content_type='multipart/form-data')
        assert response.status_code == 400

    def test_unknown_api_path(self):
        response = client.get('/api/nothing-here')
        assert response.status_code == 404
        assert response.get_json()['error'] == 'API endpoint not found'


class TestMergeImagePath:

    def test_upload_appends_to_existing(self):
        assert merge_image_path('a.png', uploaded='b.png') == 'a.png,b.png'
        assert merge_image_path(None, uploaded='b.png') == 'b.png'

    def test_explicit_replaces(self):
        assert merge_image_path('a.png', 'x.png', True) == 'x.png'
        assert merge_image_path('a.png', '', True) is None
        assert merge_image_path('a.png', None, True) is None
        assert merge_image_path('a.png', 'x.png', True, 'b.png') == 'x.png,b.png'

    def test_untouched(self):
        assert merge_image_path('a.png') == 'a.png'
