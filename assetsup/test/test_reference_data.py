"""
Category and department endpoints
"""

import pytest

from assetsup import db
from assetsup.data.core.asset_info.asset import Asset

RESOURCES = [
    ('categories', 'Category', 'category_id'),
    ('departments', 'Department', 'department_id'),
]


@pytest.mark.parametrize("resource, label, _", RESOURCES)
def test_create_and_get(auth_client, resource, label, _):
    response = auth_client.post(f'/api/{resource}', json={'name': 'Laptops', 'description': 'Portable computers'})
    assert response.status_code == 201
    created = response.get_json()
    assert created['name'] == 'Laptops'
    assert created['description'] == 'Portable computers'
    assert created['asset_count'] == 0

    response = auth_client.get(f"/api/{resource}/{created['id']}")
    assert response.status_code == 200
    assert response.get_json()['name'] == 'Laptops'


@pytest.mark.parametrize("resource, label, _", RESOURCES)
def test_get_missing(auth_client, resource, label, _):
    response = auth_client.get(f'/api/{resource}/999')
    assert response.status_code == 404
    assert response.get_json()['message'] == f"{label} not found"


@pytest.mark.parametrize("resource, label, _", RESOURCES)
def test_duplicate_name_conflicts(auth_client, resource, label, _):
    auth_client.post(f'/api/{resource}', json={'name': 'Furniture'})
    response = auth_client.post(f'/api/{resource}', json={'name': 'furniture'})
    assert response.status_code == 409
    assert response.get_json()['message'] == f"A {label.lower()} with this name already exists"


@pytest.mark.parametrize("resource, label, _", RESOURCES)
def test_validation(auth_client, resource, label, _):
    response = auth_client.post(f'/api/{resource}', json={'name': '', 'description': 'x' * 501})
    assert response.status_code == 400
    assert set(response.get_json()['errors']) == {'name', 'description'}

    response = auth_client.post(f'/api/{resource}', json={'name': 'x' * 101})
    assert response.status_code == 400
    assert 'name' in response.get_json()['errors']


@pytest.mark.parametrize("resource, label, _", RESOURCES)
def test_list_ordered_with_counts(auth_client, resource, label, _):
    for name in ('Zeta', 'Alpha', 'Mid'):
        auth_client.post(f'/api/{resource}', json={'name': name})
    alpha_id = next(row['id'] for row in auth_client.get(f'/api/{resource}').get_json()
                    if row['name'] == 'Alpha')
    field = 'category_id' if resource == 'categories' else 'department_id'
    auth_client.post('/api/assets', json={'name': 'Desk', field: alpha_id})
    auth_client.post('/api/assets', json={'name': 'Chair', field: alpha_id})

    rows = auth_client.get(f'/api/{resource}').get_json()
    assert [row['name'] for row in rows] == ['Alpha', 'Mid', 'Zeta']
    assert [row['asset_count'] for row in rows] == [2, 0, 0]


@pytest.mark.parametrize("resource, label, foreign_key", RESOURCES)
def test_delete_detaches_assets(app, auth_client, resource, label, foreign_key):
    record_id = auth_client.post(f'/api/{resource}', json={'name': 'Temporary'}).get_json()['id']
    asset_id = auth_client.post('/api/assets', json={'name': 'Printer', foreign_key: record_id}).get_json()['id']

    response = auth_client.delete(f'/api/{resource}/{record_id}')
    assert response.status_code == 204
    assert auth_client.get(f'/api/{resource}/{record_id}').status_code == 404

    with app.app_context():
        asset = db.session.get(Asset, asset_id)
        assert asset is not None
        assert getattr(asset, foreign_key) is None


@pytest.mark.parametrize("resource, label, _", RESOURCES)
def test_delete_missing(auth_client, resource, label, _):
    assert auth_client.delete(f'/api/{resource}/999').status_code == 404
