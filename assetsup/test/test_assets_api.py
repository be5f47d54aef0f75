"""
Asset endpoints: CRUD, listing, lifecycle changes and child records
"""

import pytest

from assetsup import db
from assetsup.data.core.asset_info.asset import Asset
from assetsup.data.core.asset_info.asset_history import AssetHistory
from assetsup.services.core.asset_service import AssetService
from assetsup.test.conftest import create_user


def create_asset(client, **fields):
    payload = {'name': 'Laptop'}
    payload.update(fields)
    response = client.post('/api/assets', json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def history_actions(client, asset_id, **params):
    response = client.get(f'/api/assets/{asset_id}/history', query_string=params)
    assert response.status_code == 200
    return [entry['action'] for entry in response.get_json()]


def test_create_asset(auth_client, user):
    category = auth_client.post('/api/categories', json={'name': 'IT'}).get_json()
    asset = create_asset(auth_client, name='ThinkPad', serial_number='SN-1', purchase_price='1299.99',
                         purchase_date='2024-01-15', category_id=category['id'], condition='NEW')

    assert asset['asset_tag'] == f"AST-{asset['id']:05d}"
    assert len(asset['uuid']) == 36
    assert asset['status'] == 'ACTIVE'
    assert asset['status_label'] == 'Active'
    assert asset['condition'] == 'NEW'
    assert asset['purchase_price'] == 1299.99
    assert asset['purchase_date'] == '2024-01-15'
    assert asset['category'] == {'id': category['id'], 'name': 'IT'}
    assert asset['created_by_id'] == user.id
    assert asset['stellar_status'] is None
    assert history_actions(auth_client, asset['id']) == ['CREATED']


def test_create_with_assignee_marks_assigned(app, auth_client):
    other = create_user(app, email='holder@example.com')
    asset = create_asset(auth_client, assigned_to_id=other.id)
    assert asset['status'] == 'ASSIGNED'
    assert asset['assigned_to']['email'] == 'holder@example.com'


def test_create_validation(auth_client):
    response = auth_client.post('/api/assets', json={'status': 'LOST', 'purchase_price': '-5',
                                                     'purchase_date': '15/01/2024'})
    assert response.status_code == 400
    assert set(response.get_json()['errors']) == {'name', 'status', 'purchase_price', 'purchase_date'}


def test_create_unknown_category(auth_client):
    response = auth_client.post('/api/assets', json={'name': 'Laptop', 'category_id': 42})
    assert response.status_code == 400
    assert response.get_json()['message'] == "Category not found"


def test_duplicate_serial_number(auth_client):
    create_asset(auth_client, serial_number='SN-1')
    response = auth_client.post('/api/assets', json={'name': 'Other', 'serial_number': 'SN-1'})
    assert response.status_code == 409


def test_get_missing_asset(auth_client):
    response = auth_client.get('/api/assets/999')
    assert response.status_code == 404
    assert response.get_json()['message'] == "Asset not found"


def test_update_records_changed_fields(auth_client):
    asset = create_asset(auth_client, location='HQ')
    response = auth_client.patch(f"/api/assets/{asset['id']}",
                                 json={'name': 'Laptop 2', 'location': 'HQ', 'manufacturer': 'Lenovo'})
    assert response.status_code == 200
    body = response.get_json()
    assert body['name'] == 'Laptop 2'
    assert body['manufacturer'] == 'Lenovo'
    assert body['location'] == 'HQ'

    history = auth_client.get(f"/api/assets/{asset['id']}/history").get_json()
    assert history[0]['action'] == 'UPDATED'
    assert history[0]['previous_value'] == {'name': 'Laptop', 'manufacturer': None}
    assert history[0]['new_value'] == {'name': 'Laptop 2', 'manufacturer': 'Lenovo'}


def test_update_can_clear_optional_field(auth_client):
    asset = create_asset(auth_client, location='HQ', model='X1')
    body = auth_client.patch(f"/api/assets/{asset['id']}", json={'location': None}).get_json()
    assert body['location'] is None
    assert body['model'] == 'X1'


def test_update_rejects_empty_name(auth_client):
    asset = create_asset(auth_client)
    response = auth_client.patch(f"/api/assets/{asset['id']}", json={'name': None})
    assert response.status_code == 400


def test_update_without_changes_writes_no_history(auth_client):
    asset = create_asset(auth_client)
    auth_client.patch(f"/api/assets/{asset['id']}", json={'name': 'Laptop'})
    assert history_actions(auth_client, asset['id']) == ['CREATED']


def test_change_status(auth_client):
    asset = create_asset(auth_client)
    response = auth_client.patch(f"/api/assets/{asset['id']}/status",
                                 json={'status': 'MAINTENANCE', 'notes': 'Broken screen'})
    assert response.status_code == 200
    assert response.get_json()['status'] == 'MAINTENANCE'

    entry = auth_client.get(f"/api/assets/{asset['id']}/history").get_json()[0]
    assert entry['action'] == 'STATUS_CHANGED'
    assert entry['description'] == 'Status changed from Active to Maintenance: Broken screen'
    assert entry['previous_value'] == {'status': 'ACTIVE'}

    # same status again is a no-op
    auth_client.patch(f"/api/assets/{asset['id']}/status", json={'status': 'MAINTENANCE'})
    assert history_actions(auth_client, asset['id']).count('STATUS_CHANGED') == 1


def test_change_status_invalid(auth_client):
    asset = create_asset(auth_client)
    response = auth_client.patch(f"/api/assets/{asset['id']}/status", json={'status': 'LOST'})
    assert response.status_code == 400
    assert 'status' in response.get_json()['errors']


def test_transfer_assigns_and_unassigns(app, auth_client):
    holder = create_user(app, email='holder@example.com')
    department = auth_client.post('/api/departments', json={'name': 'Ops'}).get_json()
    asset = create_asset(auth_client)

    response = auth_client.post(f"/api/assets/{asset['id']}/transfer",
                                json={'assigned_to_id': holder.id, 'department_id': department['id'],
                                      'location': 'Floor 2', 'notes': 'New starter'})
    assert response.status_code == 200
    body = response.get_json()
    assert body['status'] == 'ASSIGNED'
    assert body['assigned_to']['id'] == holder.id
    assert body['department']['name'] == 'Ops'
    assert body['location'] == 'Floor 2'

    entry = auth_client.get(f"/api/assets/{asset['id']}/history").get_json()[0]
    assert entry['action'] == 'TRANSFERRED'
    assert entry['new_value']['status'] == 'ASSIGNED'
    assert entry['description'].endswith('New starter')

    response = auth_client.post(f"/api/assets/{asset['id']}/transfer", json={'assigned_to_id': None})
    body = response.get_json()
    assert body['status'] == 'ACTIVE'
    assert body['assigned_to'] is None
    assert body['department']['name'] == 'Ops'


def test_transfer_keeps_non_active_status(app, auth_client):
    holder = create_user(app, email='holder@example.com')
    asset = create_asset(auth_client)
    auth_client.patch(f"/api/assets/{asset['id']}/status", json={'status': 'MAINTENANCE'})

    body = auth_client.post(f"/api/assets/{asset['id']}/transfer",
                            json={'assigned_to_id': holder.id}).get_json()
    assert body['status'] == 'MAINTENANCE'


def test_transfer_requires_a_target(auth_client):
    asset = create_asset(auth_client)
    response = auth_client.post(f"/api/assets/{asset['id']}/transfer", json={'notes': 'nothing'})
    assert response.status_code == 400


def test_transfer_to_inactive_user(app, auth_client):
    gone = create_user(app, email='gone@example.com', is_active=False)
    asset = create_asset(auth_client)
    response = auth_client.post(f"/api/assets/{asset['id']}/transfer", json={'assigned_to_id': gone.id})
    assert response.status_code == 400
    assert response.get_json()['message'] == "Assigned user not found"


def test_history_filters(app, auth_client):
    asset = create_asset(auth_client)
    auth_client.patch(f"/api/assets/{asset['id']}/status", json={'status': 'RETIRED'})
    auth_client.post(f"/api/assets/{asset['id']}/notes", json={'content': 'Sold'})

    assert history_actions(auth_client, asset['id']) == ['NOTE_ADDED', 'STATUS_CHANGED', 'CREATED']
    assert history_actions(auth_client, asset['id'], action='STATUS_CHANGED') == ['STATUS_CHANGED']

    with app.app_context():
        today = db.session.query(AssetHistory.timestamp).first()[0].date().isoformat()
    assert len(history_actions(auth_client, asset['id'], start_date=today, end_date=today)) == 3
    assert history_actions(auth_client, asset['id'], start_date='2999-01-01') == []
    assert history_actions(auth_client, asset['id'], end_date='2000-01-01') == []


def test_history_bad_filters(auth_client):
    asset = create_asset(auth_client)
    assert auth_client.get(f"/api/assets/{asset['id']}/history?action=EXPLODED").status_code == 400
    assert auth_client.get(f"/api/assets/{asset['id']}/history?start_date=yesterday").status_code == 400


def test_internal_value_error_is_server_error(app, auth_client, monkeypatch):
    asset = create_asset(auth_client)
    app.config['PROPAGATE_EXCEPTIONS'] = False

    def broken(asset_id):
        raise ValueError("'SCRAPPED' is not a valid AssetStatus")

    monkeypatch.setattr(AssetService, 'get_notes', staticmethod(broken))

    response = auth_client.get(f"/api/assets/{asset['id']}/notes")
    assert response.status_code == 500
    assert response.get_json()['error'] == 'Internal Server Error'


def test_notes(auth_client, user):
    asset = create_asset(auth_client)
    response = auth_client.post(f"/api/assets/{asset['id']}/notes", json={'content': '  Battery replaced  '})
    assert response.status_code == 201
    note = response.get_json()
    assert note['content'] == 'Battery replaced'
    assert note['created_by']['id'] == user.id

    notes = auth_client.get(f"/api/assets/{asset['id']}/notes").get_json()
    assert [n['content'] for n in notes] == ['Battery replaced']

    assert auth_client.post(f"/api/assets/{asset['id']}/notes", json={'content': ''}).status_code == 400


def test_maintenance_records(auth_client):
    asset = create_asset(auth_client)
    response = auth_client.post(f"/api/assets/{asset['id']}/maintenance", json={
        'maintenance_type': 'PREVENTIVE',
        'description': 'Annual service',
        'scheduled_date': '2025-03-01',
        'cost': 120.5,
        'performed_by': 'Acme Repairs',
    })
    assert response.status_code == 201
    record = response.get_json()
    assert record['is_completed'] is False
    assert record['cost'] == 120.5

    records = auth_client.get(f"/api/assets/{asset['id']}/maintenance").get_json()
    assert len(records) == 1
    assert history_actions(auth_client, asset['id'])[0] == 'MAINTENANCE_SCHEDULED'


def test_maintenance_validation(auth_client):
    asset = create_asset(auth_client)
    response = auth_client.post(f"/api/assets/{asset['id']}/maintenance", json={
        'maintenance_type': 'ROUTINE', 'description': 'x'})
    assert response.status_code == 400
    assert set(response.get_json()['errors']) == {'maintenance_type', 'scheduled_date'}

    response = auth_client.post(f"/api/assets/{asset['id']}/maintenance", json={
        'maintenance_type': 'CORRECTIVE', 'description': 'Fix', 'scheduled_date': '2025-03-01',
        'completed_date': '2025-02-01'})
    assert response.status_code == 400
    assert response.get_json()['message'] == "Completed date cannot be before the scheduled date"


def test_delete_asset(app, auth_client):
    asset = create_asset(auth_client)
    auth_client.post(f"/api/assets/{asset['id']}/notes", json={'content': 'Note'})

    assert auth_client.delete(f"/api/assets/{asset['id']}").status_code == 204
    assert auth_client.get(f"/api/assets/{asset['id']}").status_code == 404
    with app.app_context():
        assert AssetHistory.query.filter_by(asset_id=asset['id']).count() == 0


# ------------------------------------------------------------------ listing

@pytest.fixture
def inventory(auth_client):
    it = auth_client.post('/api/categories', json={'name': 'IT'}).get_json()
    furniture = auth_client.post('/api/categories', json={'name': 'Furniture'}).get_json()
    assets = [
        create_asset(auth_client, name='Dell Monitor', serial_number='MON-001', category_id=it['id'],
                     purchase_price='300'),
        create_asset(auth_client, name='Standing Desk', category_id=furniture['id'], purchase_price='800'),
        create_asset(auth_client, name='MacBook', serial_number='MAC-77', category_id=it['id'],
                     purchase_price='2500'),
    ]
    auth_client.patch(f"/api/assets/{assets[1]['id']}/status", json={'status': 'RETIRED'})
    return assets


def list_names(client, **params):
    response = client.get('/api/assets', query_string=params)
    assert response.status_code == 200
    return [asset['name'] for asset in response.get_json()['assets']]


def test_list_default_newest_first(auth_client, inventory):
    body = auth_client.get('/api/assets').get_json()
    assert body['total'] == 3
    assert body['page'] == 1
    assert body['limit'] == 10
    assert body['total_pages'] == 1
    assert [a['name'] for a in body['assets']] == ['MacBook', 'Standing Desk', 'Dell Monitor']


def test_list_search(auth_client, inventory):
    assert list_names(auth_client, search='mac') == ['MacBook']
    assert list_names(auth_client, search='mon-0') == ['Dell Monitor']
    assert list_names(auth_client, search=inventory[1]['asset_tag']) == ['Standing Desk']
    assert list_names(auth_client, search='nothing-matches') == []


def test_list_status_filter(auth_client, inventory):
    assert list_names(auth_client, status='RETIRED') == ['Standing Desk']


def test_list_sorting(auth_client, inventory):
    assert list_names(auth_client, sort_by='name', sort_order='asc') == ['Dell Monitor', 'MacBook', 'Standing Desk']
    assert list_names(auth_client, sort_by='purchase_price', sort_order='desc') == \
        ['MacBook', 'Standing Desk', 'Dell Monitor']
    assert list_names(auth_client, sort_by='category', sort_order='asc')[0] == 'Standing Desk'


def test_list_paging(auth_client, inventory):
    body = auth_client.get('/api/assets', query_string={'limit': 2, 'page': 2, 'sort_by': 'name',
                                                        'sort_order': 'asc'}).get_json()
    assert body['total'] == 3
    assert body['total_pages'] == 2
    assert [a['name'] for a in body['assets']] == ['Standing Desk']


def test_list_limit_capped(auth_client, inventory):
    body = auth_client.get('/api/assets', query_string={'limit': 1000}).get_json()
    assert body['limit'] == 100


def test_users_list(app, auth_client, user):
    create_user(app, email='alan@example.com', first_name='Alan', last_name='Turing')
    create_user(app, email='gone@example.com', first_name='Gone', is_active=False)
    users = auth_client.get('/api/users').get_json()
    assert [u['email'] for u in users] == ['alan@example.com', 'tester@example.com']
    assert users[0] == {'id': users[0]['id'], 'email': 'alan@example.com', 'name': 'Alan Turing'}
