"""
Tests for room and service administration (model functions and API).
"""

import pytest

from models.exceptions import NotFoundError, ValidationError


class TestResourceModel:
    """Tests for models.resource."""

    def test_get_resources_filters(self, app):
        from models.resource import get_resources

        with app.app_context():
            rooms = get_resources(resource_kind='room', location='SPORTI-1')
            assert [r['name'] for r in rooms] == ['101', '102', '201', '301']

            vip = get_resources(resource_kind='room', category='VIP')
            assert {r['location'] for r in vip} == {'SPORTI-1', 'SPORTI-2'}

    def test_create_room(self, app):
        from models.resource import create_resource, get_resource_by_id

        with app.app_context():
            room_id = create_resource('room', '105', 'SPORTI-2', 'Family', 1100, 2000, floor='Ground Floor')
            room = get_resource_by_id(room_id)
            assert room['category'] == 'Family'
            assert room['is_blocked'] == 0

    def test_duplicate_room_rejected(self, app):
        from models.resource import create_resource

        with app.app_context():
            with pytest.raises(ValidationError):
                create_resource('room', '101', 'SPORTI-1', 'Standard', 800, 1500, floor='Ground Floor')

    def test_room_requires_floor(self, app):
        from models.resource import create_resource

        with app.app_context():
            with pytest.raises(ValidationError):
                create_resource('room', '110', 'SPORTI-1', 'Standard', 800, 1500)

    def test_service_requires_capacity(self, app):
        from models.resource import create_resource

        with app.app_context():
            with pytest.raises(ValidationError):
                create_resource('service', 'Board Room', 'SPORTI-1', 'Conference Room', 3000, 5000)

    def test_invalid_category_and_rate(self, app):
        from models.resource import create_resource

        with app.app_context():
            with pytest.raises(ValidationError):
                create_resource('room', '120', 'SPORTI-1', 'Suite', 800, 1500, floor='First Floor')
            with pytest.raises(ValidationError):
                create_resource('room', '120', 'SPORTI-1', 'Standard', -5, 1500, floor='First Floor')

    def test_update_rates(self, app):
        from models.resource import get_resources, update_resource

        with app.app_context():
            room = get_resources(resource_kind='room', location='SPORTI-1', category='Standard')[0]
            updated = update_resource(room['id'], member_rate=900, guest_rate=1600, unknown='ignored')
            assert updated['member_rate'] == 900
            assert updated['guest_rate'] == 1600

    def test_update_missing_resource(self, app):
        from models.resource import update_resource

        with app.app_context():
            with pytest.raises(NotFoundError):
                update_resource(9999, member_rate=900)

    def test_block_and_unblock(self, app):
        from models.resource import get_resources, set_resource_blocked

        with app.app_context():
            room = get_resources(resource_kind='room', location='SPORTI-2', category='Standard')[0]
            assert set_resource_blocked(room['id'], True)['is_blocked'] == 1
            assert get_resources(resource_kind='room', location='SPORTI-2', category='Standard',
                                 include_blocked=False) == []
            assert set_resource_blocked(room['id'], False)['is_blocked'] == 0


class TestResourceRoutes:
    """Tests for /api/rooms and /api/services."""

    def test_list_rooms_requires_admin(self, client, member_client):
        assert client.get('/api/rooms').status_code == 401
        assert member_client.get('/api/rooms').status_code == 403

    def test_list_rooms(self, authenticated_client):
        response = authenticated_client.get('/api/rooms', query_string={'location': 'SPORTI-2'})
        assert response.status_code == 200
        assert [r['name'] for r in response.get_json()['data']] == ['101', '201']

    def test_create_service(self, authenticated_client):
        response = authenticated_client.post('/api/services', json={
            'name': 'Board Room',
            'location': 'SPORTI-2',
            'category': 'Conference Room',
            'capacity': 12,
            'member_rate': 2500,
            'guest_rate': 4000,
        })
        assert response.status_code == 201
        data = response.get_json()['data']
        assert data['resource_kind'] == 'service'
        assert data['capacity'] == 12

    def test_create_invalid_room(self, authenticated_client):
        response = authenticated_client.post('/api/rooms', json={
            'name': '404', 'location': 'SPORTI-1', 'category': 'Standard',
            'member_rate': 800, 'guest_rate': 1500,
        })
        assert response.status_code == 400

    def test_update_room(self, authenticated_client, resource_id):
        room_101 = resource_id('room', 'SPORTI-1', '101')
        response = authenticated_client.put(f'/api/rooms/{room_101}', json={'guest_rate': 1700})
        assert response.status_code == 200
        assert response.get_json()['data']['guest_rate'] == 1700

    def test_room_url_does_not_reach_services(self, authenticated_client, resource_id):
        hall = resource_id('service', 'SPORTI-1', 'Main Hall')
        response = authenticated_client.put(f'/api/rooms/{hall}', json={'guest_rate': 1})
        assert response.status_code == 404

    def test_block_room_hides_it(self, authenticated_client, client, resource_id):
        room_102 = resource_id('room', 'SPORTI-1', '102')
        response = authenticated_client.put(f'/api/rooms/{room_102}/block', json={'blocked': True})
        assert response.status_code == 200
        assert response.get_json()['message'] == 'Resource blocked'

        response = authenticated_client.get('/api/rooms/available', query_string={
            'location': 'SPORTI-1', 'category': 'Standard',
            'check_in': '2030-06-01', 'check_out': '2030-06-03',
        })
        assert [r['name'] for r in response.get_json()['data']['resources']] == ['101']
