"""
Tests for the allocation workflow: direct and admin paths, channels and
bind-time conflicts.
"""

import pytest
from datetime import date
from types import SimpleNamespace

from flask_login import AnonymousUserMixin

from models.exceptions import ConflictError, ValidationError


def _user(username):
    from models.user import User, get_user_by_username
    return User(get_user_by_username(username))


def _draft(payload):
    from models.booking_draft import BookingDraft
    return BookingDraft.from_dict(payload)


class TestEligibility:
    """Tests for the direct-allocation predicate and channel resolution."""

    def test_direct_allocation_predicate(self):
        from blueprints.booking.services.allocation_service import is_direct_allocation_eligible

        member = SimpleNamespace(is_authenticated=True, is_admin=False)
        admin = SimpleNamespace(is_authenticated=True, is_admin=True)

        assert is_direct_allocation_eligible(member, 'Self', 'Spouse') is True
        assert is_direct_allocation_eligible(member, 'Guest', 'Batchmate') is True
        assert is_direct_allocation_eligible(member, 'Guest', 'Friend') is False
        assert is_direct_allocation_eligible(None, 'Guest', 'Relative') is False
        assert is_direct_allocation_eligible(admin, 'Guest', 'Friend') is True

    def test_resolve_channel(self):
        from blueprints.booking.services.allocation_service import resolve_channel

        assert resolve_channel(None) == 'non_member'
        assert resolve_channel(AnonymousUserMixin()) == 'non_member'
        assert resolve_channel(SimpleNamespace(is_authenticated=True)) == 'member'


class TestDirectPath:
    """Self and Batchmate bookings bind the selected resource at submission."""

    def test_direct_self_booking(self, app, booking_payload, resource_id):
        """Self booking of R1 (800/night) for 2025-03-01 to 2025-03-03 costs 1600."""
        from blueprints.booking.services.allocation_service import submit_booking
        from models.booking_state import change_booking_status

        room_r1 = resource_id('room', 'SPORTI-1', '101')
        payload = booking_payload(resource_id=room_r1, check_in='2025-03-01', check_out='2025-03-03')

        with app.app_context():
            result = submit_booking(_draft(payload), actor=_user('member'), today=date(2025, 2, 1))
            booking = result['booking']

            assert result['allocation'] == 'direct'
            assert booking['resource_id'] == room_r1
            assert booking['total_cost'] == 1600
            assert booking['status'] == 'pending'
            assert booking['channel'] == 'member'
            assert booking['application_number'] is None

            confirmed = change_booking_status(booking['id'], 'confirmed', 'admin')
            assert confirmed['status'] == 'confirmed'

    def test_batchmate_books_directly_at_member_rate(self, app, booking_payload, resource_id):
        from blueprints.booking.services.allocation_service import submit_booking

        room_101 = resource_id('room', 'SPORTI-1', '101')
        payload = booking_payload(booking_for='Guest', relation='Batchmate', resource_id=room_101, nights=3)

        with app.app_context():
            result = submit_booking(_draft(payload), actor=_user('member'))
            assert result['allocation'] == 'direct'
            assert result['booking']['total_cost'] == 2400

    def test_client_price_is_ignored(self, app, booking_payload, resource_id):
        from blueprints.booking.services.allocation_service import submit_booking

        room_101 = resource_id('room', 'SPORTI-1', '101')
        payload = booking_payload(resource_id=room_101, total_cost=1)

        with app.app_context():
            result = submit_booking(_draft(payload), actor=_user('member'))
            assert result['booking']['total_cost'] == 1600

    def test_missing_resource_selection(self, app, booking_payload):
        from blueprints.booking.services.allocation_service import submit_booking

        with app.app_context():
            with pytest.raises(ValidationError) as excinfo:
                submit_booking(_draft(booking_payload()), actor=_user('member'))
            assert excinfo.value.message == 'Please select a room'

    def test_lost_availability_is_conflict(self, app, booking_payload, resource_id):
        from blueprints.booking.services.allocation_service import submit_booking
        from models.booking_crud import list_bookings

        room_101 = resource_id('room', 'SPORTI-1', '101')
        payload = booking_payload(resource_id=room_101)

        with app.app_context():
            submit_booking(_draft(payload), actor=_user('member'))
            with pytest.raises(ConflictError):
                submit_booking(_draft(payload), actor=_user('admin'))
            assert list_bookings()['total'] == 1

    def test_validator_runs_before_binding(self, app, booking_payload, resource_id):
        from blueprints.booking.services.allocation_service import submit_booking

        vip_room = resource_id('room', 'SPORTI-2', '201')
        payload = booking_payload(location='SPORTI-2', category='VIP', resource_id=vip_room)

        with app.app_context():
            with pytest.raises(ValidationError):
                submit_booking(_draft(payload), actor=_user('member'))


class TestAdminPath:
    """Other guest bookings wait for an administrator."""

    def test_friend_forces_admin_path(self, app, booking_payload, resource_id):
        from blueprints.booking.services.allocation_service import submit_booking

        room_101 = resource_id('room', 'SPORTI-1', '101')
        payload = booking_payload(booking_for='Guest', relation='Friend', resource_id=room_101)

        with app.app_context():
            result = submit_booking(_draft(payload), actor=_user('member'))
            booking = result['booking']

            assert result['allocation'] == 'admin'
            assert booking['resource_id'] is None
            assert booking['total_cost'] == 0
            assert booking['status'] == 'pending'

    def test_candidates_follow_booking(self, app, booking_payload, resource_id):
        from blueprints.booking.services.allocation_service import submit_booking, get_allocation_candidates

        room_101 = resource_id('room', 'SPORTI-1', '101')
        with app.app_context():
            submit_booking(_draft(booking_payload(resource_id=room_101)), actor=_user('member'))
            guest = submit_booking(_draft(booking_payload(booking_for='Guest', relation='Relative')),
                                   actor=_user('member'))['booking']

            candidates = get_allocation_candidates(guest['id'])
            assert [r['name'] for r in candidates['resources']] == ['102']
            assert list(candidates['by_floor']) == ['Ground Floor']

    def test_conflict_at_bind_time(self, app, booking_payload, resource_id):
        """Two admins bind R2 to overlapping bookings; the second one conflicts."""
        from blueprints.booking.services.allocation_service import submit_booking, assign_and_confirm
        from models.booking_crud import get_booking_by_id
        from models.booking_availability import get_conflicting_bookings
        from models.booking import parse_timestamp

        room_r2 = resource_id('room', 'SPORTI-1', '102')
        with app.app_context():
            first = submit_booking(_draft(booking_payload(booking_for='Guest', relation='Friend')),
                                   actor=_user('member'))['booking']
            second = submit_booking(_draft(booking_payload(booking_for='Guest', relation='Acquaintance',
                                                           days_ahead=31)),
                                    actor=_user('member'))['booking']

            confirmed = assign_and_confirm(first['id'], room_r2, 'admin')
            assert confirmed['status'] == 'confirmed'
            assert confirmed['total_cost'] == 3000

            with pytest.raises(ConflictError):
                assign_and_confirm(second['id'], room_r2, 'admin2')

            second_after = get_booking_by_id(second['id'])
            assert second_after['status'] == 'pending'
            assert second_after['resource_id'] is None

            holders = get_conflicting_bookings(
                [room_r2], parse_timestamp(first['check_in']), parse_timestamp(second['check_out'])
            )
            assert [h['id'] for h in holders] == [first['id']]


class TestNonMemberChannel:
    """Anonymous submissions."""

    def test_application_numbers_are_sequential(self, app, booking_payload):
        from blueprints.booking.services.allocation_service import submit_booking
        from utils.datetime_helpers import get_today

        payload = booking_payload(non_member=True, booking_for='Guest', relation='Relative')

        with app.app_context():
            prefix = 'SP' + get_today().strftime('%y%m%d')
            first = submit_booking(_draft(payload), actor=None)['booking']
            second = submit_booking(_draft(payload), actor=None)['booking']

            assert first['channel'] == 'non_member'
            assert first['user_id'] is None
            assert first['application_number'] == f'{prefix}001'
            assert second['application_number'] == f'{prefix}002'
            assert first['officer_details']['name'] == 'Anita Rao'

    def test_application_number_uses_venue_date(self, app, booking_payload, monkeypatch):
        import models.booking_crud
        from blueprints.booking.services.allocation_service import submit_booking

        monkeypatch.setattr(models.booking_crud, 'get_today', lambda: date(2031, 1, 2))
        payload = booking_payload(non_member=True, booking_for='Guest', relation='Relative')

        with app.app_context():
            booking = submit_booking(_draft(payload), actor=None)['booking']
            assert booking['application_number'] == 'SP310102001'

    def test_officer_required(self, app, booking_payload):
        from blueprints.booking.services.allocation_service import submit_booking

        payload = booking_payload(booking_for='Guest', relation='Relative')
        with app.app_context():
            with pytest.raises(ValidationError):
                submit_booking(_draft(payload), actor=None)


class TestQuote:
    """Tests for preview pricing."""

    def test_quote(self, app, booking_payload, resource_id):
        from blueprints.booking.services.allocation_service import quote_booking

        hall = resource_id('service', 'SPORTI-1', 'Main Hall')
        payload = booking_payload(booking_type='service', category='Main Function Hall',
                                  booking_for='Guest', relation='Friend', nights=1)
        with app.app_context():
            quote = quote_booking(_draft(payload), hall)
            assert quote == {
                'resource_id': hall,
                'nights': 1,
                'payer_class': 'guest',
                'rate': 35000,
                'total_cost': 35000,
                'available': True,
            }
