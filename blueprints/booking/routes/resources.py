"""
Resource administration API routes.
Rooms and services share handlers; the URL segment selects the kind.
"""

from flask import request
from flask_login import login_required

from models.exceptions import NotFoundError, ValidationError
from models.resource import (
    get_resources, get_resource_by_id, create_resource, update_resource, set_resource_blocked
)
from utils.api_response import api_success
from utils.decorators import role_required
from utils.messages import get_message

RESOURCE_URLS = (
    ('room', 'rooms'),
    ('service', 'services'),
)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def _get_resource_of_kind(resource_kind: str, resource_id: int) -> dict:
    resource = get_resource_by_id(resource_id)
    if not resource or resource['resource_kind'] != resource_kind:
        raise NotFoundError(get_message('resource_not_found'), resource_id=resource_id)
    return resource


def _register_kind(bp, resource_kind: str, plural: str):
    """Register list/create/update/block routes for one resource kind."""

    @bp.route(f'/{plural}', methods=['GET'], endpoint=f'list_{plural}')
    @login_required
    @role_required('admin')
    def list_resources():
        args = request.args
        resources = get_resources(
            resource_kind=resource_kind,
            location=args.get('location'),
            category=args.get('category'),
            floor=args.get('floor'),
            include_blocked=args.get('include_blocked', 'true').lower() != 'false',
            active_only=args.get('active_only', 'true').lower() != 'false'
        )
        return api_success(data=resources)

    @bp.route(f'/{plural}', methods=['POST'], endpoint=f'create_{resource_kind}')
    @login_required
    @role_required('admin')
    def create():
        data = _json_body()
        resource_id = create_resource(
            resource_kind=resource_kind,
            name=data.get('name'),
            location=data.get('location'),
            category=data.get('category'),
            member_rate=data.get('member_rate'),
            guest_rate=data.get('guest_rate'),
            floor=data.get('floor'),
            capacity=data.get('capacity'),
            is_blocked=bool(data.get('is_blocked', False))
        )
        return api_success(data=get_resource_by_id(resource_id),
                           message=get_message('resource_created'), status=201)

    @bp.route(f'/{plural}/<int:resource_id>', methods=['PUT'], endpoint=f'update_{resource_kind}')
    @login_required
    @role_required('admin')
    def update(resource_id):
        _get_resource_of_kind(resource_kind, resource_id)
        data = _json_body()
        for key in ('id', 'resource_id', 'resource_kind'):
            data.pop(key, None)
        resource = update_resource(resource_id, **data)
        return api_success(data=resource, message=get_message('resource_updated'))

    @bp.route(f'/{plural}/<int:resource_id>/block', methods=['PUT'], endpoint=f'block_{resource_kind}')
    @login_required
    @role_required('admin')
    def block(resource_id):
        _get_resource_of_kind(resource_kind, resource_id)
        blocked = bool(_json_body().get('blocked', True))
        resource = set_resource_blocked(resource_id, blocked)
        message_key = 'resource_blocked' if blocked else 'resource_unblocked'
        return api_success(data=resource, message=get_message(message_key))


def register_routes(bp):
    """Register room and service administration routes on the blueprint."""
    for resource_kind, plural in RESOURCE_URLS:
        _register_kind(bp, resource_kind, plural)
