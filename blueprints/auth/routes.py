"""
Authentication routes: login, logout, current user.
Session-based authentication for members and administrators.
"""

import logging

from flask import Blueprint
from flask_login import login_user, logout_user, login_required, current_user

from blueprints.auth.forms import LoginForm
from models.user import User, get_user_by_username, update_last_login, check_password
from utils.api_response import api_success, api_error
from utils.messages import get_message

logger = logging.getLogger(__name__)

auth_bp = Blueprint('auth', __name__)


@auth_bp.route('/login', methods=['POST'])
def login():
    """
    Authenticate a member or administrator.

    Request (form or JSON):
        {"username": "member", "password": "...", "remember_me": false}
    """
    form = LoginForm()

    if not form.validate_on_submit():
        first_error = next(iter(form.errors.values()), ['Invalid request'])[0]
        return api_error(first_error, status=400)

    user_dict = get_user_by_username(form.username.data)

    if user_dict is None or not check_password(user_dict, form.password.data):
        logger.warning('Failed login for %s', form.username.data)
        return api_error(get_message('invalid_credentials'), status=401)

    if not user_dict.get('active'):
        return api_error(get_message('account_disabled'), status=403)

    user = User(user_dict)
    login_user(user, remember=form.remember_me.data)
    update_last_login(user.id)

    return api_success(
        data=user.to_dict(),
        message=get_message('login_success', name=user.full_name or user.username)
    )


@auth_bp.route('/logout', methods=['POST'])
@login_required
def logout():
    """Logout current user."""
    logout_user()
    return api_success(message=get_message('logout_success'))


@auth_bp.route('/me')
@login_required
def me():
    """Current user profile."""
    return api_success(data=current_user.to_dict())
