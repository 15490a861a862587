"""
Account signup, login and profile.

Anyone may sign up as a patient. Staff accounts (admin, physician,
nurse) can only be created by an authenticated admin. Login answers the
same way for an unknown email and a wrong password.
"""
import logging

from django.contrib.auth import authenticate, get_user_model, password_validation
from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework_simplejwt.settings import api_settings as jwt_settings

from records.authentication import issue_access_token
from records.exceptions import Conflict, Forbidden, InvalidCredential, InvalidValue
from records.models import Patient, Role, Staff
from records.services.audit import log_action
from records.services.integrity import guarded_write

logger = logging.getLogger(__name__)

User = get_user_model()

EMAIL_TAKEN = 'An account with this email already exists'


def account_to_dict(user) -> dict:
    return {
        'id': user.id,
        'email': user.email,
        'role': user.role,
        'patient_id': Patient.objects.filter(account_id=user.id).values_list('id', flat=True).first(),
        'staff_id': Staff.objects.filter(account_id=user.id).values_list('id', flat=True).first(),
    }


def signup(actor, data: dict, *, ip=None) -> dict:
    role = data['role']
    is_admin = bool(actor and actor.is_authenticated and actor.role == Role.ADMIN)
    if role != Role.PATIENT and not is_admin:
        raise Forbidden('Only an administrator can create staff accounts.')
    if User.objects.filter(email__iexact=data['email']).exists():
        raise Conflict(EMAIL_TAKEN)

    candidate = User(email=data['email'], username=data['email'], role=role)
    try:
        password_validation.validate_password(data['password'], user=candidate)
    except DjangoValidationError as exc:
        raise InvalidValue('password: ' + ' '.join(exc.messages)) from exc

    with guarded_write(EMAIL_TAKEN):
        user = User.objects.create_user(
            username=data['email'], email=data['email'], password=data['password'], role=role,
        )
        log_action(user=actor if is_admin else user, action='signup', object_type='user', object_id=user.id,
                   detail={'role': role, 'ip': ip})
    logger.info('account %s signed up with role %s', user.id, role)
    return account_to_dict(user)


def login(request, email: str, password: str, *, ip=None) -> dict:
    user = authenticate(request, username=email.strip().lower(), password=password)
    if user is None:
        log_action(user=None, action='login', object_type='user',
                   detail={'result': 'fail', 'email': email, 'ip': ip})
        logger.info('failed login for %s from %s', email, ip)
        raise InvalidCredential('Invalid email or password.')

    log_action(user=user, action='login', object_type='user', object_id=user.id,
               detail={'result': 'ok', 'ip': ip})
    return {
        'token': issue_access_token(user),
        'token_type': 'Bearer',
        'expires_in': int(jwt_settings.ACCESS_TOKEN_LIFETIME.total_seconds()),
        'user': account_to_dict(user),
    }
