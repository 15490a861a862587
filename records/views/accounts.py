from rest_framework.decorators import api_view, permission_classes, throttle_classes
from rest_framework.permissions import AllowAny

from records.permissions import gate
from records.responses import created, ok
from records.serializers.auth import LoginSerializer, SignupSerializer
from records.serializers.base import validated
from records.services import accounts
from records.services.audit import client_ip
from records.throttling import LoginRateThrottle, SignupRateThrottle


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([SignupRateThrottle])
def signup_view(request):
    """
    Create an account.
    Fields: email, password, role (admin|physician|nurse|patient).
    Only the patient role is open to anonymous callers; the others need
    an admin bearer token.
    """
    data = validated(SignupSerializer(data=request.data))
    account = accounts.signup(request.user, data, ip=client_ip(request))
    return created(account, message='Account created')


@api_view(['POST'])
@permission_classes([AllowAny])
@throttle_classes([LoginRateThrottle])
def login_view(request):
    """Exchange email/password for a one-hour bearer token."""
    data = validated(LoginSerializer(data=request.data))
    payload = accounts.login(request, data['email'], data['password'], ip=client_ip(request))
    return ok(payload, message='Login successful')


@api_view(['GET'])
@permission_classes([gate('accounts.me')])
def me_view(request):
    return ok(accounts.account_to_dict(request.user))
