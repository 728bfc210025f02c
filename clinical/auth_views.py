"""
Identity endpoints: login, logout and "who am I".

Clients never send a role: each request reads it from the authenticated
user.
"""
from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from clinical.serializers.auth import LoginSerializer
from clinical.services.audit import log_action

logger = logging.getLogger(__name__)


def _user_payload(user) -> dict:
    return {
        'id': user.id,
        'username': user.username,
        'name': user.get_full_name() or user.username,
        'role': user.role,
    }


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """Username/password login.  Any ``role`` sent by the client is ignored."""
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']

    user = authenticate(request, username=username, password=s.validated_data['password'])
    if not user:
        logger.info('failed login for %s from %s', username, request.META.get('REMOTE_ADDR'))
        return Response({'ok': False, 'error': {'code': 'invalid_credentials',
                                                'message': 'Invalid username or password.'}}, status=400)

    try:
        log_action(user_id=user.id, action='login', object_type='user', object_id=user.id,
                   detail={'ip': request.META.get('REMOTE_ADDR')})
    except Exception:
        logger.exception('login audit for user %s not recorded', user.id)

    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return Response({
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'role': user.role,
        'user': _user_payload(user),
    })

login_view.cls.throttle_scope = 'login'


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """End the session: drop the DRF token and blacklist refresh tokens.

    With a ``refresh`` token in the body only that token is blacklisted,
    otherwise every outstanding refresh token of the user is.
    """
    user = request.user
    Token.objects.filter(user=user).delete()
    refresh = request.data.get('refresh')
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
        except TokenError:
            logger.info('logout with an invalid refresh token for user %s', user.id)
    else:
        for token in OutstandingToken.objects.filter(user=user):
            BlacklistedToken.objects.get_or_create(token=token)
    try:
        log_action(user_id=user.id, action='logout', object_type='user', object_id=user.id)
    except Exception:
        logger.exception('logout audit for user %s not recorded', user.id)
    return Response(status=204)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    user = request.user
    payload = _user_payload(user)
    return Response({'ok': True, 'userId': user.id, 'role': user.role, 'name': payload['name'], 'user': payload})
