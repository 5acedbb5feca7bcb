from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.audit.models import AuditAction, AuditSeverity
from apps.audit.services import record_audit_event

from .serializers import (
    CredentialCreateSerializer,
    CredentialUpdateSerializer,
    CredentialResponseSerializer,
    GeneratePasswordSerializer,
)
from .services import (
    store_credential,
    get_credential,
    update_credential,
    delete_credential,
    generate_password,
    # Exceptions
    SubscriptionNotFoundError,
    CredentialNotFoundError,
    InsufficientPermissionsError,
    CredentialStorageError,
)


def _error_response(e):
    if isinstance(e, (SubscriptionNotFoundError, CredentialNotFoundError)):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, InsufficientPermissionsError):
        code = status.HTTP_403_FORBIDDEN
    else:
        code = status.HTTP_502_BAD_GATEWAY
    return Response({'error': str(e)}, status=code)


@extend_schema(
    request=CredentialCreateSerializer,
    description=(
        "Store a subscription login in the vault (owner/admin). "
        "With `{\"action\": \"generate-password\", \"length\": 16}` returns a generated password instead."
    ),
    tags=['credentials'],
)
@api_view(['POST'])
def credentials(request):
    if request.data.get('action') == 'generate-password':
        serializer = GeneratePasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return Response({'password': generate_password(length=serializer.validated_data['length'])})

    serializer = CredentialCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        subscription = store_credential(user=request.user, **serializer.validated_data)
    except (SubscriptionNotFoundError, InsufficientPermissionsError, CredentialStorageError) as e:
        return _error_response(e)

    record_audit_event(
        action=AuditAction.CREDENTIAL_CREATED,
        entity_type='subscription',
        entity_id=subscription.id,
        user=request.user,
        severity=AuditSeverity.HIGH,
        request=request,
    )
    return Response(
        {'message': 'Credential stored securely', 'credentialId': subscription.credentials_id},
        status=status.HTTP_201_CREATED,
    )


@extend_schema(methods=['GET'], responses={200: CredentialResponseSerializer}, tags=['credentials'])
@extend_schema(methods=['PUT'], request=CredentialUpdateSerializer, tags=['credentials'])
@extend_schema(methods=['DELETE'], tags=['credentials'])
@api_view(['GET', 'PUT', 'DELETE'])
def credential_detail(request, subscription_id):
    """Read (members), update (owner/admin) or delete (owner) a stored login."""
    if request.method == 'GET':
        try:
            subscription, credential = get_credential(subscription_id=subscription_id, user=request.user)
        except (
            SubscriptionNotFoundError,
            CredentialNotFoundError,
            InsufficientPermissionsError,
            CredentialStorageError,
        ) as e:
            return _error_response(e)

        record_audit_event(
            action=AuditAction.CREDENTIAL_ACCESSED,
            entity_type='subscription',
            entity_id=subscription.id,
            user=request.user,
            severity=AuditSeverity.MEDIUM,
            request=request,
        )
        return Response(CredentialResponseSerializer({
            'subscription': subscription,
            'credential': credential,
        }).data)

    if request.method == 'PUT':
        serializer = CredentialUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            subscription, password_changed = update_credential(
                subscription_id=subscription_id,
                user=request.user,
                **serializer.validated_data
            )
        except (
            SubscriptionNotFoundError,
            CredentialNotFoundError,
            InsufficientPermissionsError,
            CredentialStorageError,
        ) as e:
            return _error_response(e)

        record_audit_event(
            action=AuditAction.CREDENTIAL_UPDATED,
            entity_type='subscription',
            entity_id=subscription.id,
            user=request.user,
            details={'fields': sorted(serializer.validated_data), 'passwordChanged': password_changed},
            severity=AuditSeverity.HIGH,
            request=request,
        )
        return Response({'message': 'Credential updated successfully'})

    try:
        subscription = delete_credential(subscription_id=subscription_id, user=request.user)
    except (
        SubscriptionNotFoundError,
        CredentialNotFoundError,
        InsufficientPermissionsError,
        CredentialStorageError,
    ) as e:
        return _error_response(e)

    record_audit_event(
        action=AuditAction.CREDENTIAL_DELETED,
        entity_type='subscription',
        entity_id=subscription.id,
        user=request.user,
        severity=AuditSeverity.HIGH,
        request=request,
    )
    return Response({'message': 'Credential deleted successfully'})
