from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.audit.models import AuditAction, AuditSeverity
from apps.audit.services import record_audit_event

from .serializers import (
    AccessRequestSerializer,
    AccessRequestCreateSerializer,
    AccessRequestQuerySerializer,
    AccessRequestReviewSerializer,
)
from .services import (
    create_access_request,
    list_access_requests,
    approve_access_request,
    reject_access_request,
    # Exceptions
    AccessRequestNotFoundError,
    SubscriptionNotFoundError,
    InsufficientPermissionsError,
    RequestAlreadyProcessedError,
    PendingRequestExistsError,
    AlreadyMemberError,
    SubscriptionFullError,
)


@extend_schema(
    methods=['GET'],
    parameters=[AccessRequestQuerySerializer],
    responses={200: AccessRequestSerializer(many=True)},
    tags=['access-requests'],
)
@extend_schema(
    methods=['POST'],
    request=AccessRequestCreateSerializer,
    responses={201: AccessRequestSerializer},
    tags=['access-requests'],
)
@api_view(['GET', 'POST'])
def access_requests(request):
    """List sent/received requests, or ask to join a public subscription."""
    if request.method == 'GET':
        query_serializer = AccessRequestQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        requests_qs = list_access_requests(
            user=request.user,
            request_type=query_serializer.validated_data.get('type'),
        )
        return Response({'requests': AccessRequestSerializer(requests_qs, many=True).data})

    serializer = AccessRequestCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        access_request = create_access_request(user=request.user, **serializer.validated_data)
    except SubscriptionNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (AlreadyMemberError, PendingRequestExistsError, SubscriptionFullError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(AccessRequestSerializer(access_request).data, status=status.HTTP_201_CREATED)


def _review(request, pk, review, audit_action):
    serializer = AccessRequestReviewSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        access_request = review(
            request_id=pk,
            reviewer=request.user,
            admin_response=serializer.validated_data['admin_response'],
        )
    except AccessRequestNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except (RequestAlreadyProcessedError, SubscriptionFullError, AlreadyMemberError) as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    record_audit_event(
        action=audit_action,
        entity_type='access_request',
        entity_id=access_request.id,
        user=request.user,
        details={
            'subscriptionId': str(access_request.subscription_id),
            'requesterId': str(access_request.user_id),
        },
        severity=AuditSeverity.MEDIUM,
        request=request,
    )
    return Response(AccessRequestSerializer(access_request).data)


@extend_schema(
    request=AccessRequestReviewSerializer,
    responses={200: AccessRequestSerializer},
    description="Approve a pending request; the requester takes a member slot.",
    tags=['access-requests'],
)
@api_view(['PUT'])
def approve(request, pk):
    return _review(request, pk, approve_access_request, AuditAction.ACCESS_REQUEST_APPROVED)


@extend_schema(
    request=AccessRequestReviewSerializer,
    responses={200: AccessRequestSerializer},
    tags=['access-requests'],
)
@api_view(['PUT'])
def reject(request, pk):
    return _review(request, pk, reject_access_request, AuditAction.ACCESS_REQUEST_REJECTED)
