import hmac

from django.conf import settings
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import (
    NotificationSerializer,
    NotificationCreateSerializer,
    NotificationQuerySerializer,
)
from .services import (
    create_notification,
    list_notifications,
    mark_notification_read,
    run_notification_checks,
    NotificationNotFoundError,
)


@extend_schema(
    methods=['GET'],
    parameters=[NotificationQuerySerializer],
    responses={200: NotificationSerializer(many=True)},
    tags=['notifications'],
)
@extend_schema(
    methods=['POST'],
    request=NotificationCreateSerializer,
    responses={201: NotificationSerializer},
    tags=['notifications'],
)
@api_view(['GET', 'POST'])
def notifications(request):
    """List the caller's notifications, or create one for themselves."""
    if request.method == 'GET':
        query_serializer = NotificationQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        data = list_notifications(user=request.user, **query_serializer.validated_data)
        return Response({
            'notifications': NotificationSerializer(data['notifications'], many=True).data,
            'unreadCount': data['unread_count'],
        })

    serializer = NotificationCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    notification = create_notification(user=request.user, **serializer.validated_data)
    return Response(NotificationSerializer(notification).data, status=status.HTTP_201_CREATED)


@extend_schema(request=None, responses={200: NotificationSerializer}, tags=['notifications'])
@api_view(['PUT'])
def mark_read(request, pk):
    try:
        notification = mark_notification_read(notification_id=pk, user=request.user)
    except NotificationNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(NotificationSerializer(notification).data)


def _has_automation_secret(request) -> bool:
    header = request.META.get('HTTP_AUTHORIZATION', '')
    expected = f"Bearer {settings.AUTOMATION_SECRET}"
    return hmac.compare_digest(header.encode(), expected.encode())


@extend_schema(
    request=None,
    description=(
        "GET is a health probe. POST runs the expiring-subscription, overdue-payment "
        "and password-rotation checks; requires `Authorization: Bearer <AUTOMATION_SECRET>`."
    ),
    tags=['notifications'],
)
@api_view(['GET', 'POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def automation(request):
    """Trigger endpoint for cron or an external scheduler."""
    if request.method == 'GET':
        return Response({
            'status': 'Notification automation service is running',
            'timestamp': timezone.now().isoformat(),
        })

    if not _has_automation_secret(request):
        return Response({'error': 'Unauthorized'}, status=status.HTTP_401_UNAUTHORIZED)

    results = run_notification_checks()
    return Response({
        'message': 'Notification automation completed successfully',
        'results': results,
        'timestamp': timezone.now().isoformat(),
    })
