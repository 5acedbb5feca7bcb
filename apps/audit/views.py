from rest_framework.decorators import api_view
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import AuditLogSerializer, AuditLogQuerySerializer
from .services import list_audit_logs


@extend_schema(
    parameters=[AuditLogQuerySerializer],
    responses={200: AuditLogSerializer(many=True)},
    description="List the current user's audit trail.",
    tags=['audit'],
)
@api_view(['GET'])
def audit_logs(request):
    """Paginated audit entries for the caller."""
    query_serializer = AuditLogQuerySerializer(data=request.query_params)
    query_serializer.is_valid(raise_exception=True)

    data = list_audit_logs(user=request.user, **query_serializer.validated_data)

    return Response({
        'logs': AuditLogSerializer(data['results'], many=True).data,
        'pagination': data['pagination'],
    })
