from rest_framework import status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .serializers import PaymentSerializer, PaymentCreateSerializer, PaymentQuerySerializer
from .services import record_payment, list_user_payments, NotMemberError


@extend_schema(
    methods=['GET'],
    parameters=[PaymentQuerySerializer],
    responses={200: PaymentSerializer(many=True)},
    tags=['payments'],
)
@extend_schema(
    methods=['POST'],
    request=PaymentCreateSerializer,
    responses={201: PaymentSerializer},
    tags=['payments'],
)
@api_view(['GET', 'POST'])
def payments(request):
    """Payment history with totals, or record a new pending payment."""
    if request.method == 'GET':
        query_serializer = PaymentQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)

        data = list_user_payments(user=request.user, **query_serializer.validated_data)
        return Response({
            'payments': PaymentSerializer(data['payments'], many=True).data,
            'summary': data['summary'],
        })

    serializer = PaymentCreateSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        payment = record_payment(user=request.user, **serializer.validated_data)
    except NotMemberError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

    return Response(
        {'message': 'Payment record created successfully', 'payment': PaymentSerializer(payment).data},
        status=status.HTTP_201_CREATED,
    )
