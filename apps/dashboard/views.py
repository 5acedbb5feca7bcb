from rest_framework.decorators import api_view
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .queries import DashboardQueries
from .serializers import FinancialOverviewSerializer, AlertsResponseSerializer


@extend_schema(
    responses={200: FinancialOverviewSerializer},
    description="Monthly share, savings and payment history across the user's subscriptions.",
    tags=['dashboard'],
)
@api_view(['GET'])
def financial(request):
    """Financial overview for the current user - thin HTTP handler."""
    return Response(DashboardQueries.financial_overview(request.user))


@extend_schema(
    responses={200: AlertsResponseSerializer},
    description="Renewals, overdue payments, pending requests and stale passwords.",
    tags=['dashboard'],
)
@api_view(['GET'])
def alerts(request):
    return Response(DashboardQueries.alerts(request.user))
