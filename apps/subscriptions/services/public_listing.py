"""
Public subscription listing.

Read-only search over public, active subscriptions with page/limit
pagination. Returns plain dicts so the view only has to serialize rows.
"""

import math
from decimal import Decimal
from typing import Optional

from django.db.models import F, Q

from apps.subscriptions.models import Subscription


def search_public_subscriptions(
    *,
    search: Optional[str] = None,
    service: Optional[str] = None,
    max_price: Optional[Decimal] = None,
    available_spots: bool = False,
    page: int = 1,
    limit: int = 20,
) -> dict:
    """
    Filter public subscriptions, newest first.

    Args:
        search: Case-insensitive match on name, service name or description
        service: Case-insensitive match on service name
        max_price: Keep subscriptions strictly cheaper than this total price
        available_spots: Keep only subscriptions with a free slot
        page: 1-based page number
        limit: Page size

    Returns:
        Dict with ``results`` (list of Subscription) and ``pagination``
    """
    queryset = (
        Subscription.objects
        .filter(is_public=True, is_active=True)
        .select_related('owner')
    )

    if search:
        queryset = queryset.filter(
            Q(name__icontains=search)
            | Q(service_name__icontains=search)
            | Q(description__icontains=search)
        )

    if service:
        queryset = queryset.filter(service_name__icontains=service)

    if max_price is not None:
        queryset = queryset.filter(total_price__lt=max_price)

    if available_spots:
        queryset = queryset.filter(current_members__lt=F('max_members'))

    total = queryset.count()
    offset = (page - 1) * limit

    return {
        'results': list(queryset.order_by('-created_at')[offset:offset + limit]),
        'pagination': {
            'page': page,
            'limit': limit,
            'total': total,
            'totalPages': math.ceil(total / limit) if total else 0,
        },
    }
