"""
Audit logging service.

Writing an audit entry must never break the request that triggered it, so
:func:`record_audit_event` logs and swallows database errors.
"""

import logging
from datetime import date
from typing import Optional
from uuid import UUID

from django.db import DatabaseError, transaction
from django.db.models import Q

from apps.accounts.models import User
from apps.audit.models import AuditLog, AuditSeverity

logger = logging.getLogger(__name__)

# Checked in order; X-Forwarded-For may carry a proxy chain
IP_HEADERS = (
    'HTTP_X_FORWARDED_FOR',
    'HTTP_X_REAL_IP',
    'HTTP_CF_CONNECTING_IP',
    'REMOTE_ADDR',
)


def get_client_ip(request) -> Optional[str]:
    """Best-effort client address behind proxies."""
    if request is None:
        return None
    for header in IP_HEADERS:
        value = request.META.get(header)
        if value:
            return value.split(',')[0].strip()
    return None


def record_audit_event(
    *,
    action: str,
    entity_type: str,
    user: Optional[User] = None,
    entity_id: Optional[UUID] = None,
    details: Optional[dict] = None,
    severity: str = AuditSeverity.LOW,
    request=None,
) -> Optional[AuditLog]:
    """
    Append an audit entry.

    Returns:
        The AuditLog, or None when the write failed
    """
    try:
        with transaction.atomic():
            return AuditLog.objects.create(
                user=user,
                action=action,
                entity_type=entity_type,
                entity_id=entity_id,
                details=details or {},
                severity=severity,
                ip_address=get_client_ip(request),
                user_agent=request.META.get('HTTP_USER_AGENT', '') if request is not None else '',
            )
    except DatabaseError:
        logger.exception("Failed to write audit entry %s for %s %s", action, entity_type, entity_id)
        return None


def list_audit_logs(
    *,
    user: User,
    action: Optional[str] = None,
    entity_type: Optional[str] = None,
    severity: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    search: Optional[str] = None,
    page: int = 1,
    limit: int = 50,
) -> dict:
    """
    The user's own audit entries, newest first, one page at a time.

    Returns:
        Dict with ``results`` (list of AuditLog) and ``pagination``
    """
    queryset = AuditLog.objects.filter(user=user)

    if action:
        queryset = queryset.filter(action=action)
    if entity_type:
        queryset = queryset.filter(entity_type=entity_type)
    if severity:
        queryset = queryset.filter(severity=severity)
    if start_date:
        queryset = queryset.filter(created_at__date__gte=start_date)
    if end_date:
        queryset = queryset.filter(created_at__date__lte=end_date)
    if search:
        queryset = queryset.filter(
            Q(action__icontains=search) | Q(entity_type__icontains=search)
        )

    total = queryset.count()
    offset = (page - 1) * limit

    return {
        'results': list(queryset.order_by('-created_at')[offset:offset + limit]),
        'pagination': {
            'page': page,
            'limit': limit,
            'total': total,
            'totalPages': -(-total // limit),
        },
    }
