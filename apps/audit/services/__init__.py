"""Audit app services layer."""

from .audit_logging import (
    get_client_ip,
    record_audit_event,
    list_audit_logs,
)

__all__ = [
    'get_client_ip',
    'record_audit_event',
    'list_audit_logs',
]
