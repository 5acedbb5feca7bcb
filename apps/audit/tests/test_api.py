"""
API tests for the audit log endpoint.
"""

import pytest
from django.urls import reverse
from rest_framework import status

from apps.audit.models import AuditAction, AuditSeverity
from apps.audit.services import record_audit_event


@pytest.mark.django_db
class TestAuditLogsAPI:

    def test_list(self, authenticated_client, user, subscription):
        record_audit_event(
            action=AuditAction.CREDENTIAL_CREATED,
            entity_type='subscription',
            entity_id=subscription.id,
            user=user,
            details={'source': 'test'},
            severity=AuditSeverity.HIGH,
        )

        response = authenticated_client.get(reverse('audit:logs'))

        assert response.status_code == status.HTTP_200_OK
        log = response.data['logs'][0]
        assert log['action'] == 'credential_created'
        assert log['entityId'] == str(subscription.id)
        assert log['details'] == {'source': 'test'}
        assert response.data['pagination']['total'] == 1

    def test_filter_by_severity(self, authenticated_client, user):
        record_audit_event(action=AuditAction.GROUP_MEMBER_ADDED, entity_type='group', user=user)

        response = authenticated_client.get(reverse('audit:logs'), {'severity': 'high'})

        assert response.data['logs'] == []

    def test_invalid_date_range(self, authenticated_client):
        response = authenticated_client.get(
            reverse('audit:logs'), {'startDate': '2025-02-01', 'endDate': '2025-01-01'}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert 'startDate' in response.data['details']

    def test_limit_bounds(self, authenticated_client):
        response = authenticated_client.get(reverse('audit:logs'), {'limit': 500})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_requires_auth(self, api_client):
        response = api_client.get(reverse('audit:logs'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
