"""
Service layer unit tests for access requests.

Tests cover:
- Request creation preconditions
- Approval ordering of checks and its three coupled writes
- Two approvals racing for the last free slot
"""

import pytest
import threading
from datetime import timedelta
from decimal import Decimal
from django.db import connection
from django.test import TransactionTestCase
from django.utils import timezone

from apps.accounts.models import User
from apps.access_requests.models import AccessRequest, AccessRequestStatus
from apps.access_requests.services import (
    create_access_request,
    list_access_requests,
    approve_access_request,
    reject_access_request,
    AccessRequestNotFoundError,
    InsufficientPermissionsError,
    RequestAlreadyProcessedError,
    AlreadyMemberError,
    SubscriptionFullError,
    SubscriptionNotFoundError,
)
from apps.groups.models import MemberRole
from apps.subscriptions.models import Subscription, SubscriptionMember
from apps.subscriptions.services import create_subscription, add_member


@pytest.mark.django_db
class TestCreateAccessRequest:

    def test_inactive_subscription_not_found(self, public_subscription, other_user):
        public_subscription.is_active = False
        public_subscription.save()

        with pytest.raises(SubscriptionNotFoundError):
            create_access_request(subscription_id=public_subscription.id, user=other_user)

    def test_member_cannot_request(self, user, member_user, subscription_factory):
        subscription = subscription_factory(user, members=[member_user], is_public=True)

        with pytest.raises(AlreadyMemberError):
            create_access_request(subscription_id=subscription.id, user=member_user)

    def test_admins_are_notified(self, public_subscription, user, member_user, other_user):
        add_member(
            subscription_id=public_subscription.id,
            user_id=member_user.id,
            added_by=user,
            role=MemberRole.ADMIN,
        )

        access_request = create_access_request(subscription_id=public_subscription.id, user=other_user)

        notified = set(
            access_request.subscription.notifications.values_list('user__email', flat=True)
        )
        assert notified == {user.email, member_user.email}


@pytest.mark.django_db
class TestReview:

    def test_permission_checked_before_status(self, public_subscription, user, other_user):
        access_request = create_access_request(subscription_id=public_subscription.id, user=other_user)
        reject_access_request(request_id=access_request.id, reviewer=user)

        with pytest.raises(InsufficientPermissionsError):
            approve_access_request(request_id=access_request.id, reviewer=other_user)

    def test_admin_member_cannot_approve(self, public_subscription, user, member_user, other_user):
        add_member(
            subscription_id=public_subscription.id,
            user_id=member_user.id,
            added_by=user,
            role=MemberRole.ADMIN,
        )
        access_request = create_access_request(subscription_id=public_subscription.id, user=other_user)

        with pytest.raises(InsufficientPermissionsError):
            approve_access_request(request_id=access_request.id, reviewer=member_user)

    def test_requester_joined_meanwhile(self, public_subscription, user, other_user):
        access_request = create_access_request(subscription_id=public_subscription.id, user=other_user)
        add_member(subscription_id=public_subscription.id, user_id=other_user.id, added_by=user)

        with pytest.raises(AlreadyMemberError):
            approve_access_request(request_id=access_request.id, reviewer=user)

        access_request.refresh_from_db()
        assert access_request.is_pending

    def test_approve_records_reviewer(self, public_subscription, user, other_user):
        access_request = create_access_request(subscription_id=public_subscription.id, user=other_user)

        approved = approve_access_request(request_id=access_request.id, reviewer=user, admin_response='ok')

        assert approved.responded_by == user
        assert approved.responded_at is not None
        membership = SubscriptionMember.objects.get(subscription=public_subscription, user=other_user)
        assert membership.role == MemberRole.MEMBER

    def test_double_processing(self, public_subscription, user, other_user):
        access_request = create_access_request(subscription_id=public_subscription.id, user=other_user)
        approve_access_request(request_id=access_request.id, reviewer=user)

        with pytest.raises(RequestAlreadyProcessedError):
            approve_access_request(request_id=access_request.id, reviewer=user)
        with pytest.raises(RequestAlreadyProcessedError):
            reject_access_request(request_id=access_request.id, reviewer=user)

    def test_missing_request(self, user):
        with pytest.raises(AccessRequestNotFoundError):
            reject_access_request(request_id='00000000-0000-0000-0000-000000000000', reviewer=user)

    def test_list_orders_newest_first(self, public_subscription, user, user_factory):
        first = create_access_request(subscription_id=public_subscription.id, user=user_factory('a@example.com'))
        second = create_access_request(subscription_id=public_subscription.id, user=user_factory('b@example.com'))
        AccessRequest.objects.filter(id=first.id).update(requested_at=timezone.now() - timedelta(hours=1))

        received = list(list_access_requests(user=user, request_type='received'))

        assert [r.id for r in received] == [second.id, first.id]


class TestApprovalRace(TransactionTestCase):
    """
    Two owners' sessions approving different requests for one last slot.

    TransactionTestCase is required so each thread commits for real.
    """

    def setUp(self):
        self.owner = User.objects.create_user(email='owner@test.com', password='TestPass123!')
        self.subscription = create_subscription(
            owner=self.owner,
            name='Last Seat',
            service_name='Spotify',
            total_price=Decimal('20.00'),
            max_members=2,
            renewal_date=timezone.now() + timedelta(days=30),
            is_public=True,
        )
        self.requests = [
            AccessRequest.objects.create(
                subscription=self.subscription,
                user=User.objects.create_user(email=f'req{i}@test.com', password='TestPass123!'),
            )
            for i in range(2)
        ]

    def test_only_one_approval_wins(self):
        outcomes = []

        def approve(access_request):
            try:
                approve_access_request(request_id=access_request.id, reviewer=self.owner)
                outcomes.append('approved')
            except SubscriptionFullError:
                outcomes.append('full')
            except Exception as e:
                # SQLite may refuse a concurrent writer outright
                outcomes.append(f'error: {e}')
            finally:
                connection.close()

        threads = [threading.Thread(target=approve, args=(r,)) for r in self.requests]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        subscription = Subscription.objects.get(id=self.subscription.id)
        rows = SubscriptionMember.objects.filter(subscription=subscription).count()
        approved = AccessRequest.objects.filter(status=AccessRequestStatus.APPROVED).count()

        assert outcomes.count('approved') <= 1
        assert rows == subscription.current_members <= subscription.max_members
        assert approved == rows - 1
