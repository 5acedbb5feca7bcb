"""
Subscriptions app services layer.

All membership changes lock the subscription row and keep
``current_members`` in step with the membership rows.
"""

from .exceptions import (
    SubscriptionsServiceError,
    SubscriptionNotFoundError,
    GroupNotFoundError,
    UserNotFoundError,
    SubscriptionFullError,
    InvalidCapacityError,
    AlreadyMemberError,
    NotMemberError,
    CannotRemoveOwnerError,
    CannotChangeOwnerRoleError,
    InsufficientPermissionsError,
)

from .subscription_management import (
    create_subscription,
    get_user_subscriptions,
    get_subscription_for_member,
    update_subscription,
    deactivate_subscription,
)

from .membership_management import (
    lock_subscription,
    admit_member,
    add_member,
    remove_member,
    update_member_role,
    get_subscription_members,
)

from .public_listing import (
    search_public_subscriptions,
)


__all__ = [
    # Exceptions
    'SubscriptionsServiceError',
    'SubscriptionNotFoundError',
    'GroupNotFoundError',
    'UserNotFoundError',
    'SubscriptionFullError',
    'InvalidCapacityError',
    'AlreadyMemberError',
    'NotMemberError',
    'CannotRemoveOwnerError',
    'CannotChangeOwnerRoleError',
    'InsufficientPermissionsError',

    # Subscription Management
    'create_subscription',
    'get_user_subscriptions',
    'get_subscription_for_member',
    'update_subscription',
    'deactivate_subscription',

    # Membership Management
    'lock_subscription',
    'admit_member',
    'add_member',
    'remove_member',
    'update_member_role',
    'get_subscription_members',

    # Public listing
    'search_public_subscriptions',
]
