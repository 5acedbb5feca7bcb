from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.audit.models import AuditAction
from apps.audit.services import record_audit_event
from apps.groups.serializers import AddMemberSerializer, UpdateMemberRoleSerializer

from .serializers import (
    SubscriptionSerializer,
    SubscriptionCreateSerializer,
    SubscriptionUpdateSerializer,
    PublicSubscriptionSerializer,
    PublicSubscriptionQuerySerializer,
    SubscriptionMemberSerializer,
)
from .services import (
    create_subscription,
    get_user_subscriptions,
    get_subscription_for_member,
    update_subscription,
    deactivate_subscription,
    add_member,
    remove_member,
    update_member_role,
    get_subscription_members,
    search_public_subscriptions,
    # Exceptions
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

UUID_PATTERN = r'[0-9a-fA-F-]{36}'


class SubscriptionViewSet(viewsets.GenericViewSet):
    """
    ViewSet for subscriptions and their member slots.

    list: Subscriptions the user owns or belongs to
    create: Create a subscription (creator becomes admin member)
    retrieve: Subscription detail (members only)
    update: Partial update (owner only)
    destroy: Deactivate (owner only)
    public: Marketplace of public, active subscriptions
    """

    serializer_class = SubscriptionSerializer
    lookup_value_regex = UUID_PATTERN

    def list(self, request):
        subscriptions = get_user_subscriptions(user=request.user)
        serializer = SubscriptionSerializer(subscriptions, many=True, context={'request': request})
        return Response({'subscriptions': serializer.data})

    @extend_schema(request=SubscriptionCreateSerializer, responses={200: SubscriptionSerializer})
    def create(self, request):
        serializer = SubscriptionCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            subscription = create_subscription(owner=request.user, **serializer.validated_data)
        except GroupNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        output_serializer = SubscriptionSerializer(subscription, context={'request': request})
        return Response({
            'message': 'Subscription created successfully',
            'subscription': output_serializer.data,
        })

    def retrieve(self, request, pk=None):
        try:
            subscription = get_subscription_for_member(subscription_id=pk, user=request.user)
        except SubscriptionNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        return Response(SubscriptionSerializer(subscription, context={'request': request}).data)

    @extend_schema(request=SubscriptionUpdateSerializer, responses={200: SubscriptionSerializer})
    def update(self, request, pk=None):
        """PUT applies a partial update; omitted fields keep their value."""
        serializer = SubscriptionUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            subscription = update_subscription(
                subscription_id=pk,
                user=request.user,
                **serializer.validated_data
            )
        except SubscriptionNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except InvalidCapacityError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(SubscriptionSerializer(subscription, context={'request': request}).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        try:
            deactivate_subscription(subscription_id=pk, user=request.user)
        except SubscriptionNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)

        return Response({'message': 'Subscription deactivated'})

    @extend_schema(
        parameters=[PublicSubscriptionQuerySerializer],
        responses={200: PublicSubscriptionSerializer(many=True)},
        description="Browse public subscriptions with free-text and price filters.",
    )
    @action(detail=False, methods=['get'])
    def public(self, request):
        query_serializer = PublicSubscriptionQuerySerializer(data=request.query_params)
        query_serializer.is_valid(raise_exception=True)
        params = query_serializer.validated_data

        data = search_public_subscriptions(
            search=params.get('search'),
            service=params.get('service'),
            max_price=params.get('maxPrice'),
            available_spots=params['availableSpots'],
            page=params['page'],
            limit=params['limit'],
        )

        return Response({
            'subscriptions': PublicSubscriptionSerializer(data['results'], many=True).data,
            'pagination': data['pagination'],
        })

    @extend_schema(
        methods=['POST'],
        request=AddMemberSerializer,
        responses={201: SubscriptionMemberSerializer},
    )
    @extend_schema(methods=['GET'], responses={200: SubscriptionMemberSerializer(many=True)})
    @action(detail=True, methods=['get', 'post'])
    def members(self, request, pk=None):
        """List member slots, or add an existing user (owner/admin)."""
        if request.method == 'GET':
            try:
                memberships = get_subscription_members(subscription_id=pk, user=request.user)
            except SubscriptionNotFoundError as e:
                return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
            except InsufficientPermissionsError as e:
                return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
            return Response({'members': SubscriptionMemberSerializer(memberships, many=True).data})

        serializer = AddMemberSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = add_member(
                subscription_id=pk,
                user_id=serializer.validated_data['userId'],
                role=serializer.validated_data['role'],
                added_by=request.user,
            )
        except (SubscriptionNotFoundError, UserNotFoundError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except (AlreadyMemberError, SubscriptionFullError) as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        record_audit_event(
            action=AuditAction.SUBSCRIPTION_MEMBER_ADDED,
            entity_type='subscription',
            entity_id=membership.subscription_id,
            user=request.user,
            details={'memberId': str(membership.user_id), 'role': membership.role},
            request=request,
        )
        return Response(SubscriptionMemberSerializer(membership).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=UpdateMemberRoleSerializer, responses={200: SubscriptionMemberSerializer})
    @action(
        detail=True,
        methods=['put', 'delete'],
        url_path=rf'members/(?P<user_id>{UUID_PATTERN})',
        url_name='member-detail',
    )
    def member_detail(self, request, pk=None, user_id=None):
        """Change a member's role (PUT) or remove them (DELETE)."""
        if request.method == 'DELETE':
            try:
                remove_member(subscription_id=pk, user_id=user_id, removed_by=request.user)
            except (SubscriptionNotFoundError, NotMemberError) as e:
                return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
            except InsufficientPermissionsError as e:
                return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
            except CannotRemoveOwnerError as e:
                return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
            return Response({'message': 'Member removed successfully'})

        serializer = UpdateMemberRoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            membership = update_member_role(
                subscription_id=pk,
                user_id=user_id,
                new_role=serializer.validated_data['role'],
                updated_by=request.user,
            )
        except (SubscriptionNotFoundError, NotMemberError) as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except InsufficientPermissionsError as e:
            return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
        except CannotChangeOwnerRoleError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(SubscriptionMemberSerializer(membership).data)
