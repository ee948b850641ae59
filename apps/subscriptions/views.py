from django.http import HttpResponse
from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.response import Response
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema

from apps.payments.services import PaymentsServiceError, SymbolSpaceExhaustedError, UniquenessViolationError

from .serializers import (
    SubscriptionPlanSerializer,
    UserSubscriptionSerializer,
    UpgradeSubscriptionSerializer,
    AdminSubscriptionActionSerializer,
    SubscriptionPaymentSerializer,
)
from .services import (
    get_active_plans,
    get_current_subscription,
    upgrade_subscription,
    activate_subscription,
    cancel_subscription,
    get_subscription_payment_descriptor,
    render_subscription_qr,
    PlanNotFoundError,
    SubscriptionNotFoundError,
    InvalidSubscriptionStateError,
)


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


def _state_error(e):
    return Response(
        {'error': str(e), 'current_status': e.current_status},
        status=status.HTTP_400_BAD_REQUEST
    )


@extend_schema(
    responses={200: SubscriptionPlanSerializer(many=True)},
    description="List plans currently offered.",
    tags=['subscriptions'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def plan_list(request):
    plans = get_active_plans()
    return Response(SubscriptionPlanSerializer(plans, many=True).data)


@extend_schema(
    responses={200: UserSubscriptionSerializer, 404: ErrorResponseSerializer},
    description="Get the current user's subscription.",
    tags=['subscriptions'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_subscription(request):
    subscription = get_current_subscription(user=request.user)
    if subscription is None:
        return Response({'error': 'No subscription found'}, status=status.HTTP_404_NOT_FOUND)
    return Response(UserSubscriptionSerializer(subscription).data)


@extend_schema(
    request=UpgradeSubscriptionSerializer,
    responses={
        200: UserSubscriptionSerializer,
        404: ErrorResponseSerializer,
        409: ErrorResponseSerializer,
    },
    description=(
        "Switch to another plan. Free plans are active immediately; paid plans "
        "wait for a bank transfer with the returned variable symbol."
    ),
    tags=['subscriptions'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def upgrade(request):
    serializer = UpgradeSubscriptionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        subscription = upgrade_subscription(user=request.user, **serializer.validated_data)
    except PlanNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except (SymbolSpaceExhaustedError, UniquenessViolationError) as e:
        return Response({'error': str(e)}, status=status.HTTP_409_CONFLICT)

    return Response(UserSubscriptionSerializer(subscription).data)


@extend_schema(
    responses={
        200: SubscriptionPaymentSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Payment details (SPAYD) of the subscription awaiting payment.",
    tags=['subscriptions'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_payment(request):
    try:
        descriptor = get_subscription_payment_descriptor(user=request.user)
    except SubscriptionNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InvalidSubscriptionStateError as e:
        return _state_error(e)
    except PaymentsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(SubscriptionPaymentSerializer(descriptor).data)


@extend_schema(
    responses={(200, 'image/png'): OpenApiTypes.BINARY, 400: ErrorResponseSerializer},
    description="QR code of the subscription payment as PNG.",
    tags=['subscriptions'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def current_payment_qr(request):
    try:
        png = render_subscription_qr(user=request.user)
    except SubscriptionNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InvalidSubscriptionStateError as e:
        return _state_error(e)
    except PaymentsServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return HttpResponse(png, content_type='image/png')


@extend_schema(
    request=AdminSubscriptionActionSerializer,
    responses={
        200: UserSubscriptionSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Admin: confirm the bank transfer and activate the subscription.",
    tags=['subscriptions'],
)
@api_view(['POST'])
@permission_classes([IsAdminUser])
def activate(request, pk):
    serializer = AdminSubscriptionActionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        subscription = activate_subscription(
            subscription_id=pk,
            admin_user=request.user,
            reason=serializer.validated_data['reason']
        )
    except SubscriptionNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InvalidSubscriptionStateError as e:
        return _state_error(e)

    return Response(UserSubscriptionSerializer(subscription).data)


@extend_schema(
    request=AdminSubscriptionActionSerializer,
    responses={
        200: UserSubscriptionSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Admin: cancel a subscription.",
    tags=['subscriptions'],
)
@api_view(['POST'])
@permission_classes([IsAdminUser])
def cancel(request, pk):
    serializer = AdminSubscriptionActionSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        subscription = cancel_subscription(
            subscription_id=pk,
            admin_user=request.user,
            reason=serializer.validated_data['reason']
        )
    except SubscriptionNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
    except InvalidSubscriptionStateError as e:
        return _state_error(e)

    return Response(UserSubscriptionSerializer(subscription).data)
