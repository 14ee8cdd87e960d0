# views.py
import logging

from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from users.permissions import IsAdmin

from .discounts import calculate_discount, validate_coupon
from .exceptions import CouponError
from .models import Coupon
from .serializers import CouponSerializer, PublicCouponSerializer, ValidateCouponSerializer

logger = logging.getLogger(__name__)


def coupon_error_response(error):
    return Response(
        {'success': False, 'code': error.code, 'message': error.message},
        status=error.status_code
    )


def invalid_response(serializer):
    return Response({'success': False, 'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)


# Check a coupon against the current cart (authenticated users)
# Nothing is recorded here, usage is written when the order is placed.
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def validateCoupon(request):
    serializer = ValidateCouponSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_response(serializer)

    data = serializer.validated_data
    try:
        coupon = validate_coupon(data['code'], request.user, data['cartTotal'], data.get('items'))
    except CouponError as e:
        logger.info("Coupon %s rejected for user %s: %s", data['code'], request.user.pk, e.code)
        return coupon_error_response(e)

    discount = calculate_discount(coupon, data['cartTotal'])
    return Response({
        'success': True,
        'coupon': {
            'code': coupon.code,
            'type': coupon.type,
            'value': coupon.value,
            'discount': discount.amount,
            'description': coupon.description,
        }
    }, status=status.HTTP_200_OK)


# List or create coupons (admin only)
@api_view(['GET', 'POST'])
@permission_classes([IsAdmin])
def coupons(request):
    if request.method == 'GET':
        serializer = CouponSerializer(Coupon.objects.all(), many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    serializer = CouponSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_response(serializer)

    coupon = serializer.save(createdBy=request.user)
    logger.info("Coupon %s created by %s", coupon.code, request.user.email)
    return Response(serializer.data, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([AllowAny])
def getActiveCoupons(request):
    now = timezone.now()
    active = Coupon.objects.filter(isActive=True, startDate__lte=now, endDate__gte=now)
    serializer = PublicCouponSerializer(active, many=True)
    return Response(serializer.data, status=status.HTTP_200_OK)


# Get, update or deactivate a single coupon (admin only)
@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAdmin])
def couponDetail(request, id):
    try:
        coupon = Coupon.objects.get(id=id)
    except Coupon.DoesNotExist:
        return Response({'success': False, 'message': 'Coupon not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'GET':
        return Response(CouponSerializer(coupon).data, status=status.HTTP_200_OK)

    if request.method == 'DELETE':
        # coupons are never deleted, the usedBy log keeps referencing them
        coupon.isActive = False
        coupon.save(update_fields=['isActive', 'updatedAt'])
        logger.info("Coupon %s deactivated by %s", coupon.code, request.user.email)
        return Response({'success': True, 'message': 'Coupon deactivated successfully'}, status=status.HTTP_200_OK)

    serializer = CouponSerializer(coupon, data=request.data, partial=True)
    if not serializer.is_valid():
        return invalid_response(serializer)
    serializer.save()
    return Response(serializer.data, status=status.HTTP_200_OK)
