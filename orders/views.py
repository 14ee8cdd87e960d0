import logging

from django.http import FileResponse, Http404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from coupons.exceptions import CouponError
from products.exceptions import InventoryError
from users.permissions import IsAdmin, IsAdminOrSeller

from .exceptions import OrderError
from .models import Order
from .receipts import build_receipt
from .serializers import (
    CancelOrderSerializer,
    CreateOrderSerializer,
    OrderSerializer,
    PaymentStatusSerializer,
    StatusUpdateSerializer,
)
from .services import cancel_order, create_order, start_payment, update_payment_status, update_status

logger = logging.getLogger(__name__)

BUSINESS_ERRORS = (OrderError, InventoryError, CouponError)


def error_response(error):
    return Response(
        {'success': False, 'code': error.code, 'message': error.message},
        status=error.status_code
    )


def invalid_response(serializer):
    return Response({'success': False, 'errors': serializer.errors}, status=status.HTTP_400_BAD_REQUEST)


def not_found():
    return Response({'success': False, 'message': 'Order not found'}, status=status.HTTP_404_NOT_FOUND)


def visible_orders(user):
    orders = Order.objects.prefetch_related('statusHistory')
    if user.is_admin or user.is_seller:
        return orders
    return orders.filter(user=user)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def orders(request):
    if request.method == 'GET':
        serializer = OrderSerializer(visible_orders(request.user), many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    serializer = CreateOrderSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_response(serializer)

    try:
        order = create_order(request.user, serializer.validated_data)
    except BUSINESS_ERRORS as e:
        logger.info("Order rejected for user %s: %s", request.user.pk, e.code)
        return error_response(e)

    client_secret = start_payment(order)
    return Response({
        'success': True,
        'order': {
            'id': order.id,
            'orderNumber': order.orderNumber,
            'status': order.status,
            'total': order.total,
            'paymentIntent': client_secret,
        }
    }, status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def getOrder(request, orderID):
    """Get details of a specific order"""
    try:
        order = visible_orders(request.user).get(id=orderID)
    except Order.DoesNotExist:
        return not_found()
    return Response(OrderSerializer(order).data, status=status.HTTP_200_OK)


# Move an order through fulfilment (admin / seller)
@api_view(['PUT'])
@permission_classes([IsAdminOrSeller])
def updateOrderStatus(request, orderID):
    try:
        order = Order.objects.get(id=orderID)
    except Order.DoesNotExist:
        return not_found()

    serializer = StatusUpdateSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_response(serializer)

    try:
        order = update_status(
            order,
            serializer.validated_data['status'],
            note=serializer.validated_data.get('note', ''),
            actor=request.user
        )
    except BUSINESS_ERRORS as e:
        return error_response(e)
    return Response({'success': True, 'order': OrderSerializer(order).data}, status=status.HTTP_200_OK)


# Customer cancels their own order
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def cancelOrder(request, orderID):
    try:
        order = Order.objects.get(id=orderID, user=request.user)
    except Order.DoesNotExist:
        return not_found()

    serializer = CancelOrderSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_response(serializer)

    try:
        order = cancel_order(order, request.user, serializer.validated_data.get('reason', ''))
    except BUSINESS_ERRORS as e:
        return error_response(e)
    return Response({'success': True, 'order': OrderSerializer(order).data}, status=status.HTTP_200_OK)


@api_view(['PUT'])
@permission_classes([IsAdmin])
def updatePaymentStatus(request, orderID):
    try:
        order = Order.objects.get(id=orderID)
    except Order.DoesNotExist:
        return not_found()

    serializer = PaymentStatusSerializer(data=request.data)
    if not serializer.is_valid():
        return invalid_response(serializer)

    try:
        order = update_payment_status(order, serializer.validated_data['paymentStatus'])
    except BUSINESS_ERRORS as e:
        return error_response(e)
    return Response({'success': True, 'order': OrderSerializer(order).data}, status=status.HTTP_200_OK)


# Download PDF Receipt
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def downloadReceipt(request, orderID):
    try:
        order = Order.objects.get(id=orderID, user=request.user)
    except Order.DoesNotExist:
        raise Http404("Order not found")

    buffer = build_receipt(order)
    return FileResponse(buffer, as_attachment=True, filename=f"{order.orderNumber}_Receipt.pdf")
