from django.urls import path

from .views import *

urlpatterns = [
    path('', orders, name='orders'),
    path('<int:orderID>/', getOrder, name='getOrder'),
    path('<int:orderID>/status/', updateOrderStatus, name='updateOrderStatus'),
    path('<int:orderID>/cancel/', cancelOrder, name='cancelOrder'),
    path('<int:orderID>/payment/', updatePaymentStatus, name='updatePaymentStatus'),
    path('<int:orderID>/receipt/', downloadReceipt, name='downloadReceipt'),
]
