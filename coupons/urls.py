from django.urls import path

from .views import *

urlpatterns = [
    path('', coupons, name='coupons'),
    path('validate/', validateCoupon, name='validateCoupon'),
    path('active/', getActiveCoupons, name='getActiveCoupons'),
    path('<int:id>/', couponDetail, name='couponDetail'),
]
