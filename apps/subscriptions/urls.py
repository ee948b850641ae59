from django.urls import path
from . import views

app_name = 'subscriptions'

urlpatterns = [
    path('plans/', views.plan_list, name='plan-list'),
    path('current/', views.current_subscription, name='current'),
    path('current/payment/', views.current_payment, name='current-payment'),
    path('current/payment/qr/', views.current_payment_qr, name='current-payment-qr'),
    path('upgrade/', views.upgrade, name='upgrade'),

    # Admin
    path('<uuid:pk>/activate/', views.activate, name='activate'),
    path('<uuid:pk>/cancel/', views.cancel, name='cancel'),
]
