# loans/urls.py

"""
URL Configuration for Loans Module

Mounted under /api/. All record URLs use UUID primary keys.
"""

from django.urls import path
from . import views

app_name = 'loans'

urlpatterns = [
    # =============================================================================
    # LOANS
    # =============================================================================
    path('loans/', views.loan_list, name='loan_list'),
    path('loans/<uuid:pk>/', views.loan_detail, name='loan_detail'),
    path('loans/<uuid:pk>/history/', views.loan_history, name='loan_history'),

    # =============================================================================
    # PAYMENTS & REMARKS
    # =============================================================================
    path('loans/<uuid:pk>/payments/', views.loan_payments, name='loan_payments'),
    path('loans/<uuid:pk>/remarks/', views.loan_remarks, name='loan_remarks'),

    # =============================================================================
    # COLLECTORS
    # =============================================================================
    path('collectors/', views.collector_list, name='collector_list'),
    path('collectors/<uuid:pk>/', views.collector_detail, name='collector_detail'),
]
