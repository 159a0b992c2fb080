# accounts/urls.py
from django.urls import path
from . import views

app_name = 'accounts'

urlpatterns = [
    # =============================================================================
    # AUTHENTICATION URLS
    # =============================================================================
    path('login/', views.login_view, name='login'),
    path('logout/', views.logout_view, name='logout'),
    path('register/', views.register_view, name='register'),
    path('me/', views.me_view, name='me'),

    # =============================================================================
    # USER MANAGEMENT URLS (Admin)
    # =============================================================================
    path('pending-users/', views.pending_users, name='pending_users'),
    path('users/<int:user_id>/approve/', views.approve_user, name='approve_user'),
]
