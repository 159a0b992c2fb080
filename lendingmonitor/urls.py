"""
URL configuration for the lendingmonitor project.
"""

from django.contrib import admin
from django.urls import path, include

urlpatterns = [
    # Django admin
    path('admin/', admin.site.urls),

    # Accounts app – authentication & user approval
    path('api/auth/', include(('accounts.urls', 'accounts'), namespace='accounts')),

    # Loans app – loans, payments, remarks, collectors
    path('api/', include(('loans.urls', 'loans'), namespace='loans')),

    # Reports app
    path('api/reports/', include(('reports.urls', 'reports'), namespace='reports')),
]
