# reports/urls.py

from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    path('aging/', views.aging_report, name='aging'),
    path('performance/', views.performance_report, name='performance'),
    path('monthly/', views.monthly_report, name='monthly'),
    path('masterlist/', views.masterlist_report, name='masterlist'),
    path('collection-summary/', views.collection_summary_report, name='collection_summary'),
]
