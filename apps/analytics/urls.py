from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # Dashboard statistics for the current user
    path('dashboard/', views.dashboard, name='dashboard'),

    # Export report rows (optionally one month)
    path('report/', views.report, name='report'),
]
