from django.urls import path

from . import views

app_name = 'monitoring'

urlpatterns = [
    path('health/', views.HealthView.as_view(), name='health'),
    path('metrics/', views.MetricsView.as_view(), name='metrics'),
]
