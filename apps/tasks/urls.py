# apps/tasks/urls.py

from django.urls import path
from . import views

app_name = 'tasks'

urlpatterns = [
    path('', views.task_collection, name='collection'),

    # === READ MODELS ===
    path('dashboard/', views.task_dashboard, name='dashboard'),
    path('filter/', views.task_filter, name='filter'),

    path('<int:task_id>/', views.task_detail, name='detail'),
]
