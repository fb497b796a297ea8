from django.urls import path
from . import views

app_name = 'analytics'

urlpatterns = [
    # Spending insights for the current user
    path('insights/', views.insights, name='insights'),
]
