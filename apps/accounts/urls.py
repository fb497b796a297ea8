from django.urls import path
from . import views

app_name = 'accounts'

# Mounted under /api/auth/; token refresh lives in config/urls.py
urlpatterns = [
    path('register/', views.register, name='register'),
    path('login/', views.login, name='login'),
    path('user/', views.current_user, name='current-user'),
]
