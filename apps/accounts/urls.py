from django.urls import path
from . import views

app_name = 'users'

urlpatterns = [
    path('signup/', views.signup, name='signup'),
    path('login/', views.login, name='login'),
    path('session/', views.session, name='session'),
    path('logout/', views.logout, name='logout'),
]
