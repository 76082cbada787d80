from django.urls import path
from . import views

urlpatterns = [
    path("", views.home, name="home"),
    path("register/", views.register, name="register"),
    path("sign-out/", views.sign_out, name="sign_out"),
]
