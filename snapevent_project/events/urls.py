from django.urls import path
from . import views

urlpatterns = [
    path("", views.event_list, name="event_list"),
    path("new/", views.new_event, name="new_event"),
    path("create/", views.create_event, name="create_event"),
    path("<uuid:event_id>/qr/", views.event_qr, name="event_qr"),
    path("<uuid:event_id>/upload/", views.upload_page, name="upload_page"),
    path("<uuid:event_id>/upload/photos/", views.upload_photos, name="upload_photos"),
    path("<uuid:event_id>/upload/message/", views.post_message, name="post_message"),
    path("<uuid:event_id>/gallery/", views.gallery, name="gallery"),
    path(
        "<uuid:event_id>/gallery/select/<uuid:record_id>/",
        views.toggle_selection,
        name="toggle_selection",
    ),
    path(
        "<uuid:event_id>/gallery/download/",
        views.download_selected,
        name="download_selected",
    ),
]
