from django.contrib import admin
from .models import Event, EventRecord

@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ('title', 'event_type', 'date', 'owner', 'created_at')
    list_filter = ('event_type',)
    search_fields = ('title', 'description', 'location')
    readonly_fields = ('id', 'created_at')


@admin.register(EventRecord)
class EventRecordAdmin(admin.ModelAdmin):
    list_display = ('id', 'event', 'type', 'file_name', 'uploaded_at')
    list_filter = ('type',)
    readonly_fields = ('id', 'uploaded_at')
