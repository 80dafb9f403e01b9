from django.contrib import admin

from catalog.models import Course, DigitalProduct, Event


@admin.register(Course)
class CourseAdmin(admin.ModelAdmin):
    list_display = ["title", "price_cents", "is_published", "enrollment_count", "deleted_at"]
    list_filter = ["is_published"]
    search_fields = ["title", "slug"]
    prepopulated_fields = {"slug": ["title"]}


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "starts_at", "capacity", "booked_count", "is_published"]
    list_filter = ["is_published"]
    search_fields = ["title", "venue_name"]
    readonly_fields = ["booked_count"]


@admin.register(DigitalProduct)
class DigitalProductAdmin(admin.ModelAdmin):
    list_display = ["title", "price_cents", "is_published", "download_count"]
    list_filter = ["is_published"]
    search_fields = ["title", "slug"]
    readonly_fields = ["download_count"]
