from django.contrib import admin

from orders.models import Booking, CourseEnrollment, DownloadGrant, Order, OrderItem


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ["item_type", "item_id", "title", "unit_price_cents", "quantity"]
    can_delete = False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ["id", "user", "status", "total_cents", "created_at", "completed_at"]
    list_filter = ["status"]
    search_fields = ["id", "user__email", "payment_reference"]
    # Status changes go through the order service, never through the admin form.
    readonly_fields = ["status", "subtotal_cents", "tax_cents", "total_cents", "payment_reference", "completed_at"]
    inlines = [OrderItemInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["id", "event", "user", "status", "attendees", "created_at"]
    list_filter = ["status", "event"]
    readonly_fields = ["status"]


@admin.register(CourseEnrollment)
class CourseEnrollmentAdmin(admin.ModelAdmin):
    list_display = ["user", "course", "enrolled_at"]
    list_filter = ["course"]


@admin.register(DownloadGrant)
class DownloadGrantAdmin(admin.ModelAdmin):
    list_display = ["user", "product", "download_limit", "granted_at", "revoked_at"]
    list_filter = ["product"]
