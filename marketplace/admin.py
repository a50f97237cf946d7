from django.contrib import admin

from .models import (
    BindingTerms, BookingRequest, Contract, ContractClause, ContractSignature,
    ContractVersion, MaintenanceRequest, NegotiationMessage, QuoteSubmission, SellerReview
)


class QuoteSubmissionInline(admin.TabularInline):
    model = QuoteSubmission
    extra = 0
    fields = ('seller', 'price', 'estimated_duration', 'status', 'created_at')
    readonly_fields = ('seller', 'price', 'estimated_duration', 'status', 'created_at')


@admin.register(MaintenanceRequest)
class MaintenanceRequestAdmin(admin.ModelAdmin):
    list_display = ('title', 'buyer', 'category', 'city', 'status', 'assigned_seller',
                    'quote_count', 'created_at')
    list_filter = ('status', 'category', 'urgency', 'auto_closed', 'created_at')
    search_fields = ('title', 'description', 'city', 'buyer__email', 'assigned_seller__email')
    readonly_fields = ('id', 'created_at', 'updated_at', 'assigned_at', 'completed_at', 'warranty_expires_at')
    inlines = [QuoteSubmissionInline]

    fieldsets = (
        ('Request', {
            'fields': ('id', 'buyer', 'title', 'category', 'description', 'urgency', 'photos')
        }),
        ('Location & Budget', {
            'fields': ('location', 'city', 'preferred_start_date', 'estimated_budget_min', 'estimated_budget_max')
        }),
        ('Assignment', {
            'fields': ('status', 'assigned_seller', 'assigned_at')
        }),
        ('Completion & Warranty', {
            'fields': ('seller_marked_complete', 'seller_completion_date', 'buyer_marked_complete',
                       'buyer_completion_date', 'completed_at', 'warranty_expires_at',
                       'nudge_count', 'last_nudge_at', 'auto_closed'),
            'classes': ('collapse',)
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at'),
            'classes': ('collapse',)
        }),
    )

    def quote_count(self, obj):
        return obj.quotes.count()
    quote_count.short_description = 'Quotes'


@admin.register(QuoteSubmission)
class QuoteSubmissionAdmin(admin.ModelAdmin):
    list_display = ('request', 'seller', 'price', 'status', 'created_at')
    list_filter = ('status', 'created_at')
    search_fields = ('request__title', 'seller__email', 'proposal')
    readonly_fields = ('id', 'created_at', 'updated_at', 'previous_price', 'previous_duration', 'previous_proposal')


@admin.register(BookingRequest)
class BookingRequestAdmin(admin.ModelAdmin):
    list_display = ('short_id', 'buyer', 'seller', 'service_category', 'status', 'final_agreed_price', 'created_at')
    list_filter = ('status', 'service_category', 'preferred_time_slot', 'auto_closed', 'created_at')
    search_fields = ('job_description', 'buyer__email', 'seller__email', 'location_city')
    readonly_fields = ('id', 'created_at', 'updated_at', 'completed_at', 'warranty_expires_at')

    def short_id(self, obj):
        return str(obj.id)[:8]
    short_id.short_description = 'Booking'


class BindingTermsInline(admin.StackedInline):
    model = BindingTerms
    can_delete = False
    extra = 0


class ContractSignatureInline(admin.TabularInline):
    model = ContractSignature
    extra = 0
    can_delete = False
    readonly_fields = ('user', 'version', 'signature_hash', 'method', 'ip_address', 'signed_at')


@admin.register(Contract)
class ContractAdmin(admin.ModelAdmin):
    list_display = ('short_id', 'flow', 'buyer', 'seller', 'status', 'version', 'language_mode', 'created_at')
    list_filter = ('status', 'language_mode', 'created_at')
    search_fields = ('buyer__email', 'seller__email', 'content_hash')
    readonly_fields = ('id', 'signed_at_buyer', 'signed_at_seller', 'executed_at', 'content_hash',
                       'created_at', 'updated_at')
    inlines = [BindingTermsInline, ContractSignatureInline]

    def short_id(self, obj):
        return str(obj.id)[:8]
    short_id.short_description = 'Contract'


@admin.register(ContractClause)
class ContractClauseAdmin(admin.ModelAdmin):
    list_display = ('key', 'title_en', 'title_ar', 'display_order', 'is_active', 'requires_escrow')
    list_filter = ('is_active', 'requires_escrow')
    list_editable = ('display_order', 'is_active')
    search_fields = ('key', 'title_en', 'title_ar')


@admin.register(ContractVersion)
class ContractVersionAdmin(admin.ModelAdmin):
    list_display = ('contract', 'version', 'content_hash', 'changed_by', 'created_at')
    search_fields = ('contract__id', 'content_hash')
    readonly_fields = ('contract', 'version', 'html_snapshot', 'binding_terms_snapshot', 'content_hash',
                       'changed_by', 'created_at')


@admin.register(NegotiationMessage)
class NegotiationMessageAdmin(admin.ModelAdmin):
    list_display = ('sender', 'recipient', 'message_type', 'quote', 'booking', 'is_read', 'created_at')
    list_filter = ('message_type', 'is_read', 'created_at')
    search_fields = ('content', 'sender__email', 'recipient__email')
    readonly_fields = ('created_at',)


@admin.register(SellerReview)
class SellerReviewAdmin(admin.ModelAdmin):
    list_display = ('seller', 'buyer', 'rating', 'request', 'booking', 'created_at')
    list_filter = ('rating', 'created_at')
    search_fields = ('seller__email', 'buyer__email', 'review_text')
    readonly_fields = ('created_at', 'updated_at')
