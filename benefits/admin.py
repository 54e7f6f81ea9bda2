"""
Django admin registrations for the benefits models.

Audit entries are shown read-only; they can be browsed here but never
edited or removed.
"""
from django.contrib import admin

from .models import AuditLog, Beneficiary, Card, Donation, Hospital, Household, Member, Plan, User


@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ('username', 'email', 'role', 'is_active', 'is_superuser')
    list_filter = ('role', 'is_active')
    search_fields = ('username', 'email', 'first_name', 'last_name')


@admin.register(Hospital)
class HospitalAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'license_no', 'phone', 'user')
    search_fields = ('name', 'license_no', 'user__username')


@admin.register(Plan)
class PlanAdmin(admin.ModelAdmin):
    list_display = ('id', 'name', 'price', 'duration_days')
    search_fields = ('name',)


class MemberInline(admin.TabularInline):
    model = Member
    extra = 0


@admin.register(Household)
class HouseholdAdmin(admin.ModelAdmin):
    list_display = ('id', 'head_name', 'phone', 'created_by', 'created_at')
    search_fields = ('head_name', 'phone', 'members__national_id')
    inlines = [MemberInline]


@admin.register(Card)
class CardAdmin(admin.ModelAdmin):
    list_display = ('card_number', 'household', 'plan', 'status', 'issue_date', 'expiry_date')
    list_filter = ('status', 'plan')
    search_fields = ('card_number', 'household__head_name', 'household__phone')
    # Card changes must go through the API so that they are audited
    readonly_fields = ('card_number', 'household', 'plan', 'status', 'issue_date', 'expiry_date',
                       'created_by', 'updated_by')


@admin.register(Beneficiary)
class BeneficiaryAdmin(admin.ModelAdmin):
    list_display = ('id', 'household', 'card', 'benefit_type', 'status', 'amount', 'start_date')
    list_filter = ('status', 'benefit_type')
    search_fields = ('household__head_name', 'card__card_number')


@admin.register(Donation)
class DonationAdmin(admin.ModelAdmin):
    list_display = ('id', 'donor_name', 'type', 'amount', 'payment_method', 'payment_date', 'hospital')
    list_filter = ('type', 'payment_method', 'donor_type')
    search_fields = ('donor_name', 'organization_name', 'payment_reference')


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ('timestamp', 'action', 'user', 'card')
    list_filter = ('action',)
    search_fields = ('user__username', 'card__card_number')

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
