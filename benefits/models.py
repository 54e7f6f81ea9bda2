"""
Database models for the health card program.

A household registered by an office agent holds at most one card, which
ties it to a priced plan and a validity window.  Hospitals record
benefit claims (beneficiary records) against active cards, and every
card mutation is traced in the append-only :class:`AuditLog`.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Login account with one of the three program roles."""
    ROLE_ADMIN = 'ADMIN'
    ROLE_OFFICE_AGENT = 'OFFICE_AGENT'
    ROLE_HOSPITAL_USER = 'HOSPITAL_USER'
    ROLE_CHOICES = [
        (ROLE_ADMIN, 'Administrator'),
        (ROLE_OFFICE_AGENT, 'Office agent'),
        (ROLE_HOSPITAL_USER, 'Hospital user'),
    ]
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_OFFICE_AGENT, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def display_name(self) -> str:
        return self.get_full_name() or self.username

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class Hospital(models.Model):
    """A partner hospital and the HOSPITAL_USER account it signs in with."""
    user = models.OneToOneField(User, on_delete=models.CASCADE, related_name='hospital')
    name = models.CharField(max_length=255)
    address = models.TextField(blank=True)
    phone = models.CharField(max_length=32, blank=True)
    license_no = models.CharField(max_length=64, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.license_no})"


class Plan(models.Model):
    """A priced benefit package; ``duration_days`` drives card expiry."""
    name = models.CharField(max_length=128, unique=True)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    duration_days = models.PositiveIntegerField()
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.name} ({self.duration_days}d)"


class Household(models.Model):
    head_name = models.CharField(max_length=255)
    address = models.TextField()
    # Card lookup matches the phone exactly
    phone = models.CharField(max_length=32, db_index=True)
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='households'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.head_name} ({self.phone})"


class Member(models.Model):
    RELATION_CHOICES = [
        ('HEAD', 'Head'),
        ('SPOUSE', 'Spouse'),
        ('FATHER', 'Father'),
        ('MOTHER', 'Mother'),
        ('SON', 'Son'),
        ('DAUGHTER', 'Daughter'),
        ('OTHER', 'Other'),
    ]
    household = models.ForeignKey(Household, on_delete=models.CASCADE, related_name='members')
    first_name = models.CharField(max_length=128)
    last_name = models.CharField(max_length=128, blank=True)
    dob = models.DateField()
    relation = models.CharField(max_length=10, choices=RELATION_CHOICES)
    national_id = models.CharField(max_length=32, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def __str__(self) -> str:
        return f"{self.full_name} ({self.relation})"


class Card(models.Model):
    """The health card issued to a household.

    ``household`` is one-to-one so the database itself enforces the
    one-card-per-household rule, and ``card_number`` carries a unique
    constraint that backs the generator's collision check.
    """
    STATUS_ACTIVE = 'ACTIVE'
    STATUS_SUSPENDED = 'SUSPENDED'
    STATUS_EXPIRED = 'EXPIRED'
    STATUS_CANCELLED = 'CANCELLED'
    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_SUSPENDED, 'Suspended'),
        (STATUS_EXPIRED, 'Expired'),
        (STATUS_CANCELLED, 'Cancelled'),
    ]
    household = models.OneToOneField(Household, on_delete=models.CASCADE, related_name='card')
    plan = models.ForeignKey(Plan, on_delete=models.PROTECT, related_name='cards')
    card_number = models.CharField(max_length=16, unique=True)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_ACTIVE, db_index=True)
    issue_date = models.DateField()
    expiry_date = models.DateField(db_index=True)
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='cards_created'
    )
    updated_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='cards_updated'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.card_number} ({self.status})"


class Beneficiary(models.Model):
    """A benefit requested or disbursed against a card for some members."""
    TYPE_CHOICES = [
        ('MEDICAL_CHECKUP', 'Medical checkup'),
        ('HOSPITALIZATION', 'Hospitalization'),
        ('SURGERY', 'Surgery'),
        ('MEDICATION', 'Medication'),
        ('CONSULTATION', 'Consultation'),
        ('OTHER', 'Other'),
    ]
    STATUS_PENDING = 'PENDING'
    STATUS_APPROVED = 'APPROVED'
    STATUS_REJECTED = 'REJECTED'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_APPROVED, 'Approved'),
        (STATUS_REJECTED, 'Rejected'),
        (STATUS_COMPLETED, 'Completed'),
    ]
    TERMINAL_STATUSES = frozenset({STATUS_REJECTED, STATUS_COMPLETED})

    household = models.ForeignKey(Household, on_delete=models.CASCADE, related_name='beneficiaries')
    card = models.ForeignKey(Card, on_delete=models.RESTRICT, related_name='beneficiaries')
    benefit_type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    status = models.CharField(max_length=10, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    description = models.TextField(blank=True)
    start_date = models.DateField()
    end_date = models.DateField(null=True, blank=True)
    members = models.ManyToManyField(Member, related_name='benefits')
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='beneficiaries_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    @property
    def is_terminal(self) -> bool:
        return self.status in self.TERMINAL_STATUSES

    def __str__(self) -> str:
        return f"{self.benefit_type} for household {self.household_id} ({self.status})"


class Donation(models.Model):
    DONOR_TYPE_CHOICES = [
        ('INDIVIDUAL', 'Individual'),
        ('ORGANIZATION', 'Organization'),
    ]
    TYPE_CHOICES = [
        ('MONETARY', 'Monetary'),
        ('MEDICAL_SUPPLIES', 'Medical supplies'),
        ('EQUIPMENT', 'Equipment'),
        ('OTHER', 'Other'),
    ]
    PAYMENT_METHOD_CHOICES = [
        ('CASH', 'Cash'),
        ('BANK_TRANSFER', 'Bank transfer'),
        ('UPI', 'UPI'),
        ('CHEQUE', 'Cheque'),
        ('CREDIT_CARD', 'Credit card'),
        ('DEBIT_CARD', 'Debit card'),
    ]
    donor_name = models.CharField(max_length=255)
    donor_email = models.EmailField(blank=True)
    donor_phone = models.CharField(max_length=32, blank=True)
    donor_address = models.TextField(blank=True)
    donor_type = models.CharField(max_length=12, choices=DONOR_TYPE_CHOICES, default='INDIVIDUAL')
    donor_pan = models.CharField(max_length=16, blank=True)
    organization_name = models.CharField(max_length=255, blank=True)
    type = models.CharField(max_length=20, choices=TYPE_CHOICES, default='MONETARY')
    amount = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    description = models.TextField(blank=True)
    payment_method = models.CharField(max_length=16, choices=PAYMENT_METHOD_CHOICES, default='CASH')
    payment_reference = models.CharField(max_length=128, blank=True)
    payment_date = models.DateField()
    is_anonymous = models.BooleanField(default=False)
    notes = models.TextField(blank=True)
    hospital = models.ForeignKey(
        Hospital, null=True, blank=True, on_delete=models.SET_NULL, related_name='donations'
    )
    recorded_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='donations_recorded'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.type} from {self.donor_name}"


class AuditLog(models.Model):
    """Append-only trail of card mutations and logins.

    ``card`` is kept nullable because deletion entries outlive the card;
    the deleted card's id is carried in ``metadata`` instead.
    """
    ACTION_CARD_CREATED = 'CARD_CREATED'
    ACTION_CARD_UPDATED = 'CARD_UPDATED'
    ACTION_CARD_DELETED = 'CARD_DELETED'
    ACTION_USER_LOGIN = 'USER_LOGIN'
    ACTION_CHOICES = [
        (ACTION_CARD_CREATED, 'Card created'),
        (ACTION_CARD_UPDATED, 'Card updated'),
        (ACTION_CARD_DELETED, 'Card deleted'),
        (ACTION_USER_LOGIN, 'User login'),
    ]
    user = models.ForeignKey(User, null=True, on_delete=models.SET_NULL, related_name='audit_logs')
    card = models.ForeignKey(Card, null=True, blank=True, on_delete=models.SET_NULL, related_name='audit_logs')
    action = models.CharField(max_length=32, choices=ACTION_CHOICES)
    metadata = models.JSONField(default=dict, blank=True)
    timestamp = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'timestamp'], name='audit_action_ts_idx'),
        ]

    def save(self, *args, **kwargs):
        if self.pk is not None:
            raise ValueError('audit log entries are immutable')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValueError('audit log entries cannot be deleted')

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.timestamp:%F %T}"
