from decimal import Decimal

from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from django.db import transaction

from benefits.models import Hospital, Plan, User

DEMO_PASSWORD = "Demo@12345"

USERS = [
    ("admin@healthcard.local", User.ROLE_ADMIN, "Program Admin"),
    ("agent@healthcard.local", User.ROLE_OFFICE_AGENT, "Office Agent"),
    ("hospital@healthcard.local", User.ROLE_HOSPITAL_USER, "City Hospital Desk"),
]

PLANS = [
    ("Basic", "Consultations and basic checkups", Decimal("50.00"), 365),
    ("Family", "Whole-household cover including medication", Decimal("120.00"), 365),
    ("Premium", "Hospitalization and surgery cover", Decimal("200.00"), 365),
]


class Command(BaseCommand):
    help = "Ensure demo users and the standard plans exist (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default=DEMO_PASSWORD, help="Password for the demo users.")

    @transaction.atomic
    def handle(self, *args, **opts):
        password = make_password(opts["password"])
        for email, role, name in USERS:
            first, _, last = name.partition(" ")
            u, created = User.objects.get_or_create(
                username=email,
                defaults={"email": email, "role": role, "password": password,
                          "first_name": first, "last_name": last, "is_active": True},
            )
            if not created:
                u.password = password
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            if role == User.ROLE_ADMIN and not u.is_staff:
                u.is_staff = u.is_superuser = True
                u.save(update_fields=["is_staff", "is_superuser"])
            if role == User.ROLE_HOSPITAL_USER:
                Hospital.objects.get_or_create(
                    user=u, defaults={"name": "City Hospital", "license_no": "LIC-0001",
                                      "address": "1 Main Road", "phone": "0000000000"},
                )
            self.stdout.write(self.style.SUCCESS(f"ok: {email} ({role})"))

        for name, description, price, days in PLANS:
            plan, created = Plan.objects.update_or_create(
                name=name, defaults={"description": description, "price": price, "duration_days": days},
            )
            self.stdout.write(self.style.SUCCESS(f"{'created' if created else 'updated'}: plan {plan.name}"))
        self.stdout.write(self.style.SUCCESS("Program seed data ensured."))
