"""
Card issuance, maintenance and lookup.

Card numbers are 16 random decimal digits drawn from :mod:`secrets`.
Issuance looks for a free number a bounded number of times, backing
off a little between collisions, and gives up with
:class:`~benefits.exceptions.CardNumberExhausted` rather than leaking a
raw constraint violation.  The unique constraint on ``card_number``
remains the final arbiter when two requests race for the same number.

Every create, update and delete writes exactly one :class:`AuditLog`
row inside the same transaction as the card change.
"""
from __future__ import annotations

import logging
import re
import secrets
import string
import time
from datetime import date, timedelta
from typing import Optional

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Q, QuerySet
from django.utils import timezone
from rest_framework.exceptions import NotFound

from benefits.exceptions import CardNumberExhausted, Conflict
from benefits.models import AuditLog, Card, Household, Plan, User
from benefits.services.audit import log_action
from benefits.services.dashboard import forget_dashboards
from benefits.services.households import format_member
from benefits.services.plans import format_plan

logger = logging.getLogger(__name__)

CARD_NUMBER_LENGTH = 16

_NON_ALNUM = re.compile(r'[^A-Za-z0-9]')


def generate_card_number() -> str:
    return ''.join(secrets.choice(string.digits) for _ in range(CARD_NUMBER_LENGTH))


def compute_expiry(issue_date: date, duration_days: int) -> date:
    """Calendar-day arithmetic: 2024-01-31 + 1 day is 2024-02-01."""
    return issue_date + timedelta(days=duration_days)


def _backoff(attempt: int) -> None:
    delay = settings.CARD_NUMBER_RETRY_BACKOFF_MS * attempt / 1000.0
    if delay > 0:
        time.sleep(delay)


def _snapshot(card: Card) -> dict:
    return {
        'cardId': card.id,
        'cardNumber': card.card_number,
        'householdId': card.household_id,
        'planId': card.plan_id,
        'status': card.status,
        'issueDate': card.issue_date.isoformat(),
        'expiryDate': card.expiry_date.isoformat(),
    }


def issue_card(actor: User, *, household_id: int, plan_id: int, status: Optional[str] = None,
               issue_date: Optional[date] = None) -> Card:
    household = Household.objects.filter(id=household_id).first()
    if not household:
        raise NotFound('Household not found')
    if Card.objects.filter(household=household).exists():
        raise Conflict('Household already has a card assigned')
    plan = Plan.objects.filter(id=plan_id).first()
    if not plan:
        raise NotFound('Plan not found')

    issue_date = issue_date or timezone.localdate()
    expiry_date = compute_expiry(issue_date, plan.duration_days)
    status = status or Card.STATUS_ACTIVE

    attempts = settings.CARD_NUMBER_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        candidate = generate_card_number()
        if Card.objects.filter(card_number=candidate).exists():
            logger.warning('card number collision on attempt %d/%d', attempt, attempts)
            _backoff(attempt)
            continue
        try:
            with transaction.atomic():
                card = Card.objects.create(
                    household=household,
                    plan=plan,
                    card_number=candidate,
                    status=status,
                    issue_date=issue_date,
                    expiry_date=expiry_date,
                    created_by=actor,
                    updated_by=actor,
                )
                log_action(user=actor, action=AuditLog.ACTION_CARD_CREATED, card=card, metadata=_snapshot(card))
        except IntegrityError:
            # Lost a race: either the household got its card meanwhile or
            # another request took the same number.
            if Card.objects.filter(household=household).exists():
                raise Conflict('Household already has a card assigned')
            if not Card.objects.filter(card_number=candidate).exists():
                raise
            logger.warning('card number taken during insert on attempt %d/%d', attempt, attempts)
            _backoff(attempt)
            continue
        forget_dashboards([actor.id, household.created_by_id])
        logger.info('card %s issued to household %s by user %s', card.id, household.id, actor.id)
        return card

    logger.error('no free card number after %d attempts for household %s', attempts, household.id)
    raise CardNumberExhausted()


def update_card(actor: User, card_id: int, *, plan_id: Optional[int] = None, status: Optional[str] = None,
                issue_date: Optional[date] = None) -> Card:
    """Change plan, status or issue date.

    Expiry is recomputed whenever a plan or issue date is supplied, using
    the (possibly new) plan's duration from the (possibly new) issue
    date.  A status-only change leaves the dates alone.
    """
    card = Card.objects.select_related('plan', 'household').filter(id=card_id).first()
    if not card:
        raise NotFound('Card not found')
    previous = _snapshot(card)

    plan = card.plan
    if plan_id is not None and plan_id != card.plan_id:
        plan = Plan.objects.filter(id=plan_id).first()
        if not plan:
            raise NotFound('Plan not found')

    if plan_id is not None or issue_date is not None:
        card.plan = plan
        if issue_date is not None:
            card.issue_date = issue_date
        card.expiry_date = compute_expiry(card.issue_date, plan.duration_days)
    if status is not None:
        card.status = status
    card.updated_by = actor

    with transaction.atomic():
        card.save()
        current = _snapshot(card)
        log_action(user=actor, action=AuditLog.ACTION_CARD_UPDATED, card=card, metadata={
            **current,
            'previousStatus': previous['status'],
            'previousPlanId': previous['planId'],
            'previousIssueDate': previous['issueDate'],
            'previousExpiryDate': previous['expiryDate'],
        })
    forget_dashboards([actor.id, card.household.created_by_id])
    logger.info('card %s updated by user %s', card.id, actor.id)
    return card


def delete_card(actor: User, card_id: int) -> None:
    """Remove a card that has no benefit records.

    Benefit records carry the disbursement history, so a card with any of
    them is a Conflict; suspend or expire it instead.
    """
    card = Card.objects.select_related('household').filter(id=card_id).first()
    if not card:
        raise NotFound('Card not found')
    if card.beneficiaries.exists():
        raise Conflict('Card has benefit records and cannot be deleted')
    snapshot = _snapshot(card)
    owner_id = card.household.created_by_id
    with transaction.atomic():
        card.delete()
        log_action(user=actor, action=AuditLog.ACTION_CARD_DELETED, metadata=snapshot)
    forget_dashboards([actor.id, owner_id])
    logger.info('card %s deleted by user %s', snapshot['cardId'], actor.id)


def list_cards(*, status: Optional[str] = None, household_id: Optional[int] = None) -> QuerySet:
    qs = Card.objects.select_related('household', 'plan')
    if status:
        qs = qs.filter(status=status)
    if household_id:
        qs = qs.filter(household_id=household_id)
    return qs.order_by('-created_at', '-id')


def get_card(card_id: int) -> Card:
    card = (Card.objects.select_related('household', 'plan')
            .prefetch_related('household__members').filter(id=card_id).first())
    if not card:
        raise NotFound('Card not found')
    return card


def lookup_cards(query: str, status: str = Card.STATUS_ACTIVE) -> list:
    """Cards in ``status`` whose number contains ``query`` (ignoring
    separators), or whose household phone or a member's national ID
    equals it exactly."""
    query = query.strip()
    cond = Q(household__phone=query) | Q(household__members__national_id=query)
    digits = _NON_ALNUM.sub('', query)
    if digits:
        cond |= Q(card_number__icontains=digits)
    qs = (Card.objects.filter(status=status).filter(cond).distinct()
          .select_related('household', 'plan').prefetch_related('household__members')
          .order_by('-created_at', '-id'))
    cards = list(qs)
    if not cards:
        raise NotFound('No cards found')
    return cards


def find_public_card(card_number: str) -> Card:
    card = (Card.objects.select_related('household', 'plan')
            .prefetch_related('household__members')
            .filter(card_number=_NON_ALNUM.sub('', card_number)).first())
    if not card:
        raise NotFound('Card not found')
    return card


def format_public_card(card: Card) -> dict:
    """What an anonymous visitor may see: no internal ids, national IDs or prices."""
    household = card.household
    return {
        'cardNumber': card.card_number,
        'status': card.status,
        'issueDate': card.issue_date.isoformat(),
        'expiryDate': card.expiry_date.isoformat(),
        'household': {
            'headName': household.head_name,
            'address': household.address,
            'phone': household.phone,
            'members': [
                {
                    'firstName': m.first_name,
                    'lastName': m.last_name,
                    'dob': m.dob.isoformat() if m.dob else None,
                    'relation': m.relation,
                }
                for m in household.members.all()
            ],
        },
        'plan': {'name': card.plan.name, 'description': card.plan.description},
    }


def format_card(card: Card, *, with_members: bool = False) -> dict:
    household = card.household
    data = {
        'id': card.id,
        'cardNumber': card.card_number,
        'status': card.status,
        'issueDate': card.issue_date.isoformat(),
        'expiryDate': card.expiry_date.isoformat(),
        'householdId': card.household_id,
        'planId': card.plan_id,
        'household': {
            'id': household.id,
            'headName': household.head_name,
            'address': household.address,
            'phone': household.phone,
        },
        'plan': format_plan(card.plan),
    }
    if with_members:
        data['household']['members'] = [format_member(m) for m in household.members.all()]
    data.update({
        'createdBy': card.created_by_id,
        'updatedBy': card.updated_by_id,
        'createdAt': card.created_at.isoformat() if card.created_at else None,
        'updatedAt': card.updated_at.isoformat() if card.updated_at else None,
    })
    return data
