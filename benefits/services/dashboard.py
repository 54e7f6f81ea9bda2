from datetime import timedelta
from typing import Iterable, Optional

from django.conf import settings
from django.core.cache import cache
from django.db.models import QuerySet
from django.utils import timezone

from benefits.models import Card, Household, User


def _cache_key(user_id: int) -> str:
    return f'dashboard:agent:{user_id}'


def forget_dashboards(user_ids: Iterable[Optional[int]]) -> None:
    """Drop cached dashboards for these users and for every admin, who see all cards."""
    ids = {uid for uid in user_ids if uid is not None}
    ids.update(User.objects.filter(role=User.ROLE_ADMIN).values_list('id', flat=True))
    if ids:
        cache.delete_many([_cache_key(uid) for uid in ids])


def _households_for(actor: User) -> QuerySet:
    qs = Household.objects.all()
    if actor.role != User.ROLE_ADMIN:
        qs = qs.filter(created_by=actor)
    return qs


def _cards_for(actor: User) -> QuerySet:
    qs = Card.objects.select_related('household', 'plan')
    if actor.role != User.ROLE_ADMIN:
        qs = qs.filter(household__created_by=actor)
    return qs


def _brief(card: Card) -> dict:
    return {
        'id': card.id,
        'cardNumber': card.card_number,
        'status': card.status,
        'headName': card.household.head_name,
        'planName': card.plan.name,
        'issueDate': card.issue_date.isoformat(),
        'expiryDate': card.expiry_date.isoformat(),
    }


def agent_dashboard(actor: User) -> dict:
    """Counts and short card lists for the signed-in agent.

    Payloads are cached per user and dropped by :func:`forget_dashboards`
    whenever a card or household they can see changes.
    """
    ck = _cache_key(actor.id)
    cached = cache.get(ck)
    if cached:
        return cached
    today = timezone.localdate()
    horizon = today + timedelta(days=settings.CARD_EXPIRING_SOON_DAYS)
    cards = _cards_for(actor)
    expiring = cards.filter(status=Card.STATUS_ACTIVE, expiry_date__gte=today, expiry_date__lte=horizon)
    payload = {
        'stats': {
            'totalHouseholds': _households_for(actor).count(),
            'activeCards': cards.filter(status=Card.STATUS_ACTIVE).count(),
            'expiringCards': expiring.count(),
        },
        'recentCards': [_brief(c) for c in cards.order_by('-created_at', '-id')[:5]],
        'expiringCards': [_brief(c) for c in expiring.order_by('expiry_date', 'id')[:5]],
    }
    cache.set(ck, payload, settings.DASHBOARD_CACHE_SECONDS)
    return payload
