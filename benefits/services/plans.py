import logging

from rest_framework.exceptions import NotFound

from benefits.exceptions import Conflict
from benefits.models import Plan

logger = logging.getLogger(__name__)


def format_plan(plan: Plan) -> dict:
    return {
        'id': plan.id,
        'name': plan.name,
        'description': plan.description,
        'price': float(plan.price),
        'durationDays': plan.duration_days,
        'createdAt': plan.created_at.isoformat() if plan.created_at else None,
        'updatedAt': plan.updated_at.isoformat() if plan.updated_at else None,
    }


def _ensure_unique_name(name: str, exclude_id=None) -> None:
    qs = Plan.objects.filter(name__iexact=name)
    if exclude_id:
        qs = qs.exclude(id=exclude_id)
    if qs.exists():
        raise Conflict('A plan with this name already exists')


def create_plan(*, name, price, duration_days, description='') -> Plan:
    _ensure_unique_name(name)
    plan = Plan.objects.create(name=name, description=description, price=price, duration_days=duration_days)
    logger.info('plan %s created (%s days)', plan.id, plan.duration_days)
    return plan


def update_plan(plan_id: int, data: dict) -> Plan:
    """Apply a partial update.

    Existing cards keep their stored expiry; only cards issued or
    re-planned afterwards pick up a new ``duration_days``.
    """
    plan = Plan.objects.filter(id=plan_id).first()
    if not plan:
        raise NotFound('Plan not found')
    if 'name' in data:
        _ensure_unique_name(data['name'], exclude_id=plan.id)
        plan.name = data['name']
    if 'description' in data:
        plan.description = data['description']
    if 'price' in data:
        plan.price = data['price']
    if 'durationDays' in data:
        plan.duration_days = data['durationDays']
    plan.save()
    return plan


def delete_plan(plan_id: int) -> None:
    plan = Plan.objects.filter(id=plan_id).first()
    if not plan:
        raise NotFound('Plan not found')
    if plan.cards.exists():
        raise Conflict('Plan is referenced by existing cards')
    plan.delete()
    logger.info('plan %s deleted', plan_id)
