import logging
from typing import Iterable

from django.db import transaction
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError

from benefits.exceptions import Conflict
from benefits.models import Beneficiary, Card, Member, User
from benefits.services.households import format_member

logger = logging.getLogger(__name__)


def format_beneficiary(b: Beneficiary) -> dict:
    return {
        'id': b.id,
        'householdId': b.household_id,
        'cardId': b.card_id,
        'cardNumber': b.card.card_number if b.card_id else None,
        'headName': b.household.head_name,
        'benefitType': b.benefit_type,
        'status': b.status,
        'amount': float(b.amount),
        'description': b.description,
        'startDate': b.start_date.isoformat(),
        'endDate': b.end_date.isoformat() if b.end_date else None,
        'members': [format_member(m, redact=True) for m in b.members.all()],
        'createdBy': b.created_by_id,
        'createdAt': b.created_at.isoformat() if b.created_at else None,
        'updatedAt': b.updated_at.isoformat() if b.updated_at else None,
    }


def _members_of(household_id: int, member_ids: Iterable[int]) -> list:
    wanted = set(member_ids)
    members = list(Member.objects.filter(household_id=household_id, id__in=wanted))
    if len(members) != len(wanted):
        raise ValidationError({'memberIds': ['All members must belong to the household.']})
    return members


def get_beneficiary(beneficiary_id: int) -> Beneficiary:
    b = (Beneficiary.objects.select_related('household', 'card')
         .prefetch_related('members').filter(id=beneficiary_id).first())
    if not b:
        raise NotFound('Beneficiary not found')
    return b


def create_beneficiary(actor: User, *, household_id: int, card_id: int, benefit_type: str, amount,
                       start_date, member_ids, end_date=None, description: str = '') -> Beneficiary:
    card = Card.objects.filter(id=card_id, household_id=household_id, status=Card.STATUS_ACTIVE).first()
    if not card:
        raise ValidationError({'cardId': ['Card must be active and belong to the household.']})
    members = _members_of(household_id, member_ids)
    with transaction.atomic():
        b = Beneficiary.objects.create(
            household_id=household_id,
            card=card,
            benefit_type=benefit_type,
            amount=amount,
            description=description,
            start_date=start_date,
            end_date=end_date,
            created_by=actor,
        )
        b.members.set(members)
    logger.info('beneficiary %s recorded on card %s by user %s', b.id, card.id, actor.id)
    return get_beneficiary(b.id)


def update_beneficiary(actor: User, beneficiary_id: int, data: dict) -> Beneficiary:
    """Partial update.

    Only administrators may move a record to a different status, and a
    COMPLETED or REJECTED record is final.
    """
    b = get_beneficiary(beneficiary_id)
    if b.is_terminal:
        raise Conflict(f'Beneficiary is {b.status.lower()} and can no longer be changed')
    new_status = data.get('status')
    if new_status is not None and new_status != b.status and actor.role != User.ROLE_ADMIN:
        raise PermissionDenied('Only administrators can change beneficiary status')

    start = data.get('startDate', b.start_date)
    end = data['endDate'] if 'endDate' in data else b.end_date
    if end and end < start:
        raise ValidationError({'endDate': ['End date cannot be before start date.']})

    members = _members_of(b.household_id, data['memberIds']) if 'memberIds' in data else None
    with transaction.atomic():
        if 'benefitType' in data:
            b.benefit_type = data['benefitType']
        if new_status is not None:
            b.status = new_status
        if 'amount' in data:
            b.amount = data['amount']
        if 'description' in data:
            b.description = data['description']
        b.start_date = start
        b.end_date = end
        b.save()
        if members is not None:
            b.members.set(members)
    if new_status is not None:
        logger.info('beneficiary %s status %s by user %s', b.id, b.status, actor.id)
    return get_beneficiary(b.id)


def delete_beneficiary(beneficiary_id: int) -> None:
    b = Beneficiary.objects.filter(id=beneficiary_id).first()
    if not b:
        raise NotFound('Beneficiary not found')
    b.delete()
