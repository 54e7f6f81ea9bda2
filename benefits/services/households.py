import logging
from typing import Iterable, Optional

from django.db import transaction
from django.db.models import Q, QuerySet
from rest_framework.exceptions import NotFound, PermissionDenied

from benefits.models import Card, Household, Member, User
from benefits.services.dashboard import forget_dashboards

logger = logging.getLogger(__name__)


def format_member(member: Member, *, redact: bool = False) -> dict:
    data = {
        'id': member.id,
        'householdId': member.household_id,
        'firstName': member.first_name,
        'lastName': member.last_name,
        'dob': member.dob.isoformat() if member.dob else None,
        'relation': member.relation,
    }
    if not redact:
        data['nationalId'] = member.national_id
    return data


def format_household(household: Household, *, with_card: bool = True) -> dict:
    data = {
        'id': household.id,
        'headName': household.head_name,
        'address': household.address,
        'phone': household.phone,
        'createdBy': household.created_by_id,
        'createdAt': household.created_at.isoformat() if household.created_at else None,
        'updatedAt': household.updated_at.isoformat() if household.updated_at else None,
        'members': [format_member(m) for m in household.members.all()],
    }
    if with_card:
        card = household.card if _has_card(household) else None
        data['card'] = {
            'id': card.id,
            'cardNumber': card.card_number,
            'status': card.status,
            'expiryDate': card.expiry_date.isoformat(),
        } if card else None
    return data


def _has_card(household: Household) -> bool:
    try:
        household.card
    except Card.DoesNotExist:
        return False
    return True


def households_visible_to(actor: User) -> QuerySet:
    qs = Household.objects.all()
    if actor.role != User.ROLE_ADMIN:
        qs = qs.filter(created_by=actor)
    return qs


def search_households(actor: User, search: Optional[str] = None) -> QuerySet:
    qs = households_visible_to(actor)
    if search:
        qs = qs.filter(
            Q(head_name__icontains=search)
            | Q(phone__icontains=search)
            | Q(members__national_id=search)
        ).distinct()
    return qs.select_related('card').prefetch_related('members').order_by('-created_at', '-id')


def get_household_for(actor: User, household_id: int, *, for_write: bool = False) -> Household:
    """Fetch a household the actor may see, or raise.

    Office agents only reach households they registered, and may not
    edit or remove one whose card is currently active.
    """
    household = Household.objects.select_related('card').filter(id=household_id).first()
    if not household:
        raise NotFound('Household not found')
    if actor.role == User.ROLE_ADMIN:
        return household
    if household.created_by_id != actor.id:
        raise PermissionDenied('You can only access households you registered')
    if for_write and _has_card(household) and household.card.status == Card.STATUS_ACTIVE:
        raise PermissionDenied('Cannot modify a household with an active card')
    return household


def _create_members(household: Household, members: Iterable[dict]) -> None:
    Member.objects.bulk_create([
        Member(
            household=household,
            first_name=m['firstName'],
            last_name=m.get('lastName', ''),
            dob=m['dob'],
            relation=m['relation'],
            national_id=m['nationalId'],
        )
        for m in members
    ])


def create_household(actor: User, *, head_name: str, address: str, phone: str, members=()) -> Household:
    with transaction.atomic():
        household = Household.objects.create(
            head_name=head_name, address=address, phone=phone, created_by=actor,
        )
        _create_members(household, members)
    forget_dashboards([actor.id])
    logger.info('household %s registered by user %s with %d members', household.id, actor.id, len(members))
    return household


def update_household(household: Household, data: dict) -> Household:
    with transaction.atomic():
        if 'headName' in data:
            household.head_name = data['headName']
        if 'address' in data:
            household.address = data['address']
        if 'phone' in data:
            household.phone = data['phone']
        household.save()
        if 'members' in data:
            household.members.all().delete()
            _create_members(household, data['members'])
    forget_dashboards([household.created_by_id])
    return household


def delete_household(household: Household) -> None:
    hid, owner_id = household.id, household.created_by_id
    household.delete()
    forget_dashboards([owner_id])
    logger.info('household %s deleted', hid)
