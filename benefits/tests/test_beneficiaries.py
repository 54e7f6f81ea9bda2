import pytest
from django.urls import reverse

from benefits.models import AuditLog, Beneficiary, Card, Household
from benefits.services.cards import issue_card

pytestmark = pytest.mark.django_db


@pytest.fixture
def card(agent, household, plan):
    return issue_card(agent, household_id=household.id, plan_id=plan.id)


def _body(household, card, **overrides):
    body = {
        'householdId': household.id,
        'cardId': card.id,
        'benefitType': 'CONSULTATION',
        'amount': '250.00',
        'startDate': '2024-05-01',
        'memberIds': [m.id for m in household.members.all()],
    }
    body.update(overrides)
    return body


@pytest.fixture
def record(client_for, hospital_user, household, card):
    r = client_for(hospital_user).post(reverse('beneficiaries'), _body(household, card), format='json')
    assert r.status_code == 201
    return Beneficiary.objects.get(id=r.data['id'])


def test_hospital_user_records_a_benefit(record, household):
    assert record.status == Beneficiary.STATUS_PENDING
    assert record.members.count() == household.members.count()


def test_members_must_belong_to_household(client_for, agent, household, card, make_household):
    stranger = make_household(agent, phone='9444444444', national_ids=('OUT1',)).members.get()
    r = client_for(agent).post(reverse('beneficiaries'), _body(household, card, memberIds=[stranger.id]), format='json')
    assert r.status_code == 400
    assert 'memberIds' in r.data['fields']
    assert not Beneficiary.objects.exists()


def test_card_must_be_active(client_for, agent, household, card):
    card.status = Card.STATUS_SUSPENDED
    card.save()
    r = client_for(agent).post(reverse('beneficiaries'), _body(household, card), format='json')
    assert r.status_code == 400
    assert 'cardId' in r.data['fields']


def test_end_date_not_before_start(client_for, agent, household, card):
    r = client_for(agent).post(reverse('beneficiaries'), _body(household, card, endDate='2024-04-01'), format='json')
    assert r.status_code == 400


def test_non_admin_cannot_change_status(client_for, agent, hospital_user, record):
    url = reverse('beneficiary_detail', args=[record.id])
    for user in (agent, hospital_user):
        r = client_for(user).put(url, {'status': 'APPROVED'}, format='json')
        assert r.status_code == 403
    record.refresh_from_db()
    assert record.status == Beneficiary.STATUS_PENDING


def test_non_admin_may_edit_other_fields(client_for, agent, record):
    url = reverse('beneficiary_detail', args=[record.id])
    r = client_for(agent).put(url, {'description': 'Follow-up visit', 'amount': '300.50'}, format='json')
    assert r.status_code == 200
    assert r.data['description'] == 'Follow-up visit'
    assert r.data['amount'] == 300.5
    # sending the unchanged status is not a status change
    r = client_for(agent).put(url, {'status': 'PENDING', 'description': 'Again'}, format='json')
    assert r.status_code == 200


def test_admin_changes_status_and_terminal_records_are_final(client_for, admin_user, record):
    client = client_for(admin_user)
    url = reverse('beneficiary_detail', args=[record.id])
    assert client.put(url, {'status': 'APPROVED'}, format='json').status_code == 200
    assert client.put(url, {'status': 'COMPLETED'}, format='json').data['status'] == 'COMPLETED'

    r = client.put(url, {'description': 'late edit'}, format='json')
    assert r.status_code == 409
    r = client.put(url, {'status': 'PENDING'}, format='json')
    assert r.status_code == 409
    record.refresh_from_db()
    assert record.status == Beneficiary.STATUS_COMPLETED


def test_replace_members_checks_household(client_for, agent, record, household, make_household):
    url = reverse('beneficiary_detail', args=[record.id])
    own = household.members.first()
    r = client_for(agent).put(url, {'memberIds': [own.id]}, format='json')
    assert r.status_code == 200
    assert [m['id'] for m in r.data['members']] == [own.id]
    assert 'nationalId' not in r.data['members'][0]

    stranger = make_household(agent, phone='9555555555', national_ids=('OUT2',)).members.get()
    assert client_for(agent).put(url, {'memberIds': [stranger.id]}, format='json').status_code == 400


def test_only_admin_deletes(client_for, agent, admin_user, record):
    url = reverse('beneficiary_detail', args=[record.id])
    assert client_for(agent).delete(url).status_code == 403
    assert client_for(admin_user).delete(url).status_code == 200
    assert not Beneficiary.objects.filter(id=record.id).exists()


def test_list_filters(client_for, hospital_user, record, household):
    client = client_for(hospital_user)
    assert len(client.get(reverse('beneficiaries'), {'householdId': household.id}).data) == 1
    assert len(client.get(reverse('beneficiaries'), {'status': 'APPROVED'}).data) == 0


def test_card_with_benefit_records_cannot_be_deleted(client_for, admin_user, record, card):
    record.status = Beneficiary.STATUS_COMPLETED
    record.save()
    r = client_for(admin_user).delete(reverse('card_detail', args=[card.id]))
    assert r.status_code == 409
    assert r.data['code'] == 'conflict'
    assert Card.objects.filter(id=card.id).exists()
    assert Beneficiary.objects.filter(id=record.id).exists()
    assert not AuditLog.objects.filter(action=AuditLog.ACTION_CARD_DELETED).exists()


def test_admin_can_still_remove_whole_household(client_for, admin_user, record, household):
    r = client_for(admin_user).delete(reverse('household_detail', args=[household.id]))
    assert r.status_code == 200
    assert not Household.objects.filter(id=household.id).exists()
    assert not Card.objects.exists()
    assert not Beneficiary.objects.exists()
