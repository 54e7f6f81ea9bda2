import pytest
from django.core.management import call_command
from django.urls import reverse
from rest_framework.test import APIClient

from benefits.models import AuditLog, Hospital, Plan, User
from benefits.services.cards import issue_card

pytestmark = pytest.mark.django_db

PASSWORD = "Str0ng-Passw0rd!"


def login(client, username, password=PASSWORD):
    return client.post(reverse('login_view'), {'username': username, 'password': password}, format='json')


def test_login_returns_jwt_and_legacy_token(agent):
    r = login(APIClient(), agent.username)
    assert r.status_code == 200
    assert r.data['token'] and r.data['jwt_access'] and r.data['jwt_refresh']
    assert r.data['user']['role'] == User.ROLE_OFFICE_AGENT


def test_login_is_audited(agent):
    login(APIClient(), agent.username)
    entry = AuditLog.objects.get(action=AuditLog.ACTION_USER_LOGIN)
    assert entry.user == agent


def test_bad_password_is_rejected_without_audit(agent):
    r = login(APIClient(), agent.username, 'wrong-password')
    assert r.status_code == 401
    assert r.data['code'] == 'authentication_failed'
    assert not AuditLog.objects.exists()


def test_login_ignores_role_in_body(agent):
    r = APIClient().post(reverse('login_view'), {
        'username': agent.username, 'password': PASSWORD, 'role': 'ADMIN',
    }, format='json')
    assert r.status_code == 200
    agent.refresh_from_db()
    assert agent.role == User.ROLE_OFFICE_AGENT


def test_hospital_login_carries_hospital(hospital_user):
    r = login(APIClient(), hospital_user.username)
    assert r.data['hospital']['name'] == 'City Hospital'


def test_both_token_kinds_authenticate(agent):
    data = login(APIClient(), agent.username).data
    legacy = APIClient()
    legacy.credentials(HTTP_AUTHORIZATION=f"Token {data['token']}")
    assert legacy.get(reverse('plans')).status_code == 200
    bearer = APIClient()
    bearer.credentials(HTTP_AUTHORIZATION=f"Bearer {data['jwt_access']}")
    assert bearer.get(reverse('plans')).status_code == 200


def test_refresh_and_logout(agent):
    data = login(APIClient(), agent.username).data
    r = APIClient().post(reverse('jwt_refresh'), {'refresh': data['jwt_refresh']}, format='json')
    assert r.status_code == 200
    assert r.data['jwt_access']

    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {data['jwt_access']}")
    r = client.post(reverse('jwt_logout'), {'refresh': data['jwt_refresh']}, format='json')
    assert r.status_code == 200
    assert r.data['blacklisted'] == 1

    r = APIClient().post(reverse('jwt_refresh'), {'refresh': data['jwt_refresh']}, format='json')
    assert r.status_code == 401


def test_logout_without_token_revokes_all_sessions(agent):
    first = login(APIClient(), agent.username).data
    second = login(APIClient(), agent.username).data
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {second['jwt_access']}")
    r = client.post(reverse('jwt_logout'), {}, format='json')
    assert r.status_code == 200
    assert r.data['blacklisted'] == 2
    for data in (first, second):
        r = APIClient().post(reverse('jwt_refresh'), {'refresh': data['jwt_refresh']}, format='json')
        assert r.status_code == 401


def test_logout_rejects_unknown_fields(agent):
    data = login(APIClient(), agent.username).data
    client = APIClient()
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {data['jwt_access']}")
    r = client.post(reverse('jwt_logout'), {'refresh': data['jwt_refresh'], 'everywhere': True}, format='json')
    assert r.status_code == 400
    assert 'everywhere' in r.data['fields']


def test_agent_dashboard_counts(client_for, agent, other_agent, make_household, plan):
    mine = make_household(agent)
    make_household(agent, phone='9000000002', national_ids=('D2',))
    theirs = make_household(other_agent, phone='9000000003', national_ids=('D3',))
    issue_card(agent, household_id=mine.id, plan_id=plan.id)
    issue_card(other_agent, household_id=theirs.id, plan_id=plan.id)

    r = client_for(agent).get(reverse('agent_dashboard'))
    assert r.status_code == 200
    assert r.data['stats'] == {'totalHouseholds': 2, 'activeCards': 1, 'expiringCards': 0}
    assert [c['headName'] for c in r.data['recentCards']] == ['Asha Rao']


def test_dashboard_reflects_changes_immediately(client_for, agent, admin_user, household, plan):
    client = client_for(agent)
    admin_client = client_for(admin_user)
    assert client.get(reverse('agent_dashboard')).data['stats']['activeCards'] == 0
    assert admin_client.get(reverse('agent_dashboard')).data['stats']['activeCards'] == 0

    r = client.post(reverse('cards'), {'householdId': household.id, 'planId': plan.id}, format='json')
    assert r.status_code == 201
    assert client.get(reverse('agent_dashboard')).data['stats']['activeCards'] == 1
    assert admin_client.get(reverse('agent_dashboard')).data['stats']['activeCards'] == 1

    admin_client.put(reverse('card_detail', args=[r.data['id']]), {'status': 'SUSPENDED'}, format='json')
    assert client.get(reverse('agent_dashboard')).data['stats']['activeCards'] == 0

    r = client.post(reverse('households'), {
        'headName': 'Ravi Kumar', 'address': '3 Mill Lane', 'phone': '9111111111',
    }, format='json')
    assert r.status_code == 201
    assert client.get(reverse('agent_dashboard')).data['stats']['totalHouseholds'] == 2
    client.delete(reverse('household_detail', args=[r.data['id']]))
    assert client.get(reverse('agent_dashboard')).data['stats']['totalHouseholds'] == 1


def test_dashboard_is_staff_only(client_for, hospital_user):
    assert client_for(hospital_user).get(reverse('agent_dashboard')).status_code == 403


def test_healthz():
    r = APIClient().get(reverse('healthz'))
    assert r.status_code == 200
    assert r.json() == {'ok': True, 'db': True}


def test_seed_program_is_idempotent():
    call_command('seed_program')
    call_command('seed_program')
    assert sorted(Plan.objects.values_list('name', flat=True)) == ['Basic', 'Family', 'Premium']
    assert set(Plan.objects.values_list('duration_days', flat=True)) == {365}
    assert User.objects.filter(role=User.ROLE_HOSPITAL_USER).count() == 1
    assert Hospital.objects.count() == 1
    assert User.objects.get(username='admin@healthcard.local').role == User.ROLE_ADMIN
