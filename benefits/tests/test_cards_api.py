"""
API tests for the card endpoints.

These exercise the HTTP surface: role checks, the unified error body,
strict input validation and the one-audit-row-per-change rule.

To run the tests:

```
pytest -q benefits/tests
```
"""
from datetime import date
from decimal import Decimal

from django.urls import reverse
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient, APITestCase

from ..models import AuditLog, Card, Household, Hospital, Member, Plan, User
from ..services.cards import issue_card

PASSWORD = "Str0ng-Passw0rd!"


class CardAPITests(APITestCase):
    def setUp(self) -> None:
        self.admin = User.objects.create_user(username="admin@example.test", password=PASSWORD, role=User.ROLE_ADMIN)
        self.agent = User.objects.create_user(username="agent@example.test", password=PASSWORD)
        self.desk = User.objects.create_user(
            username="desk@hospital.test", password=PASSWORD, role=User.ROLE_HOSPITAL_USER,
        )
        Hospital.objects.create(user=self.desk, name="City Hospital", license_no="LIC-1")

        self.plan = Plan.objects.create(name="Basic", price=Decimal("50.00"), duration_days=365)
        self.day_plan = Plan.objects.create(name="Day pass", price=Decimal("1.00"), duration_days=1)
        self.household = Household.objects.create(
            head_name="Asha Rao", address="12 Lake Road", phone="9000000001", created_by=self.agent,
        )
        Member.objects.create(
            household=self.household, first_name="Asha", last_name="Rao",
            dob=date(1985, 5, 1), relation="HEAD", national_id="NID1001",
        )

    def _client(self, user=None) -> APIClient:
        client = APIClient()
        if user is not None:
            token, _ = Token.objects.get_or_create(user=user)
            client.credentials(HTTP_AUTHORIZATION=f"Token {token.key}")
        return client

    def test_create_card_computes_expiry(self):
        r = self._client(self.agent).post(reverse('cards'), {
            'householdId': self.household.id, 'planId': self.day_plan.id, 'issueDate': '2024-01-31',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['issueDate'], '2024-01-31')
        self.assertEqual(r.data['expiryDate'], '2024-02-01')
        self.assertEqual(r.data['status'], Card.STATUS_ACTIVE)
        self.assertEqual(len(r.data['cardNumber']), 16)
        self.assertEqual(AuditLog.objects.filter(action=AuditLog.ACTION_CARD_CREATED, user=self.agent).count(), 1)

    def test_create_accepts_iso_datetime_issue_date(self):
        r = self._client(self.agent).post(reverse('cards'), {
            'householdId': self.household.id, 'planId': self.day_plan.id, 'issueDate': '2024-02-29T06:00:00+05:30',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_201_CREATED)
        self.assertEqual(r.data['expiryDate'], '2024-03-01')

    def test_second_card_is_conflict(self):
        client = self._client(self.agent)
        body = {'householdId': self.household.id, 'planId': self.plan.id}
        self.assertEqual(client.post(reverse('cards'), body, format='json').status_code, 201)
        r = client.post(reverse('cards'), body, format='json')
        self.assertEqual(r.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(r.data['code'], 'conflict')
        self.assertIn('error', r.data)
        self.assertEqual(Card.objects.count(), 1)
        self.assertEqual(AuditLog.objects.count(), 1)

    def test_unknown_plan_is_not_found(self):
        r = self._client(self.agent).post(reverse('cards'), {
            'householdId': self.household.id, 'planId': 9999,
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(r.data, {'error': 'Plan not found', 'code': 'not_found'})
        self.assertFalse(Card.objects.exists())
        self.assertFalse(AuditLog.objects.exists())

    def test_unknown_body_key_is_rejected(self):
        r = self._client(self.agent).post(reverse('cards'), {
            'householdId': self.household.id, 'planId': self.plan.id, 'cardNumber': '1234123412341234',
        }, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(r.data['code'], 'validation_error')
        self.assertIn('cardNumber', r.data['fields'])
        self.assertFalse(Card.objects.exists())

    def test_hospital_user_cannot_manage_cards(self):
        client = self._client(self.desk)
        r = client.post(reverse('cards'), {'householdId': self.household.id, 'planId': self.plan.id}, format='json')
        self.assertEqual(r.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(client.get(reverse('cards')).status_code, status.HTTP_403_FORBIDDEN)

    def test_anonymous_gets_401_error_body(self):
        r = APIClient().get(reverse('cards'))
        self.assertEqual(r.status_code, status.HTTP_401_UNAUTHORIZED)
        self.assertEqual(r.data['code'], 'not_authenticated')

    def test_update_plan_recomputes_expiry_and_audits_once(self):
        card = issue_card(self.agent, household_id=self.household.id, plan_id=self.plan.id, issue_date=date(2024, 1, 31))
        r = self._client(self.admin).put(reverse('card_detail', args=[card.id]), {'planId': self.day_plan.id}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['issueDate'], '2024-01-31')
        self.assertEqual(r.data['expiryDate'], '2024-02-01')
        entries = AuditLog.objects.filter(action=AuditLog.ACTION_CARD_UPDATED)
        self.assertEqual(entries.count(), 1)
        self.assertEqual(entries.get().user, self.admin)

    def test_status_only_update_keeps_expiry(self):
        card = issue_card(self.agent, household_id=self.household.id, plan_id=self.plan.id, issue_date=date(2024, 1, 1))
        r = self._client(self.agent).put(reverse('card_detail', args=[card.id]), {'status': 'SUSPENDED'}, format='json')
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data['status'], 'SUSPENDED')
        self.assertEqual(r.data['expiryDate'], card.expiry_date.isoformat())

    def test_empty_update_is_rejected(self):
        card = issue_card(self.agent, household_id=self.household.id, plan_id=self.plan.id)
        r = self._client(self.agent).put(reverse('card_detail', args=[card.id]), {}, format='json')
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(AuditLog.objects.filter(action=AuditLog.ACTION_CARD_UPDATED).count(), 0)

    def test_delete_card(self):
        card = issue_card(self.agent, household_id=self.household.id, plan_id=self.plan.id)
        client = self._client(self.agent)
        r = client.delete(reverse('card_detail', args=[card.id]))
        self.assertEqual(r.status_code, status.HTTP_200_OK)
        self.assertEqual(r.data, {'success': True})
        self.assertFalse(Card.objects.filter(id=card.id).exists())
        self.assertEqual(AuditLog.objects.filter(action=AuditLog.ACTION_CARD_DELETED).count(), 1)

        r = client.delete(reverse('card_detail', args=[card.id]))
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(AuditLog.objects.filter(action=AuditLog.ACTION_CARD_DELETED).count(), 1)

    def test_card_detail_includes_members_and_plan(self):
        card = issue_card(self.agent, household_id=self.household.id, plan_id=self.plan.id)
        r = self._client(self.admin).get(reverse('card_detail', args=[card.id]))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data['plan']['name'], 'Basic')
        self.assertEqual(r.data['household']['members'][0]['nationalId'], 'NID1001')

    def test_list_filters_by_status(self):
        issue_card(self.agent, household_id=self.household.id, plan_id=self.plan.id)
        client = self._client(self.agent)
        self.assertEqual(len(client.get(reverse('cards'), {'status': 'ACTIVE'}).data), 1)
        self.assertEqual(len(client.get(reverse('cards'), {'status': 'EXPIRED'}).data), 0)

    def test_hospital_user_can_look_up_cards(self):
        card = issue_card(self.agent, household_id=self.household.id, plan_id=self.plan.id)
        client = self._client(self.desk)
        dashed = '-'.join(card.card_number[i:i + 4] for i in range(0, 16, 4))
        r = client.get(reverse('card_lookup'), {'query': dashed})
        self.assertEqual(r.status_code, 200)
        self.assertEqual([c['id'] for c in r.data], [card.id])

        r = client.get(reverse('card_lookup'), {'query': 'NID1001'})
        self.assertEqual(r.status_code, 200)

        r = client.get(reverse('card_lookup'), {'query': 'nobody-here'})
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)

    def test_lookup_requires_query(self):
        r = self._client(self.desk).get(reverse('card_lookup'))
        self.assertEqual(r.status_code, status.HTTP_400_BAD_REQUEST)

    def test_public_view_hides_national_ids(self):
        card = issue_card(self.agent, household_id=self.household.id, plan_id=self.plan.id)
        r = APIClient().get(reverse('public_card', args=[card.card_number]))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data['cardNumber'], card.card_number)
        members = r.data['household']['members']
        self.assertEqual(len(members), 1)
        self.assertNotIn('nationalId', members[0])
        self.assertNotIn('id', members[0])
        for key in ('id', 'householdId', 'planId', 'createdBy'):
            self.assertNotIn(key, r.data)
        self.assertNotIn('id', r.data['household'])
        self.assertEqual(r.data['plan'], {'name': 'Basic', 'description': ''})

    def test_public_search(self):
        card = issue_card(self.agent, household_id=self.household.id, plan_id=self.plan.id)
        client = APIClient()
        r = client.get(reverse('public_card_search'), {'cardNumber': card.card_number})
        self.assertEqual(r.status_code, 200)
        self.assertEqual(r.data, {'success': True})
        other = '0000000000000000' if card.card_number != '0000000000000000' else '9999999999999999'
        r = client.get(reverse('public_card_search'), {'cardNumber': other})
        self.assertEqual(r.status_code, status.HTTP_404_NOT_FOUND)
