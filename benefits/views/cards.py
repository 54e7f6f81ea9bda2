"""
Card endpoints.

Staff (administrators and office agents) list, issue, edit and remove
cards.  Any signed-in role may look cards up, which is how hospital
users verify a patient's coverage, and two unauthenticated endpoints
let a cardholder check a card by its number.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsStaffRole
from ..serializers.cards import (
    CardCreateSerializer,
    CardListQuerySerializer,
    CardLookupQuerySerializer,
    CardUpdateSerializer,
    PublicCardSearchSerializer,
)
from ..services.cards import (
    delete_card,
    find_public_card,
    format_card,
    format_public_card,
    get_card,
    issue_card,
    list_cards,
    lookup_cards,
    update_card,
)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def cards_collection(request):
    if request.method == 'GET':
        q = CardListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = list_cards(status=q.validated_data.get('status'), household_id=q.validated_data.get('householdId'))
        return Response([format_card(c) for c in qs])

    s = CardCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    card = issue_card(
        request.user,
        household_id=vd['householdId'],
        plan_id=vd['planId'],
        status=vd.get('status'),
        issue_date=vd.get('issueDate'),
    )
    return Response(format_card(card), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsStaffRole])
def card_detail(request, pk: int):
    if request.method == 'GET':
        return Response(format_card(get_card(pk), with_members=True))

    if request.method == 'PUT':
        s = CardUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        card = update_card(
            request.user, pk,
            plan_id=vd.get('planId'),
            status=vd.get('status'),
            issue_date=vd.get('issueDate'),
        )
        return Response(format_card(card))

    delete_card(request.user, pk)
    return Response({'success': True})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def card_lookup(request):
    """Find cards by number fragment, household phone or member national ID."""
    q = CardLookupQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    cards = lookup_cards(q.validated_data['query'], q.validated_data['status'])
    return Response([format_card(c, with_members=True) for c in cards])

card_lookup.cls.throttle_scope = 'card_lookup'


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def public_card(request, card_number: str):
    card = find_public_card(card_number)
    return Response(format_public_card(card))


@api_view(['GET'])
@authentication_classes([])
@permission_classes([AllowAny])
def public_card_search(request):
    q = PublicCardSearchSerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    find_public_card(q.validated_data['cardNumber'])
    return Response({'success': True})
