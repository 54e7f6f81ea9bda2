"""
Household registration views.

Office agents work only with the households they registered themselves,
and lose edit rights once a household's card is active; administrators
see everything.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsStaffRole
from ..serializers.households import (
    HouseholdCreateSerializer,
    HouseholdListQuerySerializer,
    HouseholdUpdateSerializer,
)
from ..services.households import (
    create_household,
    delete_household,
    format_household,
    get_household_for,
    search_households,
    update_household,
)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsStaffRole])
def households_collection(request):
    if request.method == 'GET':
        q = HouseholdListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        page = q.validated_data['page']
        limit = q.validated_data['limit']
        qs = search_households(request.user, q.validated_data.get('search'))
        total = qs.count()
        start = (page - 1) * limit
        return Response({
            'households': [format_household(h) for h in qs[start:start + limit]],
            'pagination': {
                'page': page,
                'limit': limit,
                'total': total,
                'totalPages': (total + limit - 1) // limit,
            },
        })

    s = HouseholdCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    household = create_household(
        request.user,
        head_name=vd['headName'],
        address=vd['address'],
        phone=vd['phone'],
        members=vd.get('members', []),
    )
    return Response(format_household(household), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsStaffRole])
def household_detail(request, pk: int):
    if request.method == 'GET':
        return Response(format_household(get_household_for(request.user, pk)))

    household = get_household_for(request.user, pk, for_write=True)
    if request.method == 'PUT':
        s = HouseholdUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        household = update_household(household, s.validated_data)
        return Response(format_household(household))

    delete_household(household)
    return Response({'success': True})
