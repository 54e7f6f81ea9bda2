"""
Administrator management of hospital partners and office agents.
"""
from __future__ import annotations

from django.db.models import Q
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Hospital, User
from ..permissions import IsAdminRole
from ..serializers.accounts import (
    AgentCreateSerializer,
    HospitalCreateSerializer,
    HospitalListQuerySerializer,
    HospitalUpdateSerializer,
)
from ..services.accounts import (
    create_agent,
    create_hospital,
    delete_hospital,
    format_hospital,
    format_user,
    get_hospital,
    update_hospital,
)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def hospitals_collection(request):
    if request.method == 'GET':
        q = HospitalListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = Hospital.objects.select_related('user').order_by('name', 'id')
        search = q.validated_data.get('search')
        if search:
            qs = qs.filter(Q(name__icontains=search) | Q(license_no__icontains=search))
        return Response([format_hospital(h) for h in qs])

    s = HospitalCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    hospital = create_hospital(
        name=vd['name'],
        license_no=vd['licenseNo'],
        email=vd['email'],
        password=vd['password'],
        address=vd.get('address', ''),
        phone=vd.get('phone', ''),
        user_name=vd.get('userName', ''),
    )
    return Response(format_hospital(hospital), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def hospital_detail(request, pk: int):
    if request.method == 'GET':
        return Response(format_hospital(get_hospital(pk)))
    if request.method == 'PUT':
        s = HospitalUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        return Response(format_hospital(update_hospital(pk, s.validated_data)))
    delete_hospital(pk)
    return Response({'success': True})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def agents(request):
    if request.method == 'GET':
        qs = User.objects.filter(role=User.ROLE_OFFICE_AGENT).order_by('-created_at', '-id')
        return Response([format_user(u) for u in qs])
    s = AgentCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    user = create_agent(name=vd['name'], email=vd['email'], password=vd['password'])
    return Response(format_user(user), status=status.HTTP_201_CREATED)
