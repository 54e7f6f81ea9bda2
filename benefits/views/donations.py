"""
Donation ledger views (administrators only).

Donations are plain records: the program does not process payments, it
only keeps track of what was received, from whom and for which
hospital.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import NotFound
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Donation, Hospital
from ..permissions import IsAdminRole
from ..serializers.donations import DonationSerializer

_FIELDS = (
    ('donorName', 'donor_name'),
    ('donorEmail', 'donor_email'),
    ('donorPhone', 'donor_phone'),
    ('donorAddress', 'donor_address'),
    ('donorType', 'donor_type'),
    ('donorPAN', 'donor_pan'),
    ('organizationName', 'organization_name'),
    ('type', 'type'),
    ('amount', 'amount'),
    ('description', 'description'),
    ('paymentMethod', 'payment_method'),
    ('paymentReference', 'payment_reference'),
    ('paymentDate', 'payment_date'),
    ('isAnonymous', 'is_anonymous'),
    ('notes', 'notes'),
)


def _serialize(d: Donation) -> dict:
    data = {key: getattr(d, attr) for key, attr in _FIELDS}
    data['amount'] = float(d.amount) if d.amount is not None else None
    data['paymentDate'] = d.payment_date.isoformat()
    data.update({
        'id': d.id,
        'hospitalId': d.hospital_id,
        'hospitalName': d.hospital.name if d.hospital else None,
        'recordedBy': d.recorded_by_id,
        'createdAt': d.created_at.isoformat() if d.created_at else None,
        'updatedAt': d.updated_at.isoformat() if d.updated_at else None,
    })
    return data


def _apply(d: Donation, vd: dict) -> None:
    for key, attr in _FIELDS:
        if key in vd:
            setattr(d, attr, vd[key])
    if 'hospitalId' in vd:
        hid = vd['hospitalId']
        if hid is None:
            d.hospital = None
        else:
            d.hospital = Hospital.objects.filter(id=hid).first()
            if d.hospital is None:
                raise NotFound('Hospital not found')


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def donations_collection(request):
    if request.method == 'GET':
        qs = Donation.objects.select_related('hospital').order_by('-payment_date', '-id')
        return Response([_serialize(d) for d in qs])
    s = DonationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    d = Donation(recorded_by=request.user)
    _apply(d, s.validated_data)
    d.save()
    return Response(_serialize(d), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def donation_detail(request, pk: int):
    d = get_object_or_404(Donation.objects.select_related('hospital'), pk=pk)
    if request.method == 'GET':
        return Response(_serialize(d))
    if request.method == 'PUT':
        s = DonationSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        _apply(d, s.validated_data)
        d.save()
        return Response(_serialize(d))
    d.delete()
    return Response({'success': True})
