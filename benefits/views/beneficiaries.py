from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Beneficiary, User
from ..serializers.beneficiaries import (
    BeneficiaryCreateSerializer,
    BeneficiaryListQuerySerializer,
    BeneficiaryUpdateSerializer,
)
from ..services.beneficiaries import (
    create_beneficiary,
    delete_beneficiary,
    format_beneficiary,
    get_beneficiary,
    update_beneficiary,
)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def beneficiaries_collection(request):
    if request.method == 'GET':
        q = BeneficiaryListQuerySerializer(data=request.query_params)
        q.is_valid(raise_exception=True)
        qs = Beneficiary.objects.select_related('household', 'card').prefetch_related('members')
        if q.validated_data.get('householdId'):
            qs = qs.filter(household_id=q.validated_data['householdId'])
        if q.validated_data.get('status'):
            qs = qs.filter(status=q.validated_data['status'])
        return Response([format_beneficiary(b) for b in qs.order_by('-created_at', '-id')])

    s = BeneficiaryCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    b = create_beneficiary(
        request.user,
        household_id=vd['householdId'],
        card_id=vd['cardId'],
        benefit_type=vd['benefitType'],
        amount=vd['amount'],
        description=vd.get('description', ''),
        start_date=vd['startDate'],
        end_date=vd.get('endDate'),
        member_ids=vd['memberIds'],
    )
    return Response(format_beneficiary(b), status=status.HTTP_201_CREATED)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated])
def beneficiary_detail(request, pk: int):
    if request.method == 'GET':
        return Response(format_beneficiary(get_beneficiary(pk)))
    if request.method == 'PUT':
        s = BeneficiaryUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        return Response(format_beneficiary(update_beneficiary(request.user, pk, s.validated_data)))
    if request.user.role != User.ROLE_ADMIN:
        raise PermissionDenied('Only administrators can delete beneficiaries')
    delete_beneficiary(pk)
    return Response({'success': True})
