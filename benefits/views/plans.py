from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Plan, User
from ..permissions import IsStaffRole
from ..serializers.plans import PlanCreateSerializer, PlanDeleteQuerySerializer, PlanUpdateSerializer
from ..services.plans import create_plan, delete_plan, format_plan, update_plan


@api_view(['GET', 'POST', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsStaffRole])
def plans(request):
    """Agents may read the plan catalogue; only administrators change it."""
    if request.method == 'GET':
        return Response([format_plan(p) for p in Plan.objects.order_by('price', 'id')])

    if request.user.role != User.ROLE_ADMIN:
        raise PermissionDenied('Only administrators can manage plans')

    if request.method == 'POST':
        s = PlanCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = s.validated_data
        plan = create_plan(
            name=vd['name'],
            description=vd.get('description', ''),
            price=vd['price'],
            duration_days=vd['durationDays'],
        )
        return Response(format_plan(plan), status=status.HTTP_201_CREATED)

    if request.method == 'PUT':
        s = PlanUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        vd = dict(s.validated_data)
        plan = update_plan(vd.pop('id'), vd)
        return Response(format_plan(plan))

    q = PlanDeleteQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    delete_plan(q.validated_data['id'])
    return Response({'success': True})
