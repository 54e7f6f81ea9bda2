from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..permissions import IsStaffRole
from ..services.dashboard import agent_dashboard


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsStaffRole])
def agent_dashboard_view(request):
    """Household and card counts for the signed-in agent (60s cache)."""
    return Response(agent_dashboard(request.user))
