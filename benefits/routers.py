"""
URL mappings for the health card API.

Paths are served without trailing slashes (``APPEND_SLASH = False``).
The literal ``lookup`` and ``public`` card routes are listed before the
``<int:pk>`` route they would otherwise shadow.
"""
from django.urls import include, path

from .auth_views import jwt_logout_view, jwt_refresh_view, login_view
from .views import health
from .views.accounts import agents, hospital_detail, hospitals_collection
from .views.beneficiaries import beneficiaries_collection, beneficiary_detail
from .views.cards import card_detail, card_lookup, cards_collection, public_card, public_card_search
from .views.dashboard import agent_dashboard_view
from .views.donations import donation_detail, donations_collection
from .views.households import household_detail, households_collection
from .views.plans import plans

urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),
    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout'),
    # Cards
    path('api/cards', cards_collection, name='cards'),
    path('api/cards/lookup', card_lookup, name='card_lookup'),
    path('api/cards/public/search', public_card_search, name='public_card_search'),
    path('api/cards/public/<str:card_number>', public_card, name='public_card'),
    path('api/cards/<int:pk>', card_detail, name='card_detail'),
    # Households
    path('api/households', households_collection, name='households'),
    path('api/households/<int:pk>', household_detail, name='household_detail'),
    # Plans
    path('api/plans', plans, name='plans'),
    # Hospitals and agents
    path('api/hospitals', hospitals_collection, name='hospitals'),
    path('api/hospitals/<int:pk>', hospital_detail, name='hospital_detail'),
    path('api/agents', agents, name='agents'),
    # Donations
    path('api/donations', donations_collection, name='donations'),
    path('api/donations/<int:pk>', donation_detail, name='donation_detail'),
    # Beneficiaries
    path('api/beneficiaries', beneficiaries_collection, name='beneficiaries'),
    path('api/beneficiaries/<int:pk>', beneficiary_detail, name='beneficiary_detail'),
    # Dashboard
    path('api/agent/dashboard', agent_dashboard_view, name='agent_dashboard'),
]
