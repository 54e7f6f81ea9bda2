import logging

from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError, transaction
from rest_framework.exceptions import NotFound, ValidationError

from benefits.exceptions import Conflict
from benefits.models import Hospital, User

logger = logging.getLogger(__name__)


def _check_password(password: str, user=None) -> None:
    try:
        validate_password(password, user=user)
    except DjangoValidationError as e:
        raise ValidationError({'password': e.messages})


def _split_name(name: str):
    first, _, last = (name or '').strip().partition(' ')
    return first, last


def format_user(user: User) -> dict:
    return {
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'name': user.display_name,
        'role': user.role,
        'createdAt': user.created_at.isoformat() if user.created_at else None,
    }


def format_hospital(h: Hospital) -> dict:
    return {
        'id': h.id,
        'name': h.name,
        'address': h.address,
        'phone': h.phone,
        'licenseNo': h.license_no,
        'user': format_user(h.user),
        'createdAt': h.created_at.isoformat() if h.created_at else None,
        'updatedAt': h.updated_at.isoformat() if h.updated_at else None,
    }


def create_agent(*, name: str, email: str, password: str) -> User:
    if User.objects.filter(username__iexact=email).exists():
        raise Conflict('A user with this email already exists')
    _check_password(password)
    first, last = _split_name(name)
    user = User.objects.create_user(
        username=email, email=email, password=password,
        first_name=first, last_name=last, role=User.ROLE_OFFICE_AGENT,
    )
    logger.info('office agent %s created', user.id)
    return user


def create_hospital(*, name: str, license_no: str, email: str, password: str,
                    address: str = '', phone: str = '', user_name: str = '') -> Hospital:
    """Create the HOSPITAL_USER login and the hospital row together."""
    if User.objects.filter(username__iexact=email).exists():
        raise Conflict('A user with this email already exists')
    if Hospital.objects.filter(license_no=license_no).exists():
        raise Conflict('A hospital with this license number already exists')
    _check_password(password)
    first, last = _split_name(user_name or name)
    try:
        with transaction.atomic():
            user = User.objects.create_user(
                username=email, email=email, password=password,
                first_name=first, last_name=last, role=User.ROLE_HOSPITAL_USER,
            )
            hospital = Hospital.objects.create(
                user=user, name=name, address=address, phone=phone, license_no=license_no,
            )
    except IntegrityError:
        raise Conflict('Hospital or user already exists')
    logger.info('hospital %s created with user %s', hospital.id, user.id)
    return hospital


def get_hospital(hospital_id: int) -> Hospital:
    h = Hospital.objects.select_related('user').filter(id=hospital_id).first()
    if not h:
        raise NotFound('Hospital not found')
    return h


def update_hospital(hospital_id: int, data: dict) -> Hospital:
    h = get_hospital(hospital_id)
    user = h.user
    if 'licenseNo' in data and Hospital.objects.filter(license_no=data['licenseNo']).exclude(id=h.id).exists():
        raise Conflict('A hospital with this license number already exists')
    if 'email' in data and User.objects.filter(username__iexact=data['email']).exclude(id=user.id).exists():
        raise Conflict('A user with this email already exists')
    if data.get('password'):
        _check_password(data['password'], user=user)
    with transaction.atomic():
        for field, attr in (('name', 'name'), ('address', 'address'), ('phone', 'phone'), ('licenseNo', 'license_no')):
            if field in data:
                setattr(h, attr, data[field])
        h.save()
        if 'email' in data:
            user.username = data['email']
            user.email = data['email']
        if data.get('userName'):
            user.first_name, user.last_name = _split_name(data['userName'])
        if data.get('password'):
            user.set_password(data['password'])
        user.save()
    return h


def delete_hospital(hospital_id: int) -> None:
    h = get_hospital(hospital_id)
    # Removing the login cascades to the hospital row
    h.user.delete()
    logger.info('hospital %s deleted', hospital_id)
