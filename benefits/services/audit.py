from typing import Any, Dict, Optional

from benefits.models import AuditLog, Card, User


def log_action(*, user: User, action: str, card: Optional[Card] = None,
               metadata: Optional[Dict[str, Any]] = None) -> AuditLog:
    if user is None or getattr(user, 'pk', None) is None:
        raise ValueError('audit entries need an acting user')
    return AuditLog.objects.create(user=user, card=card, action=action, metadata=metadata or {})
