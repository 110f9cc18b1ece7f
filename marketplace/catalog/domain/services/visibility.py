"""
Read visibility for projects.

=========  ===============================  ===========================
Caller     Sees                             ``status`` filter
=========  ===============================  ===========================
anonymous  approved                         ignored
user       approved, plus own (any status)  narrows own projects only
admin      everything                       narrows everything
=========  ===============================  ===========================

The same ``Q`` backs both the list and the single-project fetch.
"""

from typing import Optional

from django.db.models import Q

from marketplace.catalog.domain.models import ProjectStatus
from utils.rbac import Caller

# Older clients still send the pre-rename entry state
STATUS_ALIASES = {"pending": ProjectStatus.DRAFT}


def normalize_status(status: Optional[str]) -> Optional[str]:
    if not status:
        return None
    status = STATUS_ALIASES.get(status, status)
    if status not in ProjectStatus.values:
        raise ValueError(f"Unknown project status '{status}'")
    return status


def visibility_filter(caller: Caller, status: Optional[str] = None) -> Q:
    """Build the queryset filter of projects ``caller`` may read."""
    status = normalize_status(status)
    approved = Q(status=ProjectStatus.APPROVED)

    if caller.is_admin:
        return Q(status=status) if status else Q()

    if not caller.is_authenticated:
        return approved

    own = Q(owner_id=caller.user_id)
    if status:
        own &= Q(status=status)
    return approved | own
