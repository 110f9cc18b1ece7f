"""
Marketplace Service Layer

Business logic for projects, listings and reviews. Views obtain instances
through ``infrastructure.container.container`` rather than constructing them.

Services:
- ProjectLifecycleService: project CRUD and the review state machine
- ListingService: marketplace listings, browse/search and direct purchase
- ProjectMediaService: image uploads
- ReviewService: buyer reviews

Usage:
    from infrastructure.container import container

    result = container.lifecycle_service().submit_project(caller, project_id)
    if not result.ok:
        return error_response(result)
"""

from .base import BaseService, ErrorCategory, ErrorCodes, ServiceResult, service_err, service_ok

__all__ = [
    "BaseService",
    "ErrorCategory",
    "ErrorCodes",
    "ServiceResult",
    "service_err",
    "service_ok",
]
