from marketplace.catalog.domain.models import Project, ProjectCategory, ProjectStatus, Review


__all__ = [
    "Project",
    "ProjectCategory",
    "ProjectStatus",
    "Review",
]
