from .project import Project, ProjectCategory, ProjectStatus
from .review import Review


__all__ = [
    "Project",
    "ProjectCategory",
    "ProjectStatus",
    "Review",
]
