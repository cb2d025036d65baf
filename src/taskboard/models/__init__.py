from taskboard.models.common import SortOrder
from taskboard.models.project import Project, ProjectCreate, ProjectUpdate
from taskboard.models.task import Task, TaskCreate, TaskStatus, TaskStatusUpdate, TaskUpdate

__all__ = [
    "Project",
    "ProjectCreate",
    "ProjectUpdate",
    "SortOrder",
    "Task",
    "TaskCreate",
    "TaskStatus",
    "TaskStatusUpdate",
    "TaskUpdate",
]
