from taskboard.repositories.projects import ProjectRepository
from taskboard.repositories.tasks import TaskRepository

__all__ = ["ProjectRepository", "TaskRepository"]
