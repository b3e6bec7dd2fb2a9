"""Base service class."""

from typing import Generic, TypeVar

from treetable.repository.repository import Repository

T = TypeVar("T", bound=Repository)


class BaseService(Generic[T]):
    """Base service that takes a repository."""

    def __init__(self, repository: T):
        """Initialize service with repository."""
        self.repository = repository
