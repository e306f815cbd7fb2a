from abc import ABC, abstractmethod

class BaseDatabaseDriver(ABC):
    """Lifecycle contract for a database backend."""

    @abstractmethod
    async def connect(self):
        """Open or verify the connection."""

    @abstractmethod
    async def disconnect(self):
        """Release pooled connections."""

    @abstractmethod
    def get_session(self):
        """Async generator yielding one session."""
