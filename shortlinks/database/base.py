"""Abstract base class for link store implementations."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Awaitable, List, Optional, TypeVar

from ..errors import StoreUnavailable
from .models import Link

T = TypeVar("T")


class LinkStore(ABC):
    """Abstract base class for link persistence.

    Implementations must enforce uniqueness of ``short_code`` with a
    constraint in the backend itself and perform every mutation as a single
    atomic statement. No application-level locks are held across calls.
    """

    def __init__(
        self,
        db_config: str,
        operation_timeout: float = 5.0,
        create_tables: bool = True,
        logger: Optional[logging.Logger] = None,
    ):
        """Initialize store.

        Args:
            db_config: Database connection string
            operation_timeout: Seconds before an operation is abandoned
                and reported as ``StoreUnavailable``
            create_tables: Create the schema on ``connect`` if missing
            logger: Optional logger instance
        """
        self.db_config = db_config
        self.operation_timeout = operation_timeout
        self.create_tables = create_tables
        self.logger = logger or logging.getLogger(__name__)

    async def _run(self, operation: Awaitable[T]) -> T:
        """Await a backend operation under the store timeout.

        Timeouts and errors the backend reports as transient are raised as
        ``StoreUnavailable``; everything else propagates unchanged.
        """
        try:
            return await asyncio.wait_for(operation, timeout=self.operation_timeout)
        except asyncio.TimeoutError as e:
            self.logger.error(
                f"Store operation timed out after {self.operation_timeout}s"
            )
            raise StoreUnavailable(
                f"Store operation timed out after {self.operation_timeout}s"
            ) from e
        except Exception as e:
            if self._is_transient(e):
                self.logger.error(f"Transient store error: {e}")
                raise StoreUnavailable(str(e)) from e
            raise

    def _is_transient(self, error: Exception) -> bool:
        """Return True if ``error`` is worth retrying."""
        return isinstance(error, (ConnectionError, OSError))

    @abstractmethod
    async def connect(self) -> None:
        """Open connections and create the schema if enabled."""
        pass

    @abstractmethod
    async def insert(self, original_url: str, short_code: str, owner_id: str) -> Link:
        """Insert a new link.

        The uniqueness of ``short_code`` is checked by the insert itself,
        never by a prior lookup.

        Args:
            original_url: The target URL
            short_code: Candidate short code
            owner_id: Identifier of the creating user

        Returns:
            The stored link with its assigned id

        Raises:
            CollisionError: If ``short_code`` already exists
            StoreUnavailable: On timeout or transient failure
        """
        pass

    @abstractmethod
    async def find_by_code(self, short_code: str) -> Optional[Link]:
        """Get the link for a short code.

        Args:
            short_code: The short code to lookup

        Returns:
            The link if found, None otherwise
        """
        pass

    @abstractmethod
    async def list_by_owner(self, owner_id: str) -> List[Link]:
        """List links created by an owner, oldest first.

        Args:
            owner_id: Identifier of the owning user

        Returns:
            Links in insertion order
        """
        pass

    @abstractmethod
    async def increment_clicks(self, link_id: int) -> None:
        """Increment the click count of a link by exactly one.

        Args:
            link_id: Id of the link to update

        Raises:
            LinkNotFoundError: If no link has that id
            StoreUnavailable: On timeout or transient failure
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check if the store is healthy.

        Returns:
            True if healthy, False otherwise
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Close database connections."""
        pass
