import logging
from typing import Awaitable, Callable, TypeVar

from app.shared.errors import DuplicateName, NotFound, TransactionFailure, ValidationError
from app.shared.repository import Store

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TransactionCoordinator:
    def __init__(self, store: Store):
        self.store = store

    async def run(self, unit_of_work: Callable[..., Awaitable[T]], description: str = "transaction") -> T:
        """
        Run unit_of_work(session) inside a store transaction.

        Domain failures raised by the unit are re-raised as they are once the
        transaction has been aborted. Anything else, including a failed commit,
        becomes TransactionFailure. Nothing is retried.
        """
        try:
            async with self.store.transaction() as session:
                return await unit_of_work(session)
        except (ValidationError, DuplicateName, NotFound) as e:
            logger.info(f"{description} aborted: {e.message}")
            raise
        except Exception as e:
            logger.error(f"{description} failed and was rolled back: {e}")
            raise TransactionFailure(f"Could not complete {description}: {e}") from e
