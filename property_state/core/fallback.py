import logging
from typing import Awaitable, Callable, List, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Attempt = Callable[[], Awaitable[Sequence[T]]]


class DegradeToEmpty:
    """Availability-first read policy.

    Runs each attempt in order and returns the first result that does not
    raise. When every attempt fails the caller gets an empty list, so a
    storage fault is indistinguishable from "no results" on the wire. Each
    failure is logged with the attempt name.
    """

    def __init__(self, name: str):
        self.name = name

    async def run(self, *attempts: tuple[str, Attempt]) -> List[T]:
        for label, attempt in attempts:
            try:
                return list(await attempt())
            except Exception as e:
                logger.warning(
                    "[%s] %s attempt failed, degrading: %s", self.name, label, e
                )
        return self.exhausted()

    def exhausted(self, reason: str | None = None) -> List[T]:
        if reason:
            logger.warning("[%s] %s", self.name, reason)
        logger.error("[%s] all attempts failed, returning an empty result", self.name)
        return []
