"""Bounded retry around units of work that lose an optimistic-lock race.

Protean aggregates carry a version; persisting an aggregate whose stored
version moved since it was read raises ``ExpectedVersionError``. Every
storefront transaction re-reads its inputs, so re-running it is safe.
"""

from protean.exceptions import ExpectedVersionError
from protean.utils.globals import current_domain
from sqlalchemy.exc import SQLAlchemyError

from storefront.domain import logger, setting
from storefront.shared.errors import StoreUnavailable


def run_with_retry(fn, *args, label=None, **kwargs):
    attempts = int(setting("transaction_attempts", 3))
    label = label or getattr(fn, "__name__", "transaction")

    for attempt in range(1, attempts + 1):
        try:
            return fn(*args, **kwargs)
        except ExpectedVersionError as exc:
            logger.warning("transaction_conflict", transaction=label, attempt=attempt, error=str(exc))
        except SQLAlchemyError as exc:
            logger.error("store_error", transaction=label, error=str(exc))
            raise StoreUnavailable() from exc

    raise StoreUnavailable(f"Could not complete {label} after {attempts} attempts. Please try again.")


def process(command):
    """Process ``command`` synchronously, retrying on version conflicts."""
    return run_with_retry(
        current_domain.process,
        command,
        asynchronous=False,
        label=command.__class__.__name__,
    )
