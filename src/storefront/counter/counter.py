"""Identity counter — monotonically increasing numeric ids per entity type.

The document store has no auto-increment, so each entity type owns a counter
row holding the next id to issue. Issuing an id is its own unit of work; it is
never part of the caller's transaction, so an id minted for a transaction that
later fails is simply abandoned.
"""

from protean.core.unit_of_work import UnitOfWork
from protean.exceptions import ObjectNotFoundError
from protean.fields import Integer, String
from protean.utils.globals import current_domain

from storefront.domain import logger, storefront
from storefront.shared.transaction import run_with_retry

START_VALUE = 1
ENTITY_TYPES = ("users", "products", "orders")


@storefront.aggregate
class Counter:
    name: String(identifier=True, max_length=50)
    value: Integer(required=True, min_value=START_VALUE, default=START_VALUE)

    def issue(self) -> int:
        issued = self.value
        self.value = issued + 1
        return issued


def _increment(entity_type: str) -> int:
    with UnitOfWork():
        repo = current_domain.repository_for(Counter)
        try:
            counter = repo.get(entity_type)
        except ObjectNotFoundError:
            counter = Counter(name=entity_type, value=START_VALUE)

        issued = counter.issue()
        repo.add(counter)

    return issued


def next_id(entity_type: str) -> int:
    """Issue the next id for ``entity_type``.

    Raises ``StoreUnavailable`` when the increment cannot be committed.
    """
    issued = run_with_retry(_increment, entity_type, label=f"next_id:{entity_type}")
    logger.debug("id_issued", entity_type=entity_type, value=issued)
    return issued


def ensure_counters() -> None:
    """Create the counter rows that do not exist yet."""
    repo = current_domain.repository_for(Counter)
    for entity_type in ENTITY_TYPES:
        try:
            repo.get(entity_type)
        except ObjectNotFoundError:
            repo.add(Counter(name=entity_type, value=START_VALUE))
            logger.info("counter_initialised", entity_type=entity_type)
