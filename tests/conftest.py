import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Select the config overlay before the storefront domain is imported, since
    the domain reads ``PROTEAN_ENV`` when it is constructed.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


@pytest.fixture(scope="session")
def storefront_bed():
    from protean.integrations.pytest import DomainFixture

    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(scope="session", autouse=True)
def setup_db(storefront_bed):
    from storefront.domain import storefront
    from storefront.utils.db import drop_db, setup_db

    setup_db(storefront)

    yield

    drop_db(storefront)


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    """Run every test inside the domain context, then wipe all stores."""
    with storefront_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


@pytest.fixture
def make_product():
    """Create a product through the admin path and return it."""
    from storefront import operations

    def _make(**overrides):
        values = {
            "name": "Test Phone",
            "description": "<p>A phone for tests.</p>",
            "price": 100,
            "stock": 10,
            "category": "Phone",
            "image_url": "https://example.com/phone.jpg",
        }
        values.update(overrides)
        outcome = operations.create_product(**values)
        assert outcome.ok, outcome.reason
        return outcome.value

    return _make


@pytest.fixture
def make_user():
    """Register a shopper and return it."""
    from storefront import operations

    counter = {"n": 0}

    def _make(name="Shopper", email=None, password="secret1"):
        counter["n"] += 1
        outcome = operations.register_user(name, email or f"shopper{counter['n']}@example.com", password)
        assert outcome.ok, outcome.reason
        return outcome.value

    return _make
