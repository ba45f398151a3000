"""Route test fixtures — FastAPI app over a per-test in-memory store.

Invariants:
    - Every test gets its own app and its own empty store
    - get_store dependency overridden; the lifespan never runs here
    - Links are rendered against http://test/v1
"""

import pytest
from httpx import ASGITransport, AsyncClient

from payments_api.config import Settings
from payments_api.infrastructure.database import get_store
from payments_api.main import create_app


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        external_url="http://test",
        api_version="v1",
        admin_routes=True,
        max_page_size=20,
    )


@pytest.fixture
def app(settings, store):
    app = create_app(settings)
    app.dependency_overrides[get_store] = lambda: store
    yield app
    app.dependency_overrides.clear()


@pytest.fixture
async def client(app):
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c


@pytest.fixture
def payment_body():
    """Build a {"data": payment} request body."""

    def _build(
        payment_id: str = "p1",
        amount: str = "10.00",
        version: int = 0,
        organisation: str = "org1",
        **attributes,
    ) -> dict:
        return {
            "data": {
                "id": payment_id,
                "type": "Payment",
                "version": version,
                "organisation_id": organisation,
                "attributes": {"amount": amount, **attributes},
            },
        }

    return _build
