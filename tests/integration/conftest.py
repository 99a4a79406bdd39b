import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean.integrations.fastapi import register_exception_handlers

from storefront.api import ROUTERS
from storefront.api.security import issue_token


@pytest.fixture()
def client():
    app = FastAPI()
    register_exception_handlers(app)
    for router in ROUTERS:
        app.include_router(router)
    return TestClient(app)


@pytest.fixture()
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {issue_token(user)}"}

    return _headers


@pytest.fixture()
def customer_headers(customer, auth_headers):
    return auth_headers(customer)


@pytest.fixture()
def admin_headers(admin, auth_headers):
    return auth_headers(admin)
