import pytest
from app.main import app
from app.auth import deps as auth_deps
from app.routers import coverage as coverage_router
from app.services.coverage import InMemoryCoverageStore


@pytest.fixture
def store():
    return InMemoryCoverageStore()


@pytest.fixture(autouse=True)
def override_deps(store):
    app.dependency_overrides[auth_deps.get_current_user_id] = lambda: "test-user"
    app.dependency_overrides[coverage_router.get_coverage_store] = lambda: store
    coverage_router.calculator.lifestyle_cache.clear()
    yield
    app.dependency_overrides.pop(auth_deps.get_current_user_id, None)
    app.dependency_overrides.pop(coverage_router.get_coverage_store, None)
