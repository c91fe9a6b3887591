"""Fixtures for API tests.

The navigation service is overridden with one backed by a scripted
MockLLMProvider so tests control the AI's answers.
"""

from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from navgraph.api.app import create_app
from navgraph.api.dependencies import (
    get_audit_store,
    get_graph_store,
    get_navigation_service,
    get_session_store,
    reset_dependencies,
)
from navgraph.audit import AuditService
from navgraph.context import ContextManager
from navgraph.graph.eligibility import EligibilityCache, EligibilityEvaluator
from navgraph.orchestration import AIOrchestrationService
from navgraph.providers.llm import MockLLMProvider
from navgraph.runtime import NavigationService
from tests.factories import GraphFactory


@pytest.fixture
def api_config(
    test_config_dir: Path,
    mock_toml_files: Callable[[dict[str, str]], None],
    monkeypatch: pytest.MonkeyPatch,
) -> Path:
    mock_toml_files({"default.toml": '[observability.logging]\nlevel = "WARNING"\n'})
    monkeypatch.setenv("NAVGRAPH_CONFIG_DIR", str(test_config_dir))
    monkeypatch.setenv("NAVGRAPH_ENV", "test")
    return test_config_dir


@pytest.fixture
def llm() -> MockLLMProvider:
    return MockLLMProvider()


@pytest.fixture
def app(api_config: Path, llm: MockLLMProvider) -> Generator[FastAPI, None, None]:
    reset_dependencies()
    application = create_app()

    cache = EligibilityCache()
    service = NavigationService(
        graph_store=get_graph_store(),
        context_manager=ContextManager(get_session_store(), eligibility_cache=cache),
        orchestrator=AIOrchestrationService(llm),
        audit=AuditService(get_audit_store()),
        evaluator=EligibilityEvaluator(cache=cache),
    )
    application.dependency_overrides[get_navigation_service] = lambda: service

    yield application

    application.dependency_overrides.clear()
    reset_dependencies()


@pytest.fixture
def client(app: FastAPI) -> Generator[TestClient, None, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def onboarding(client: TestClient) -> dict:
    """Register the onboarding graph and return its JSON body."""
    body = GraphFactory.onboarding().model_dump(mode="json")
    response = client.put("/v1/graphs/onboarding", json=body)
    assert response.status_code == 200
    return body
