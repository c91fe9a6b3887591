"""Dependency injection for API routes.

Stores and services are built once from settings and reused across
requests. Tests call ``reset_dependencies`` for fresh instances or use
``app.dependency_overrides``.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from navgraph.audit import AuditService
from navgraph.audit.store import AuditStore
from navgraph.audit.stores import InMemoryAuditStore
from navgraph.config.loader import load_config
from navgraph.config.settings import Settings, set_toml_config
from navgraph.context import ContextManager
from navgraph.context.store import SessionStore
from navgraph.context.stores import InMemorySessionStore
from navgraph.graph.eligibility import EligibilityCache, EligibilityEvaluator, PredicateRegistry
from navgraph.graph.loader import load_graph_dir
from navgraph.graph.store import GraphStore
from navgraph.graph.stores import InMemoryGraphStore
from navgraph.observability.logging import get_logger
from navgraph.orchestration import AIOrchestrationService
from navgraph.providers.llm import create_executor_from_config
from navgraph.runtime import NavigationService

logger = get_logger(__name__)

_graph_store: GraphStore | None = None
_session_store: SessionStore | None = None
_audit_store: AuditStore | None = None
_predicate_registry: PredicateRegistry | None = None
_navigation_service: NavigationService | None = None


@lru_cache
def get_settings() -> Settings:
    """Get application settings.

    Loads configuration from TOML files and environment variables.
    Cached to avoid reloading on every request.
    """
    try:
        set_toml_config(load_config())
    except FileNotFoundError:
        logger.warning("config_file_not_found", msg="Using default configuration")
        set_toml_config({})

    return Settings()


def get_graph_store() -> GraphStore:
    global _graph_store
    if _graph_store is None:
        _graph_store = InMemoryGraphStore()
        logger.info("graph_store_initialized", store_type="inmemory")
    return _graph_store


def get_session_store() -> SessionStore:
    global _session_store
    if _session_store is None:
        _session_store = InMemorySessionStore()
        logger.info("session_store_initialized", store_type="inmemory")
    return _session_store


def get_audit_store() -> AuditStore:
    global _audit_store
    if _audit_store is None:
        _audit_store = InMemoryAuditStore()
        logger.info("audit_store_initialized", store_type="inmemory")
    return _audit_store


def get_predicate_registry() -> PredicateRegistry:
    """Registry shared by the API's evaluator.

    Applications register their predicates on this instance before the
    first request, or before graphs that reference them are loaded.
    """
    global _predicate_registry
    if _predicate_registry is None:
        _predicate_registry = PredicateRegistry()
    return _predicate_registry


async def get_navigation_service(
    settings: Annotated[Settings, Depends(get_settings)],
) -> NavigationService:
    """Get the NavigationService instance.

    Wires the eligibility evaluator, AI orchestration, and stores from
    settings. Graph files under ``storage.graph_dir`` are registered on
    first access.
    """
    global _navigation_service
    if _navigation_service is None:
        engine_config = settings.engine
        cache = None
        if engine_config.eligibility_cache_enabled:
            cache = EligibilityCache(
                ttl_seconds=engine_config.eligibility_cache_ttl_seconds,
                max_entries=engine_config.eligibility_cache_max_entries,
            )
        evaluator = EligibilityEvaluator(registry=get_predicate_registry(), cache=cache)

        orchestration_config = settings.orchestration
        executor = None
        if orchestration_config.enabled:
            executor = create_executor_from_config(orchestration_config)

        service = NavigationService(
            graph_store=get_graph_store(),
            context_manager=ContextManager(get_session_store(), eligibility_cache=cache),
            orchestrator=AIOrchestrationService(executor, config=orchestration_config),
            audit=AuditService(get_audit_store()),
            evaluator=evaluator,
            engine_config=engine_config,
        )

        if settings.storage.graph_dir:
            for graph in load_graph_dir(settings.storage.graph_dir):
                await service.register_graph(graph)

        _navigation_service = service
        logger.info(
            "navigation_service_initialized",
            model=orchestration_config.model if executor else None,
            cache_enabled=cache is not None,
        )
    return _navigation_service


# Type aliases for dependency injection
SettingsDep = Annotated[Settings, Depends(get_settings)]
GraphStoreDep = Annotated[GraphStore, Depends(get_graph_store)]
SessionStoreDep = Annotated[SessionStore, Depends(get_session_store)]
AuditStoreDep = Annotated[AuditStore, Depends(get_audit_store)]
NavigationServiceDep = Annotated[NavigationService, Depends(get_navigation_service)]


def reset_dependencies() -> None:
    """Reset all cached dependencies.

    Used for testing to ensure fresh instances.
    """
    global _graph_store, _session_store, _audit_store
    global _predicate_registry, _navigation_service

    _graph_store = None
    _session_store = None
    _audit_store = None
    _predicate_registry = None
    _navigation_service = None
    get_settings.cache_clear()
