"""Application composition: build stores, engines and the HTTP app from config."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from sqlalchemy import create_engine

from semprops.adapters.memory import InMemoryPropertyRegistry, InMemoryPropertyStore
from semprops.adapters.sqlalchemy import SqlAlchemyPropertyStore, create_all_tables
from semprops.adapters.wikitext import FilesystemPageSource, WikitextPropertyStore
from semprops.api import SemanticPropertyHandlers, TokenAuthorizer, create_app
from semprops.config import (
    ApiConfig,
    Backend,
    get_api_config,
    get_database_config,
    get_storage_config,
)
from semprops.domain.formatting import ValueFormatter
from semprops.domain.model import PropertyType
from semprops.domain.normalize import PropertyKeyNormalizer
from semprops.domain.ports import PropertyStore
from semprops.domain.reconciliation import ReconciliationEngine

if TYPE_CHECKING:
    from fastapi import FastAPI

    from semprops.config import StorageConfig
    from semprops.domain.model import Entity

log = getLogger(__name__)


class SemanticStore(PropertyStore, Protocol):
    """A property store that also manages the pages facts attach to."""

    def create_page(self, entity: Entity) -> bool: ...

    def page_exists(self, title: str) -> bool: ...


def build_store(
    config: ApiConfig | None = None,
    *,
    storage: StorageConfig | None = None,
) -> SemanticStore:
    """Create the store selected by ``config.backend``."""

    api_config = config or get_api_config()
    match api_config.backend:
        case Backend.MEMORY:
            registry = InMemoryPropertyRegistry(default_type_id=api_config.undeclared_type_id)
            return InMemoryPropertyStore(registry)
        case Backend.WIKITEXT:
            storage_config = storage or get_storage_config()
            registry = InMemoryPropertyRegistry(
                default_type_id=api_config.undeclared_type_id or PropertyType.TEXT
            )
            pages = FilesystemPageSource(storage_config.pages_dir())
            log.info("Using wikitext pages in %s", pages.root)
            return WikitextPropertyStore(
                pages,
                registry,
                normalizer=PropertyKeyNormalizer(api_config.namespace_prefixes),
            )
        case Backend.SQLALCHEMY:
            database = get_database_config(storage=storage)
            engine = create_engine(database.uri, future=True)
            create_all_tables(engine)
            return SqlAlchemyPropertyStore(engine, default_type_id=api_config.undeclared_type_id)


def build_engine(store: PropertyStore, config: ApiConfig | None = None) -> ReconciliationEngine:
    api_config = config or get_api_config()
    return ReconciliationEngine(
        store=store,
        normalizer=PropertyKeyNormalizer(api_config.namespace_prefixes),
    )


def build_handlers(
    store: SemanticStore,
    config: ApiConfig | None = None,
) -> SemanticPropertyHandlers:
    api_config = config or get_api_config()
    formatter = ValueFormatter(article_path=api_config.article_path, page_exists=store.page_exists)
    return SemanticPropertyHandlers(engine=build_engine(store, api_config), formatter=formatter)


def create_api(
    config: ApiConfig | None = None,
    *,
    store: SemanticStore | None = None,
) -> FastAPI:
    """Build the FastAPI application; serve it with any ASGI server."""

    api_config = config or get_api_config()
    effective_store = store if store is not None else build_store(api_config)
    if not api_config.edits_enabled:
        log.warning("No edit token configured and anonymous edits disabled; API is read-only")
    authorizer = TokenAuthorizer(
        edit_token=api_config.edit_token,
        allow_anonymous_edits=api_config.allow_anonymous_edits,
    )
    return create_app(build_handlers(effective_store, api_config), authorizer)
