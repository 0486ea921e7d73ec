"""
Dependency Injection container for the oceandata_sync component.

This container uses the `dependency-injector` library to wire together all
the components of the application, such as handlers, services and
infrastructure adapters, based on the application's configuration.
"""

from dependency_injector import containers, providers
import httpx

from ..application.domain import *
from ..application.handlers import OceandataHandler
from ..application.registry import HandlerRegistry
from ..application.service import SyncService
from ..settings import settings

from .downloader import HttpDownloader
from .hashing import FileHasher
from .search_client import HttpFileLister


class Container(containers.DeclarativeContainer):
    """DI container for wiring the application components."""

    config = providers.Object(settings)

    http_client = providers.Singleton(httpx.AsyncClient, follow_redirects=True)

    file_lister: providers.Factory[FileLister] = providers.Factory(
        HttpFileLister,
        client=http_client,
        search_url=config.provided.oceandata.search_url,
        timeout=config.provided.http.timeout,
    )

    downloader: providers.Factory[Downloader] = providers.Factory(
        HttpDownloader,
        client=http_client,
        timeout=config.provided.http.timeout,
        chunk_size=config.provided.downloader.chunk_size,
        show_progress=config.provided.downloader.show_progress,
    )

    hasher: providers.Factory[Hasher] = providers.Factory(
        FileHasher,
        algorithm=config.provided.hasher.algorithm,
        chunk_size=config.provided.hasher.chunk_size,
    )

    sync_service = providers.Factory(
        SyncService,
        downloader=downloader,
        hasher=hasher,
        getfile_url=config.provided.oceandata.getfile_url,
        show_progress=config.provided.downloader.show_progress,
    )

    oceandata_handler: providers.Factory[Handler] = providers.Factory(
        OceandataHandler,
        lister=file_lister,
        sync_service=sync_service,
        host=config.provided.oceandata.host,
    )

    handler_registry = providers.Singleton(
        HandlerRegistry,
        oceandata=oceandata_handler.provider,
    )
