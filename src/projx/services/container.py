"""Service container with DI wiring."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from projx.data.db import Database
from projx.data.discovery import FileLister, ProjectRegistry
from projx.data.search import GrepSearcher
from projx.data.workspace import WorkspaceStore
from projx.services.associations import AssociationEngine
from projx.services.project_service import ProjectService
from projx.services.scoped_ops import ScopedOperationExecutor
from projx.services.selection import make_selector

if TYPE_CHECKING:
    from projx.config import Config


@dataclass
class ServiceContainer:
    """Holds all services for one command invocation."""

    db: Database
    workspace: WorkspaceStore
    registry: ProjectRegistry
    engine: AssociationEngine
    executor: ScopedOperationExecutor
    project_service: ProjectService

    @classmethod
    async def create(cls, config: Config) -> ServiceContainer:
        """Async factory that wires all dependencies.

        Known projects are rediscovered on every call: the configured project
        directories are scanned and every open buffer's project is detected.
        """
        selector = make_selector(config)
        db = Database(config.db_path)
        await db.connect()
        workspace = WorkspaceStore(db)

        registry = ProjectRegistry()
        registry.scan(config.project_dirs)
        for buffer in await workspace.list_buffers():
            if buffer.path is not None:
                registry.detect(buffer.path)

        engine = AssociationEngine(registry, workspace)
        executor = ScopedOperationExecutor(
            engine=engine,
            registry=registry,
            workspace=workspace,
            selector=selector,
            file_lister=FileLister(),
            searcher=GrepSearcher(),
        )
        project_service = ProjectService(engine, executor, registry, workspace)

        return cls(
            db=db,
            workspace=workspace,
            registry=registry,
            engine=engine,
            executor=executor,
            project_service=project_service,
        )

    async def close(self) -> None:
        """Shut down all services."""
        await self.db.close()
