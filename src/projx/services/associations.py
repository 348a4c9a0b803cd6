"""Association engine: which live buffers belong to which project."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from projx.errors import NoProjectsError
from projx.models.projects import ProjectSummary

if TYPE_CHECKING:
    from projx.data.protocols import ProjectRegistryProtocol, ResourceEnumeratorProtocol
    from projx.models.buffers import Buffer

logger = logging.getLogger(__name__)

type AssociationTable = dict[str, list[Buffer]]
type NameRootIndex = dict[str, str]


class AssociationEngine:
    """Builds project/buffer associations on demand; nothing is cached."""

    def __init__(
        self,
        registry: ProjectRegistryProtocol,
        resources: ResourceEnumeratorProtocol,
    ) -> None:
        self._registry = registry
        self._resources = resources

    async def build_associations(self) -> AssociationTable:
        """Map every known project root to its live buffers, in enumeration order.

        Buffers that visit no file, or a file outside every known project, are
        not part of any project and are skipped.

        Raises:
            NoProjectsError: the registry declares no projects.
        """
        roots = self._registry.known_roots()
        if not roots:
            raise NoProjectsError()
        table: AssociationTable = {root: [] for root in roots}
        for buffer in await self._resources.list_buffers():
            if buffer.path is None:
                continue
            root = self._registry.root_for_path(buffer.path)
            if root is None or root not in table:
                continue
            table[root].append(buffer)
        return table

    async def name_root_index(self, *, live_only: bool = False) -> NameRootIndex:
        """Map project names to roots, optionally only for projects with buffers.

        The first root registered under a name keeps the bare name; later roots
        with the same name are indexed as ``"<name> (<root>)"``. Labels are
        assigned over every known project, so a project keeps its label
        whether or not ``live_only`` is set.
        """
        table = await self.build_associations()
        index: NameRootIndex = {}
        for root in table:
            name = self._registry.metadata(root).name
            if name in index:
                logger.warning(
                    "Project name %r is declared by both %s and %s", name, index[name], root
                )
                name = f"{name} ({root})"
            index[name] = root
        if live_only:
            return {name: root for name, root in index.items() if table[root]}
        return index

    async def project_summaries(self, *, live_only: bool = False) -> list[ProjectSummary]:
        """Projects with their buffers, sorted by name."""
        table = await self.build_associations()
        summaries: list[ProjectSummary] = []
        for root, buffers in table.items():
            if live_only and not buffers:
                continue
            metadata = self._registry.metadata(root)
            summaries.append(
                ProjectSummary(
                    name=metadata.name,
                    root=root,
                    project_type=metadata.project_type,
                    buffers=buffers,
                )
            )
        summaries.sort(key=lambda s: (s.name.lower(), s.root))
        return summaries
