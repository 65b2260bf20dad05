"""BaseService — foundation for all curator services.

Every service receives a :class:`Workspace` at construction time. The
workspace provides the note store, the persisted state documents, and
the settings that tune them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from curator.config.settings import CuratorSettings
    from curator.infrastructure.workspace import Workspace


class BaseService:
    """Base for all service-layer classes.

    Usage::

        class CaptureService(BaseService):
            def capture(self, text: str) -> ServiceResult:
                self._workspace.store.write(path, content)
                ...
    """

    def __init__(self, workspace: Workspace) -> None:
        self._workspace = workspace

    @property
    def settings(self) -> CuratorSettings:
        return self._workspace.settings
