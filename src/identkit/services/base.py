"""BaseResolver — shared foundation for identkit resolvers.

Every resolver receives a :class:`HostCatalog` (defaulting to the live
interpreter) and settings at construction time. Resolvers hold no mutable
state of their own and are safe to share between threads.
"""

from __future__ import annotations

import logging

from identkit.config.settings import IdentkitSettings
from identkit.infrastructure.catalog import HostCatalog, RuntimeCatalog

logger = logging.getLogger(__name__)


class BaseResolver:
    """Abstract base for resolver classes.

    Usage::

        class ModuleResolver(BaseResolver):
            def resolve(self, identity: ModuleIdentity) -> LoadedModule | None:
                for entry in self._catalog.loaded_modules():
                    ...
    """

    def __init__(
        self,
        catalog: HostCatalog | None = None,
        *,
        settings: IdentkitSettings | None = None,
    ) -> None:
        self._settings = settings or IdentkitSettings()
        self._catalog = catalog if catalog is not None else RuntimeCatalog.from_settings(self._settings)

    @property
    def catalog(self) -> HostCatalog:
        return self._catalog

    @property
    def settings(self) -> IdentkitSettings:
        return self._settings
