"""Site — the single dependency injected into every service.

Owns the resolved directories (content, assets, output), the asset store
and the plugin manager. Holds no documents: each publish cycle builds its
own :class:`~pubctl.infrastructure.registry.Registry` from the files on
disk.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from pubctl.infrastructure.filesystem import AssetStore, find_source_files

if TYPE_CHECKING:
    from pubctl.config.settings import PubSettings
    from pubctl.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class Site:
    """Filesystem and plugin access for one project root.

    Constructed once at CLI startup from :class:`PubSettings`. Services
    receive the Site via their :class:`BaseService` constructor.
    """

    def __init__(self, settings: PubSettings) -> None:
        self._settings = settings
        self._assets = AssetStore(settings.asset_root)
        self._plugins: PluginManager | None = None

    @property
    def root(self) -> Path:
        """The project root directory."""
        return self._settings.site_root

    @property
    def settings(self) -> PubSettings:
        return self._settings

    @property
    def content_root(self) -> Path:
        return self._settings.content_root

    @property
    def output_dir(self) -> Path:
        return self._settings.output_dir

    @property
    def assets(self) -> AssetStore:
        return self._assets

    @property
    def plugins(self) -> PluginManager:
        """The plugin manager (discovered lazily on first access)."""
        if self._plugins is None:
            self._plugins = self._init_plugins()
        return self._plugins

    def _init_plugins(self) -> PluginManager:
        """Create the PluginManager, discover plugins, register built-ins."""
        from pubctl.plugins.builtins.manifest import ManifestPlugin
        from pubctl.plugins.manager import PluginManager

        pm = PluginManager()
        names = pm.discover_and_load(
            local_dir=self._settings.resolve(self._settings.plugins.local_dir),
            entry_points=self._settings.plugins.entry_points,
        )
        if self._settings.publish.manifest:
            pm.register_plugin(ManifestPlugin(site_root=self.root), name="manifest-builtin")
        logger.debug("Plugins loaded: %s", names)
        return pm

    def find_sources(self) -> list[Path]:
        """Discover source files under the content root."""
        return find_source_files(self.content_root, exclude=self._settings.content.exclude)
