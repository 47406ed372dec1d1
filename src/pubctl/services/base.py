"""BaseService — abstract foundation for all pubctl services.

Every service receives a :class:`Site` at construction time. The Site
provides the resolved directories, the asset store and the plugin manager.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pubctl.infrastructure.site import Site

logger = logging.getLogger(__name__)


class BaseService:
    """Abstract base for all service-layer classes.

    Usage::

        class BuildService(BaseService):
            def build(self) -> ServiceResult:
                for path in self._site.find_sources():
                    ...
    """

    def __init__(self, site: Site) -> None:
        self._site = site

    def _notify(self, hook_name: str, payload: dict[str, Any], warnings: list[str]) -> None:
        """Call a notification hook on every plugin.

        INVARIANT: Notification failures are warnings, never errors.
        """
        try:
            getattr(self._site.plugins.hook, hook_name)(**payload)
        except Exception:
            logger.debug("Plugin hook %s failed", hook_name, exc_info=True)
            warnings.append(f"Plugin hook {hook_name} failed")
