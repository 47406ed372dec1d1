"""Extension layer — renderer and lifecycle plugins via pluggy.

Discovery: entry_points (pip-installed) via pluggy setuptools entrypoints,
plus single-file plugins from ``.pubctl/plugins/``.
"""

from pubctl.plugins.manager import PluginManager

__all__ = ["PluginManager"]
