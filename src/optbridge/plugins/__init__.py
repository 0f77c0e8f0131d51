"""Extending `optbridge` with plugins.

Solvers are provided by plugins deriving from
[`SolverPlugin`][optbridge.plugins.solver.base.SolverPlugin]. The
[`PluginManager`][optbridge.plugins.PluginManager] discovers installed plugins
through the `optbridge.plugins.solver` entry point group, and retrieves them by
method name, either as `"plugin-name/method-name"` or as a bare
`"method-name"`.

`optbridge` ships with the [`scipy`][optbridge.plugins.solver.scipy.SciPySolver]
solver plugin, using algorithms from `scipy.optimize`.
"""

from ._manager import PluginManager, PluginType
from .base import Plugin

__all__ = [
    "Plugin",
    "PluginManager",
    "PluginType",
]
