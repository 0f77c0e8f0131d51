"""The plugin manager."""

from __future__ import annotations

from functools import cache
from importlib.metadata import entry_points
from typing import TYPE_CHECKING, Any, Final, Literal

from .solver.base import SolverPlugin

if TYPE_CHECKING:
    from optbridge.plugins.base import Plugin


_PLUGIN_TYPES: Final = {
    "solver": SolverPlugin,
}

PluginType = Literal["solver"]
"""Represents the valid types of plugins supported by `optbridge`.

* `"solver"`: Plugins wrapping a solver
  ([`SolverPlugin`][optbridge.plugins.solver.base.SolverPlugin]).
"""


class PluginManager:
    """Manages the discovery and retrieval of `optbridge` plugins.

    Upon initialization, the manager scans for entry points defined under the
    `optbridge.plugins.*` groups (e.g., `optbridge.plugins.solver`). Plugins
    found this way are loaded and stored internally, categorized by their type.

    **Example: Registering a Custom Solver Plugin**

    To make a custom solver plugin available, define an entry point in the
    `pyproject.toml` file of your package:

    ```toml
    [project.entry-points."optbridge.plugins.solver"]
    my_solver = "my_package.my_module:MySolverPlugin"
    ```

    The solver is then available as `"my_solver/some_method"`, or as
    `"some_method"` if discovery is allowed and the method is unique.
    """

    def __init__(self) -> None:
        """Initialize the plugin manager."""
        self._plugins: dict[PluginType, dict[str, type[Plugin]]] = {
            "solver": {},
        }

        for plugin_type in self._plugins:
            for name, plugin in _from_entry_points(plugin_type).items():
                self.add_plugin(plugin_type, name, plugin)

    def add_plugin(
        self,
        plugin_type: PluginType,
        name: str,
        plugin: type[Plugin],
        *,
        prioritize: bool = False,
    ) -> None:
        """Register a plugin that is not installed via an entry point.

        Args:
            plugin_type: The type of the plugin.
            name:        The name of the plugin.
            plugin:      The plugin class.
            prioritize:  If `True`, the plugin is searched first during discovery.

        Raises:
            ValueError: If a plugin with the same name is already registered.
            TypeError:  If the plugin does not derive from the base class of the type.
        """
        if not issubclass(plugin, _PLUGIN_TYPES[plugin_type]):
            msg = f"Incorrect type for {plugin_type} plugin `{name}`: {plugin}"
            raise TypeError(msg)
        name_lower = name.lower()
        if name_lower in self._plugins[plugin_type]:
            msg = f"Duplicate plugin name: {name_lower}"
            raise ValueError(msg)
        if prioritize:
            plugins = self._plugins[plugin_type]
            self._plugins[plugin_type] = {name_lower: plugin}
            self._plugins[plugin_type].update(dict(plugins))
        else:
            self._plugins[plugin_type][name_lower] = plugin

    def _get_plugin(
        self, plugin_type: PluginType, method: str
    ) -> tuple[str, Any] | None:
        split_method = method.split("/", maxsplit=1)
        if len(split_method) > 1:
            plugin_name, method = split_method
            plugin = self._plugins[plugin_type].get(plugin_name.lower())
            if plugin and plugin.is_supported(method):
                return plugin_name.lower(), plugin
        else:
            method = split_method[0]
            if method == "default":
                msg = "Cannot specify 'default' method without a plugin name"
                raise ValueError(msg)
            for plugin_name, plugin in self._plugins[plugin_type].items():
                if plugin.allows_discovery() and plugin.is_supported(method):
                    return plugin_name, plugin
        return None

    def get_plugin(self, plugin_type: PluginType, method: str) -> Any:  # noqa: ANN401
        """Retrieve a plugin class by its type and a supported method name.

        The `method` argument is either `"plugin-name/method-name"`, selecting
        the method from the named plugin, or only `"method-name"`, in which
        case the first discoverable plugin supporting the method is returned.

        Args:
            plugin_type: The category of the plugin.
            method:      The name of the method the plugin must support,
                         optionally prefixed with the plugin name and a slash.

        Returns:
            The plugin class that matches the criteria.

        Raises:
            ValueError: If no matching plugin is found, or if "default" is used
                        as a method name without a plugin name.
        """
        plugin = self._get_plugin(plugin_type, method)
        if plugin is not None:
            return plugin[1]
        msg = f"Method not found: {method}"
        raise ValueError(msg)

    def get_plugin_name(self, plugin_type: PluginType, method: str) -> str | None:
        """Return the name of the plugin that supports a given method.

        Args:
            plugin_type: The category of the plugin.
            method:      The name of the method to check, optionally prefixed
                         with the plugin name and a slash.

        Returns:
            The name of a matching plugin, or `None`.
        """
        plugin = self._get_plugin(plugin_type, method)
        if plugin is None:
            return None
        return plugin[0]


@cache
def _from_entry_points(plugin_type: str) -> dict[str, type[Plugin]]:
    plugins: dict[str, type[Plugin]] = {}
    for entry_point in entry_points().select(group=f"optbridge.plugins.{plugin_type}"):
        plugins[entry_point.name] = entry_point.load()
    return plugins
