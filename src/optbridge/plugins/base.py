"""This module defines the abstract base class for plugins."""

from __future__ import annotations

from abc import ABC, abstractmethod


class Plugin(ABC):
    """Abstract base class for all `optbridge` plugins.

    Subclasses must implement the `is_supported` class method to indicate which
    named methods they provide. They can optionally override the
    `allows_discovery` class method if they should not be selected by the
    plugin manager when a method name is provided without an explicit plugin
    name.
    """

    @classmethod
    @abstractmethod
    def is_supported(cls, method: str) -> bool:
        """Verify if this plugin supports a specific named method.

        Args:
            method: The name of the method to check for support.

        Returns:
            `True` if the plugin supports the specified method, `False` otherwise.
        """

    @classmethod
    def allows_discovery(cls) -> bool:
        """Determine if the plugin allows implicit discovery by method name.

        By default plugins can be found by the
        [`PluginManager`][optbridge.plugins.PluginManager] when only a method
        name is given (e.g. `"slsqp"` instead of `"scipy/slsqp"`). Plugins that
        must always be named explicitly override this to return `False`.

        Returns:
            `True` if the plugin can be discovered implicitly by method name.
        """
        return True
