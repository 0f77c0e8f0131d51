from __future__ import annotations

from typing import Any, Literal

import pytest
from pydantic import ValidationError

from optbridge.config.options import OptionsSchemaModel
from optbridge.plugins import Plugin, PluginManager
from optbridge.plugins.solver.base import SolverPlugin
from optbridge.plugins.solver.scipy import SciPySolverPlugin


class MockedPlugin(SolverPlugin):
    @classmethod
    def create(cls, _0: Any) -> None:  # type: ignore[override]
        pass

    @classmethod
    def is_supported(cls, method: str) -> bool:
        return method.lower() in {"slsqp", "test"}


class MockedPluginWithValidation(MockedPlugin):
    @classmethod
    def validate_options(cls, method: str, options: dict[str, Any] | None) -> None:
        OptionsSchemaModel.model_validate(
            {
                "methods": {
                    "Test": {
                        "options": {
                            "a": float | str,
                            "b": Literal["foo", "bar"],
                        },
                        "url": "https://example.org",
                    },
                },
            }
        ).get_options_model(method).model_validate(options)


class HiddenPlugin(MockedPlugin):
    @classmethod
    def allows_discovery(cls) -> bool:
        return False


class NotASolverPlugin(Plugin):
    @classmethod
    def is_supported(cls, method: str) -> bool:  # noqa: ARG003
        return True


def test_default_plugins() -> None:
    plugin_manager = PluginManager()

    plugin = plugin_manager.get_plugin("solver", "slsqp")
    assert issubclass(plugin, SciPySolverPlugin)


def test_default_plugins_qualified_method() -> None:
    plugin_manager = PluginManager()

    plugin = plugin_manager.get_plugin("solver", "scipy/slsqp")
    assert issubclass(plugin, SciPySolverPlugin)

    plugin = plugin_manager.get_plugin("solver", "scipy/default")
    assert issubclass(plugin, SciPySolverPlugin)
    assert plugin_manager.get_plugin_name("solver", "scipy/default") == "scipy"


def test_default_method_requires_plugin_name() -> None:
    plugin_manager = PluginManager()
    with pytest.raises(ValueError, match="Cannot specify 'default' method"):
        plugin_manager.get_plugin("solver", "default")


def test_unknown_method() -> None:
    plugin_manager = PluginManager()
    with pytest.raises(ValueError, match="Method not found: foo"):
        plugin_manager.get_plugin("solver", "foo")
    assert plugin_manager.get_plugin_name("solver", "foo") is None


def test_added_plugin() -> None:
    plugin_manager = PluginManager()
    plugin_manager.add_plugin("solver", "test", MockedPlugin)

    plugin = plugin_manager.get_plugin("solver", "test")
    assert issubclass(plugin, MockedPlugin)

    plugin = plugin_manager.get_plugin("solver", "slsqp")
    assert issubclass(plugin, SciPySolverPlugin)

    plugin = plugin_manager.get_plugin("solver", "test/slsqp")
    assert issubclass(plugin, MockedPlugin)


def test_added_plugin_prioritize() -> None:
    plugin_manager = PluginManager()
    plugin_manager.add_plugin("solver", "test", MockedPlugin, prioritize=True)

    plugin = plugin_manager.get_plugin("solver", "test")
    assert issubclass(plugin, MockedPlugin)

    plugin = plugin_manager.get_plugin("solver", "slsqp")
    assert issubclass(plugin, MockedPlugin)

    plugin = plugin_manager.get_plugin("solver", "scipy/slsqp")
    assert issubclass(plugin, SciPySolverPlugin)


def test_plugin_without_discovery() -> None:
    plugin_manager = PluginManager()
    plugin_manager.add_plugin("solver", "hidden", HiddenPlugin, prioritize=True)

    plugin = plugin_manager.get_plugin("solver", "slsqp")
    assert issubclass(plugin, SciPySolverPlugin)

    plugin = plugin_manager.get_plugin("solver", "hidden/test")
    assert issubclass(plugin, HiddenPlugin)
    with pytest.raises(ValueError, match="Method not found: test"):
        plugin_manager.get_plugin("solver", "test")


def test_add_plugin_errors() -> None:
    plugin_manager = PluginManager()
    with pytest.raises(ValueError, match="Duplicate plugin name: scipy"):
        plugin_manager.add_plugin("solver", "SciPy", MockedPlugin)
    with pytest.raises(TypeError, match="Incorrect type for solver plugin"):
        plugin_manager.add_plugin("solver", "other", NotASolverPlugin)


def test_validate_options() -> None:
    plugin_manager = PluginManager()
    plugin_manager.add_plugin("solver", "test", MockedPluginWithValidation)
    plugin = plugin_manager.get_plugin("solver", "test")
    assert issubclass(plugin, MockedPluginWithValidation)
    plugin.validate_options("test", {"a": 1.0})
    plugin.validate_options("test", {"a": "foo"})
    with pytest.raises(ValidationError, match="Input should be a valid number"):
        plugin.validate_options("test", {"a": []})
    plugin.validate_options("Test", {"b": "foo"})
    with pytest.raises(ValidationError, match="Input should be 'foo' or 'bar'"):
        plugin.validate_options("TEST", {"b": "wrong"})
    with pytest.raises(
        ValidationError, match=r"Unknown or unsupported option\(s\): `c`, `d`"
    ):
        plugin.validate_options("test", {"c": 1, "d": "foo"})


def test_scipy_validate_options() -> None:
    SciPySolverPlugin.validate_options("slsqp", {"ftol": 1e-6, "maxiter": 10})
    SciPySolverPlugin.validate_options("scipy/default", {"ftol": 1e-6})
    SciPySolverPlugin.validate_options("differential_evolution", {"seed": 1})
    SciPySolverPlugin.validate_options("trust-constr", None)
    with pytest.raises(ValidationError, match=r"Unknown or unsupported option\(s\)"):
        SciPySolverPlugin.validate_options("cobyla", {"ftol": 1e-6})
    with pytest.raises(ValidationError, match="Input should be"):
        SciPySolverPlugin.validate_options(
            "differential_evolution", {"strategy": "best1bin-wrong"}
        )
    with pytest.raises(ValueError, match="Method `nelder-mead` not found"):
        SciPySolverPlugin.validate_options("nelder-mead", {})
