"""Translate structured optimization models into expression-graph solver input.

An [`Optimizer`][optbridge.Optimizer] is a structured model of variables,
function-in-set constraints, an objective, and an optional nonlinear block.
Calling its `optimize` method assembles the positional problem, invokes a
solver plugin, and maps the result back onto the variables of the model.
"""

from ._optimizer import Optimizer

__all__ = ["Optimizer"]
