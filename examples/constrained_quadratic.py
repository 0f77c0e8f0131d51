"""Constrained quadratic example.

This example minimizes the squared distance to the point (1, 2), subject to a
linear inequality constraint and a bound on the first variable, using the
SLSQP method of SciPy.
"""

import numpy as np

from optbridge import Optimizer
from optbridge.enums import ObjectiveSense, TerminationStatus
from optbridge.model import (
    GreaterThan,
    LessThan,
    ScalarAffineFunction,
    ScalarAffineTerm,
    ScalarQuadraticFunction,
    ScalarQuadraticTerm,
    SingleVariable,
)


def run_optimization() -> None:
    """Run the optimization."""
    optimizer = Optimizer({"method": "scipy/slsqp", "max_iterations": 100})
    x, y = optimizer.add_variables(2)

    # (x - 1)^2 + (y - 2)^2
    optimizer.set_objective(
        ScalarQuadraticFunction(
            (ScalarAffineTerm(-2.0, x), ScalarAffineTerm(-4.0, y)),
            (ScalarQuadraticTerm(2.0, x, x), ScalarQuadraticTerm(2.0, y, y)),
            5.0,
        ),
        ObjectiveSense.MINIMIZE,
    )
    constraint = optimizer.add_constraint(
        ScalarAffineFunction((ScalarAffineTerm(1.0, x), ScalarAffineTerm(1.0, y))),
        LessThan(2.0),
    )
    optimizer.add_constraint(SingleVariable(x), GreaterThan(0.0))
    optimizer.set_variable_primal_start(x, 0.5)

    optimizer.optimize()

    assert optimizer.termination_status == TerminationStatus.LOCALLY_SOLVED
    variables = [optimizer.variable_primal(x), optimizer.variable_primal(y)]
    assert np.allclose(variables, [0.5, 1.5], atol=1e-3)
    print(f"  solver: {optimizer.solver_name}")
    print(f"  status: {optimizer.raw_status}")
    print(f"  variables: {variables}")
    print(f"  constraint: {optimizer.constraint_primal(constraint)}")
    print(f"  objective: {optimizer.objective_value}\n")


def main() -> None:
    """Main function."""
    run_optimization()


if __name__ == "__main__":
    main()
