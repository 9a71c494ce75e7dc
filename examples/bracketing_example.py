#!/usr/bin/env python3

# Examples of root bracketing: bisection with an interval stopping
# criterion, written as an explicit loop, then all bracketing methods
# compared at higher precision.

import mpmath

from mproot import BracketingSolver, Status, interval_test, strerror
from mproot.exception import SolverError
from mproot.solve import solve_bracketing

print("One-dimensional root finding: bisection, interval criterion.")

with BracketingSolver('bisection') as solver:
    try:
        solver.configure(mpmath.sin, -1.0, 0.5)
        print(f"Iteration {solver.iterations:2d}: "
              f"[{solver.lower}, {solver.upper}]")

        while True:
            solver.iterate()
            print(f"Iteration {solver.iterations:2d}: "
                  f"[{solver.lower}, {solver.upper}]")
            if interval_test(solver.lower, solver.upper, 1e-6,
                             1e-3) == Status.CONVERGED:
                break

        print(f"Result = {solver.root}")

    except SolverError as e:
        print(f"Error: {strerror(e.flag)}")


# Cube root of two at 256 bits.
def cube_2(x):
    return x ** 3 - 2


print("\nCube root of 2 at 256 bits:")
for method in ('bisection', 'falsepos', 'brent'):
    root = solve_bracketing(cube_2, 0, 2, method=method, epsabs=0,
                            epsrel=2.0 ** -240, prec=256, maxits=300)
    print(f"{method:>10s}: {mpmath.nstr(root, 70)}")
