"""
Solver layer
The analytical solver and the iterative (DLS) solver share one contract;
the variant is picked by name at configuration time.
"""
from typing import Dict, Optional, Sequence, Type

from ..model import ArmGeometry, DEFAULT_JOINT_NAMES
from .analytical import AnalyticalSolver
from .base import InverseKinematicsSolver, SolverInfo, closest_solution
from .branch import RedundancyBranch
from .iterative import IterativeSolver, compute_error_vector, compute_jacobian
from .projection import project_goal_into_arm_subspace

SOLVERS: Dict[str, Type[InverseKinematicsSolver]] = {
    'analytical': AnalyticalSolver,
    'iterative': IterativeSolver,
}


def create_solver(kind: str,
                  min_angles: Sequence[float],
                  max_angles: Sequence[float],
                  geometry: Optional[ArmGeometry] = None,
                  joint_names: Sequence[str] = DEFAULT_JOINT_NAMES,
                  **options) -> InverseKinematicsSolver:
    """
    Instantiate a solver variant by name

    :param kind: 'analytical' or 'iterative'
    :param options: extra keyword arguments for the variant (e.g. DLS tolerances)
    :raises ValueError: for an unknown kind
    """
    try:
        solver_cls = SOLVERS[kind]
    except KeyError:
        raise ValueError(f"Unknown solver '{kind}', expected one of {sorted(SOLVERS)}") from None
    return solver_cls(min_angles, max_angles, geometry=geometry, joint_names=joint_names, **options)


__all__ = [
    'SOLVERS',
    'create_solver',
    'InverseKinematicsSolver',
    'SolverInfo',
    'closest_solution',
    'RedundancyBranch',
    'AnalyticalSolver',
    'IterativeSolver',
    'compute_error_vector',
    'compute_jacobian',
    'project_goal_into_arm_subspace'
]
