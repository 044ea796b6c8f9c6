"""
Headless batch runner: solve every target listed in a config file
"""
import sys
import time
from typing import List, Optional

from .data_io import build_solver, export_solutions, load_config, load_targets


def run_solver(config_path: str = "config.json") -> Optional[List]:
    """
    :return: one solution list per target, or None if loading failed
    """
    print("----------- youBot IK Solver -----------")
    try:
        config = load_config(config_path)
    except (OSError, ValueError) as e:
        print(f"Failed to load config {config_path}: {e}")
        return None
    print(f"Config loaded: {config_path}")

    try:
        solver = build_solver(config)
    except (ValueError, TypeError) as e:
        print(f"Failed to create solver: {e}")
        return None
    print(f"Solver: {config['solver']} {solver.limits!r}")

    targets_path = config['targets_path']
    print(f"Loading targets: {targets_path} ...")
    try:
        targets = load_targets(targets_path)
    except (OSError, ValueError) as e:
        print(f"Failed to load targets: {e}")
        return None
    print(f"{len(targets)} target(s) loaded")

    q_init = config['initial_joints']
    solution_sets = []
    start_time = time.time()
    for target in targets:
        solutions = solver.cart_to_jnt(q_init, target['pose'])
        status = f"{len(solutions)} solution(s)" if solutions else "unreachable"
        print(f"  {target['name']}: {status}")
        solution_sets.append(solutions)

    duration = time.time() - start_time
    print(f"Solved in {duration:.3f} s")

    output_path = config['output_path']
    print(f"Exporting to: {output_path} ...")
    export_solutions(targets, solution_sets, output_path, config['solver'])
    print("Done.")
    return solution_sets


def main():
    if len(sys.argv) > 1:
        run_solver(sys.argv[1])
    else:
        run_solver()


if __name__ == "__main__":
    main()
