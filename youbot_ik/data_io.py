"""
Data exchange: solver config, target poses and exported solution sets
"""
import copy
import json
import math
import os
import numpy as np
from typing import Any, Dict, List, Sequence

from .model import ArmGeometry, Pose, DEFAULT_JOINT_NAMES, NUM_JOINTS, as_joint_vector
from .solver import InverseKinematicsSolver, create_solver

DEFAULT_CONFIG: Dict[str, Any] = {
    'solver': 'analytical',
    'min_angles': [-math.pi] * NUM_JOINTS,
    'max_angles': [math.pi] * NUM_JOINTS,
    'geometry': {},
    'joint_names': list(DEFAULT_JOINT_NAMES),
    'initial_joints': [0.0] * NUM_JOINTS,
    'targets_path': 'targets.json',
    'output_path': 'solutions.json',
}

# DLS parameters forwarded to the iterative solver when present
ITERATIVE_OPTIONS = (
    'max_iterations',
    'position_tolerance',
    'orientation_tolerance',
    'damping',
    'enable_line_search',
    'line_search_alpha',
    'line_search_alpha_min',
)


def load_config(json_path: str) -> Dict[str, Any]:
    """
    Read the solver config and fill in defaults

    Relative targets/output paths are resolved against the config's directory.

    :param json_path: config file path
    :return: config dict with every DEFAULT_CONFIG key present
    :raises ValueError: on a non-object config, non-string paths or bad initial_joints
    """
    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Config must be a JSON object, got {type(data).__name__}")

    config = copy.deepcopy(DEFAULT_CONFIG)
    config.update(data)

    base_dir = os.path.dirname(os.path.abspath(json_path))
    for key in ('targets_path', 'output_path'):
        if not isinstance(config[key], str):
            raise ValueError(f"{key} must be a string, got {type(config[key]).__name__}")
        if not os.path.isabs(config[key]):
            config[key] = os.path.join(base_dir, config[key])

    as_joint_vector(config['initial_joints'], "initial_joints")
    return config


def build_solver(config: Dict[str, Any]) -> InverseKinematicsSolver:
    """Create the configured solver variant."""
    kind = config.get('solver', DEFAULT_CONFIG['solver'])
    options = {}
    if kind == 'iterative':
        options = {key: config[key] for key in ITERATIVE_OPTIONS if key in config}

    return create_solver(
        kind,
        config.get('min_angles', DEFAULT_CONFIG['min_angles']),
        config.get('max_angles', DEFAULT_CONFIG['max_angles']),
        geometry=ArmGeometry.from_dict(config.get('geometry') or {}),
        joint_names=config.get('joint_names', DEFAULT_CONFIG['joint_names']),
        **options
    )


def load_targets(json_path: str) -> List[Dict]:
    """
    Read target poses

    :param json_path: targets file, a list of {"name", "pos": [x,y,z], "euler": [r,p,y] (degrees)}
    :return: list of {"name": str, "pos": ndarray, "euler": ndarray, "pose": Pose}
    """
    with open(json_path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError("Targets file must contain a JSON list")

    targets = []
    for index, item in enumerate(data):
        try:
            pos = np.array(item['pos'], dtype=np.float64).reshape(3)
            euler = np.array(item.get('euler', [0.0, 0.0, 0.0]), dtype=np.float64).reshape(3)
        except (KeyError, ValueError, TypeError) as e:
            raise ValueError(f"Malformed target #{index}: {e}") from e
        targets.append({
            'name': str(item.get('name', f"target_{index}")),
            'pos': pos,
            'euler': euler,
            'pose': Pose.from_position_euler_deg(pos, euler),
        })
    return targets


def solutions_to_records(targets: Sequence[Dict], solution_sets: Sequence[Sequence[np.ndarray]]) -> List[Dict]:
    records = []
    for target, solutions in zip(targets, solution_sets):
        records.append({
            'name': target['name'],
            'pos': [float(v) for v in target['pos']],
            'euler': [float(v) for v in target['euler']],
            'solutions': [[float(v) for v in q] for q in solutions],
        })
    return records


def export_solutions(targets: Sequence[Dict],
                     solution_sets: Sequence[Sequence[np.ndarray]],
                     output_path: str,
                     solver_name: str):
    """
    Write the solution sets to JSON

    :param targets: entries returned by load_targets
    :param solution_sets: one list of joint vectors per target
    :param output_path: output file path, parent directories are created
    :param solver_name: solver variant recorded in the output
    """
    os.makedirs(os.path.dirname(os.path.abspath(output_path)), exist_ok=True)

    output = {
        'solver': solver_name,
        'targets': solutions_to_records(targets, solution_sets),
    }
    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(output, f, indent=2, ensure_ascii=False)
