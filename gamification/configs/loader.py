"""
Configuration loading and validation.

This module handles loading of YAML configuration files and
validates weights, compatibility overrides and milestone targets.
"""

import logging
from pathlib import Path
from typing import Dict, Any, List

import yaml

from ..models.schema import SCORE_FACTOR_KEYS

logger = logging.getLogger(__name__)


def load_config(filepath: str) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        filepath: Path to the YAML configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        ValueError: If the file is empty
        yaml.YAMLError: If YAML is invalid
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {filepath}")

    logger.info(f"Loading configuration from {filepath}")
    with open(filepath, "r") as f:
        config = yaml.safe_load(f)

    if config is None:
        raise ValueError(f"Configuration file is empty: {filepath}")

    return config


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration and return list of warnings/errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of warning/error messages (empty if valid)
    """
    issues = []

    # Check required top-level sections
    required_sections = ["global", "scoring", "milestones"]

    for section in required_sections:
        if section not in config:
            issues.append(f"Missing required section: {section}")

    # Check factor weights
    weights = get_config_value(config, "scoring.weights", {}) or {}
    for key, weight in weights.items():
        if key not in SCORE_FACTOR_KEYS:
            issues.append(f"Unknown score factor in scoring.weights: {key}")
        elif not isinstance(weight, (int, float)) or not 0 <= weight <= 1:
            issues.append(f"Weight for {key} must be in [0, 1], got {weight}")

    if weights and sum(w for w in weights.values() if isinstance(w, (int, float))) <= 0:
        issues.append("scoring.weights sum to zero; overall scores will always be 0")

    # Check compatibility overrides
    matrices = get_config_value(config, "compatibility.matrices", {}) or {}
    for question_type, pairs in matrices.items():
        for pair, score in (pairs or {}).items():
            if "-" not in str(pair):
                issues.append(f"Compatibility key {question_type}.{pair} must look like 'a-b'")
            if not isinstance(score, (int, float)) or not 0 <= score <= 100:
                issues.append(f"Compatibility {question_type}.{pair} must be in [0, 100], got {score}")

    # Check milestone target
    target = get_config_value(config, "milestones.target_score")
    if target is not None and (not isinstance(target, (int, float)) or not 0 <= target <= 100):
        issues.append(f"milestones.target_score must be in [0, 100], got {target}")

    for streak_target in get_config_value(config, "milestones.streak_targets", []) or []:
        if not isinstance(streak_target, int) or streak_target <= 0:
            issues.append(f"milestones.streak_targets must be positive integers, got {streak_target}")

    return issues


def get_config_value(config: Dict[str, Any], path: str, default: Any = None) -> Any:
    """
    Get a nested configuration value using dot notation.

    Args:
        config: Configuration dictionary
        path: Dot-separated path (e.g., "scoring.weights.spending_harmony")
        default: Default value if path doesn't exist

    Returns:
        Configuration value or default
    """
    keys = path.split(".")
    value = config
    for key in keys:
        if isinstance(value, dict) and key in value:
            value = value[key]
        else:
            return default
    return value
