#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
BubbleWeaver v0.1.0

Configuration schema for BubbleWeaver.

Defines all available configuration parameters with defaults and validation.

Author: BubbleWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from typing import Dict, Any, Optional, List
from pathlib import Path
import copy
import yaml

from ..graph_core.three_edge_connectivity import DEFAULT_LABEL_SEED


VALID_HAIRPIN_POLICIES = ['bubble', 'flag']
VALID_OUTPUT_FORMATS = ['text', 'json', 'bed']
VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']

# Default configuration values
DEFAULT_CONFIG = {
    # ========================================================================
    # Graph Limits
    # ========================================================================
    'graph': {
        'max_segments': None,  # No limit by default
    },

    # ========================================================================
    # 3-Edge Connectivity
    # ========================================================================
    'connectivity': {
        'label_seed': DEFAULT_LABEL_SEED,  # Seed for back-edge labels
        'verify_cactus': True,  # Check the cactus property after contraction
    },

    # ========================================================================
    # Bubble Extraction
    # ========================================================================
    'bubbles': {
        'hairpin_policy': 'bubble',  # 'bubble', 'flag'
    },

    # ========================================================================
    # Execution
    # ========================================================================
    'execution': {
        'threads': 1,  # Worker processes per stage
    },

    # ========================================================================
    # Output
    # ========================================================================
    'output': {
        'format': 'text',  # 'text', 'json', 'bed'
        'reference_paths': [],  # Paths used for BED coordinates (empty = all)

        # Logging
        'logging': {
            'level': 'INFO',  # 'DEBUG', 'INFO', 'WARNING', 'ERROR'
            'log_file': None,
        },
    },
}


def load_config(config_path: Optional[Path] = None) -> Dict[str, Any]:
    """
    Load configuration from file or return defaults.

    Args:
        config_path: Path to YAML config file (None = use defaults)

    Returns:
        Configuration dictionary
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    if config_path:
        config_path = Path(config_path)
        if config_path.exists():
            with open(config_path) as f:
                user_config = yaml.safe_load(f)

            # Deep merge user config into defaults
            if user_config:
                config = _deep_merge(config, user_config)

    return config


def _deep_merge(base: Dict, override: Dict) -> Dict:
    """
    Deep merge two dictionaries.

    Args:
        base: Base dictionary
        override: Override dictionary

    Returns:
        Merged dictionary
    """
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def save_config_template(output_path: Path, template: str = 'default'):
    """
    Save a configuration template to file.

    Args:
        output_path: Output file path
        template: Template type ('default', 'parallel', 'strict')
    """
    config = copy.deepcopy(DEFAULT_CONFIG)

    # Customize for specific templates
    if template == 'parallel':
        config['execution']['threads'] = 4
        config['output']['format'] = 'json'

    elif template == 'strict':
        config['connectivity']['verify_cactus'] = True
        config['bubbles']['hairpin_policy'] = 'flag'

    elif template != 'default':
        raise ValueError(f"Unknown config template: {template}")

    with open(output_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def validate_config(config: Dict[str, Any]) -> List[str]:
    """
    Validate configuration dictionary.

    Args:
        config: Configuration to validate

    Returns:
        List of validation errors (empty if valid)
    """
    errors = []

    max_segments = config.get('graph', {}).get('max_segments')
    if max_segments is not None and (not isinstance(max_segments, int) or max_segments < 1):
        errors.append(f"Invalid graph.max_segments: {max_segments} (must be a positive integer)")

    seed = config.get('connectivity', {}).get('label_seed')
    if seed is not None and (not isinstance(seed, int) or seed < 0):
        errors.append(f"Invalid connectivity.label_seed: {seed} (must be a non-negative integer)")

    policy = config.get('bubbles', {}).get('hairpin_policy', 'bubble')
    if policy not in VALID_HAIRPIN_POLICIES:
        errors.append(f"Invalid bubbles.hairpin_policy: {policy}")

    threads = config.get('execution', {}).get('threads', 1)
    if not isinstance(threads, int) or threads < 1:
        errors.append(f"Invalid execution.threads: {threads} (must be >= 1)")

    output = config.get('output', {})
    if output.get('format', 'text') not in VALID_OUTPUT_FORMATS:
        errors.append(f"Invalid output.format: {output.get('format')}")
    if not isinstance(output.get('reference_paths', []), list):
        errors.append("Invalid output.reference_paths: must be a list of path names")

    level = output.get('logging', {}).get('level', 'INFO')
    if str(level).upper() not in VALID_LOG_LEVELS:
        errors.append(f"Invalid output.logging.level: {level}")

    return errors

# BubbleWeaver v0.1.0
# Any usage is subject to this software's license.
