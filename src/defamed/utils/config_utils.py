r"""
 By Dylon Edwards

 Copyright 2023 GSI Technology, Inc.

 Permission is hereby granted, free of charge, to any person obtaining a copy of
 this software and associated documentation files (the “Software”), to deal in
 the Software without restriction, including without limitation the rights to
 use, copy, modify, merge, publish, distribute, sublicense, and/or sell copies of
 the Software, and to permit persons to whom the Software is furnished to do so,
 subject to the following conditions:

 The above copyright notice and this permission notice shall be included in all
 copies or substantial portions of the Software.

 THE SOFTWARE IS PROVIDED “AS IS”, WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
 IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY, FITNESS
 FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE AUTHORS OR
 COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER LIABILITY, WHETHER
 IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM, OUT OF OR IN
 CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE SOFTWARE.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from cerberus import Validator

from defamed.dispatch import (DEFAULT_MAX_PARAMETERS,
                              DEFAULT_TYPE_DEFAULT_EXPR, Strategy)
from defamed.paths import DEFAULT_ROOT_MARKER

LOGGER = logging.getLogger()

CONFIG_SCHEMA = {
    "strategy": {
        "type": "string",
        "allowed": Strategy.values(),
    },
    "max_parameters": {
        "type": "integer",
        "min": 1,
    },
    "root_marker": {
        "type": "string",
        "empty": False,
    },
    "type_default_expr": {
        "type": "string",
        "empty": False,
    },
    "trailing_comma": {
        "type": "boolean",
    },
}

DEFAULT_CONFIG: Dict[str, Any] = {
    "strategy": Strategy.EXHAUSTIVE.value,
    "max_parameters": DEFAULT_MAX_PARAMETERS,
    "root_marker": DEFAULT_ROOT_MARKER,
    "type_default_expr": DEFAULT_TYPE_DEFAULT_EXPR,
    "trailing_comma": True,
}


def validate_config(config: Dict[str, Any]) -> None:
    config_validator = Validator(CONFIG_SCHEMA)
    if not config_validator.validate(config):
        error_message = \
            f"Validation failed for config: {config_validator.errors}"
        raise RuntimeError(error_message)


def build_config(**overrides) -> Dict[str, Any]:
    """Returns the default config updated with the given overrides."""
    validate_config(overrides)
    config = dict(DEFAULT_CONFIG)
    config.update(overrides)
    return config


def load_config(config_path: Optional[Union[str, Path]]) -> Dict[str, Any]:
    if config_path is None:
        return build_config()

    if not isinstance(config_path, Path):
        config_path = Path(config_path)

    if not config_path.exists():
        raise ValueError(f"File not found: {config_path}")

    with open(config_path, "rt") as f:
        config = yaml.safe_load(f)

    if config is None:
        config = {}

    try:
        config = build_config(**config)
    except RuntimeError as error:
        error_message = \
            f"Validation failed for {config_path}"
        raise RuntimeError(error_message) from error

    LOGGER.debug("Loaded config from %s: %s", config_path, config)
    return config
