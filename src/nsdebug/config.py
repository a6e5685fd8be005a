"""Configuration resolution for nsdebug.

Where the debug spec comes from (highest priority wins):
  1. Explicit value -- e.g. ``nsdebug --spec`` on the command line
  2. Environment -- $DEBUG, or the variable named by $NSDEBUG_ENV_VAR
  3. Project config -- the "debug" key of the nearest .nsdebug.json

Example .nsdebug.json::

    {
      "debug": ["app:*", "!app:db"],
      "env_var": "APP_DEBUG"
    }

The config file is only ever read. Filter state is not persisted.
"""

import json
import os
from pathlib import Path

from nsdebug.lib.filter_lib import DEFAULT_ENV_VAR


PROJECT_CONFIG_NAME = ".nsdebug.json"
ENV_VAR_OVERRIDE = "NSDEBUG_ENV_VAR"

ORIGIN_CLI = "cli"
ORIGIN_ENV = "env"
ORIGIN_PROJECT = "project"
ORIGIN_DEFAULT = "default"


# ---------------------------------------------------------------------------
# Config file locations
# ---------------------------------------------------------------------------
def find_project_config(start_dir=None):
    """Walk up from start_dir looking for .nsdebug.json.

    Returns the path if found, None otherwise.
    """
    current = Path(start_dir or os.getcwd()).resolve()
    for _ in range(20):  # safety limit
        candidate = current / PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent
    return None


# ---------------------------------------------------------------------------
# Config loading
# ---------------------------------------------------------------------------
def load_json(path):
    """Load a JSON object from a file, returning empty dict on error."""
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def load_project_config(start_dir=None):
    """Load the nearest .nsdebug.json walking upward from start_dir."""
    path = find_project_config(start_dir)
    if path:
        return load_json(path), path
    return {}, None


def spec_from_value(value):
    """Normalize a config "debug" value to a spec string.

    Accepts a spec string or a list of tokens. Anything else is ignored.
    """
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join(str(v) for v in value if isinstance(v, str))
    return None


# ---------------------------------------------------------------------------
# Config resolution
# ---------------------------------------------------------------------------
def resolve_env_var(explicit=None, environ=None, project_cfg=None):
    """Pick the environment variable that holds the spec.

    Priority: explicit > $NSDEBUG_ENV_VAR > project "env_var" > DEBUG.
    """
    environ = os.environ if environ is None else environ
    if explicit:
        return explicit
    if environ.get(ENV_VAR_OVERRIDE):
        return environ[ENV_VAR_OVERRIDE]
    if project_cfg and isinstance(project_cfg.get("env_var"), str):
        return project_cfg["env_var"]
    return DEFAULT_ENV_VAR


def resolve_spec(explicit=None, env_var=None, environ=None, start_dir=None):
    """Resolve the debug spec using three-layer precedence.

    Args:
        explicit: Spec given directly (CLI); wins when not None
        env_var: Variable to read; None resolves it (see resolve_env_var)
        environ: Environment mapping (default: os.environ)
        start_dir: Where to start looking for .nsdebug.json

    Returns:
        (spec, origin) where origin is "cli", "env", "project" or "default"
    """
    environ = os.environ if environ is None else environ

    # Layer 1: explicit
    if explicit is not None:
        return explicit, ORIGIN_CLI

    project_cfg, _ = load_project_config(start_dir)
    env_var = resolve_env_var(env_var, environ, project_cfg)

    # Layer 2: environment
    env_val = environ.get(env_var)
    if env_val is not None:
        return env_val, ORIGIN_ENV

    # Layer 3: project config
    proj_val = spec_from_value(project_cfg.get("debug"))
    if proj_val is not None:
        return proj_val, ORIGIN_PROJECT

    return "", ORIGIN_DEFAULT
