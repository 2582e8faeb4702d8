"""Config: YAML file deep-merged over config/config.yaml.example, then validated into settings.

Sections: probe, check, overrides, server. The example file is the source of defaults.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Tuple

import yaml

from clustercheck.core.policy import PolicyConfig, STATUS_VARIABLES

logger = logging.getLogger(__name__)

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
EXAMPLE_CONFIG_PATH = _PROJECT_ROOT / "config" / "config.yaml.example"
DEFAULT_CONFIG_PATH = _PROJECT_ROOT / "config" / "config.yaml"
CONFIG_ENV_VAR = "CLUSTERCHECK_CONFIG"

STATUS_QUERY = "show status where Variable_name in ({});".format(
    ", ".join(f"'{name}'" for name in STATUS_VARIABLES)
)

# Lazy-loaded example config (single source of truth for defaults)
_EXAMPLE_CONFIG: Optional[Dict[str, Any]] = None


class ConfigError(ValueError):
    """Configuration is missing or invalid."""


def _load_example_config() -> Dict[str, Any]:
    """Load config.yaml.example as defaults; empty when not shipped alongside the package."""
    global _EXAMPLE_CONFIG
    if _EXAMPLE_CONFIG is None:
        if EXAMPLE_CONFIG_PATH.exists():
            with open(EXAMPLE_CONFIG_PATH, encoding="utf-8") as f:
                _EXAMPLE_CONFIG = yaml.safe_load(f) or {}
        else:
            _EXAMPLE_CONFIG = {}
    return _EXAMPLE_CONFIG


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Merge override into base. Override values take precedence."""
    out = dict(base)
    for k, v in override.items():
        if k in out and isinstance(out[k], dict) and isinstance(v, dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def _merged_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Merge config with example so missing keys come from config file."""
    return _deep_merge(_load_example_config(), cfg)


def _section(cfg: Dict[str, Any], section: str) -> Dict[str, Any]:
    sec = cfg.get(section)
    if sec is None:
        return {}
    if not isinstance(sec, dict):
        raise ConfigError(f"config section '{section}' must be a mapping, got {type(sec).__name__}")
    return sec


def read_config(config_path: Optional[str] = None) -> Tuple[Dict[str, Any], Optional[str]]:
    """Load YAML config. Returns (config, resolved_path); path is None when only defaults apply.

    Resolution: config_path, then $CLUSTERCHECK_CONFIG, then config/config.yaml.
    An explicitly given path that does not exist is an error; the default path may be absent.
    """
    explicit = config_path or os.environ.get(CONFIG_ENV_VAR)
    path = Path(explicit) if explicit else DEFAULT_CONFIG_PATH
    if not path.exists():
        if explicit:
            raise ConfigError(f"config file not found: {path}")
        logger.debug("No config at %s; using defaults from %s", path, EXAMPLE_CONFIG_PATH)
        return {}, None
    try:
        with open(path, "r", encoding="utf-8") as f:
            config = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid YAML in {path}: {e}") from e
    if not isinstance(config, dict):
        raise ConfigError(f"config root in {path} must be a mapping")
    return config, str(path.resolve())


def get_probe_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return probe section (binary, timeout, connection options, args)."""
    return dict(_section(_merged_config(config or {}), "probe"))


def get_check_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return check section (interval, available_when_donor, available_when_readonly)."""
    return dict(_section(_merged_config(config or {}), "check"))


def get_override_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return override marker paths (force_up_file, force_fail_file)."""
    return dict(_section(_merged_config(config or {}), "overrides"))


def get_server_config(config: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return HTTP bind settings (bind_address, port)."""
    return dict(_section(_merged_config(config or {}), "server"))


def build_probe_command(probe_cfg: Dict[str, Any], extra_args: Sequence[str] = ()) -> List[str]:
    """Build the mysql argv: binary, connection options, passthrough args, then the status query."""
    cmd = [str(probe_cfg.get("binary") or "mysql")]
    # --defaults-extra-file must come first for mysql to accept it
    if probe_cfg.get("defaults_file"):
        cmd.append(f"--defaults-extra-file={probe_cfg['defaults_file']}")
    if probe_cfg.get("host"):
        cmd.extend(["-h", str(probe_cfg["host"])])
    if probe_cfg.get("port"):
        cmd.extend(["-P", str(probe_cfg["port"])])
    if probe_cfg.get("socket"):
        cmd.extend(["-S", str(probe_cfg["socket"])])
    if probe_cfg.get("user"):
        cmd.extend(["-u", str(probe_cfg["user"])])
    if probe_cfg.get("password"):
        cmd.append(f"--password={probe_cfg['password']}")
    cmd.extend(str(a) for a in (probe_cfg.get("args") or []))
    cmd.extend(extra_args)
    cmd.extend(["-n", "-N", "-s", "-e", STATUS_QUERY])
    return cmd


def _positive_float(value: Any, name: str) -> float:
    try:
        out = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None
    if out <= 0:
        raise ConfigError(f"{name} must be > 0, got {out}")
    return out


def _bool(value: Any, name: str) -> bool:
    if not isinstance(value, bool):
        raise ConfigError(f"{name} must be true or false, got {value!r}")
    return value


def _port(value: Any) -> int:
    try:
        port = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"server.port must be an integer, got {value!r}") from None
    if not 0 < port < 65536:
        raise ConfigError(f"server.port out of range: {port}")
    return port


@dataclass(frozen=True)
class ClusterCheckSettings:
    """Validated, immutable settings handed to the daemon."""

    probe_command: Tuple[str, ...]
    policy: PolicyConfig
    force_up_file: str
    force_fail_file: str
    bind_address: str
    bind_port: int


def load_settings(config: Optional[Dict[str, Any]] = None, extra_args: Sequence[str] = ()) -> ClusterCheckSettings:
    """Validate merged config into ClusterCheckSettings. Raises ConfigError."""
    probe = get_probe_config(config)
    check = get_check_config(config)
    overrides = get_override_config(config)
    server = get_server_config(config)

    policy = PolicyConfig(
        available_when_donor=_bool(check.get("available_when_donor", False), "check.available_when_donor"),
        available_when_readonly=_bool(check.get("available_when_readonly", False), "check.available_when_readonly"),
        check_interval=_positive_float(check.get("interval", 5), "check.interval"),
        probe_timeout=_positive_float(probe.get("timeout", 10), "probe.timeout"),
    )
    return ClusterCheckSettings(
        probe_command=tuple(build_probe_command(probe, extra_args)),
        policy=policy,
        force_up_file=str(overrides.get("force_up_file") or ""),
        force_fail_file=str(overrides.get("force_fail_file") or ""),
        bind_address=str(server.get("bind_address") or ""),
        bind_port=_port(server.get("port", 9200)),
    )
