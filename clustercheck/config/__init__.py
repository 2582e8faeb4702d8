"""Configuration loading: YAML file merged over config/config.yaml.example."""

from clustercheck.config.settings import ClusterCheckSettings, ConfigError, load_settings, read_config

__all__ = ["ClusterCheckSettings", "ConfigError", "load_settings", "read_config"]
