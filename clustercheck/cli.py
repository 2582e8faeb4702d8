"""Command line entry point: `clustercheck [config.yaml] [options] [-- mysql args...]`."""

import argparse
import logging
import sys
from typing import Any, Dict, List, Optional, Sequence, Tuple

from clustercheck import __version__
from clustercheck.config.settings import ConfigError, load_settings, read_config
from clustercheck.core.logging_utils import setup_logging

logger = logging.getLogger(__name__)

_EPILOG = (
    'Any arguments following "--" are passed directly to the mysql command\n'
    "and can be used to specify command-line options such as host, port, user, etc."
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="clustercheck",
        description="Report Galera cluster node health over HTTP for load balancer checks.",
        epilog=_EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("config", nargs="?", help="YAML config file (default: $CLUSTERCHECK_CONFIG or config/config.yaml)")
    parser.add_argument("--debug", action="store_true", help="Debug logging")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--mysql-binary", dest="binary", help="Path to mysql binary")
    parser.add_argument("--timeout", type=float, help="Status check timeout (seconds)")
    parser.add_argument("--check-interval", dest="interval", type=float, help="How often to check mysql status (seconds)")
    parser.add_argument("--donor", action="store_const", const=True, help="Available while node is a donor")
    parser.add_argument("--readonly", action="store_const", const=True, help="Available while node is read only")
    parser.add_argument("--failfile", help="Force fail marker file")
    parser.add_argument("--upfile", help="Force pass marker file")
    parser.add_argument("--bindport", type=int, help="HTTP bind port")
    parser.add_argument("--bindaddr", help="HTTP bind address")
    return parser


def split_passthrough(argv: Sequence[str]) -> Tuple[List[str], List[str]]:
    """Split argv at the first "--": (own args, probe args)."""
    argv = list(argv)
    if "--" in argv:
        i = argv.index("--")
        return argv[:i], argv[i + 1:]
    return argv, []


def apply_cli_overrides(config: Dict[str, Any], args: argparse.Namespace) -> Dict[str, Any]:
    """Return a copy of config with any command line flags applied on top."""
    mapping = {
        ("probe", "binary"): args.binary,
        ("probe", "timeout"): args.timeout,
        ("check", "interval"): args.interval,
        ("check", "available_when_donor"): args.donor,
        ("check", "available_when_readonly"): args.readonly,
        ("overrides", "force_fail_file"): args.failfile,
        ("overrides", "force_up_file"): args.upfile,
        ("server", "port"): args.bindport,
        ("server", "bind_address"): args.bindaddr,
    }
    out = {k: (dict(v) if isinstance(v, dict) else v) for k, v in config.items()}
    for (section, key), value in mapping.items():
        if value is None:
            continue
        sec = out.get(section)
        if not isinstance(sec, dict):
            sec = {}
            out[section] = sec
        sec[key] = value
    return out


def main(argv: Optional[Sequence[str]] = None) -> int:
    own, passthrough = split_passthrough(sys.argv[1:] if argv is None else argv)
    args = build_parser().parse_args(own)
    setup_logging(debug=args.debug)

    try:
        config, config_path = read_config(args.config)
        settings = load_settings(apply_cli_overrides(config, args), extra_args=passthrough)
    except ConfigError as e:
        logger.error("Configuration error: %s", e)
        return 2
    logger.info("clustercheck %s (config=%s)", __version__, config_path or "defaults")

    # Imported late so --help/--version do not pull in uvicorn
    from clustercheck.engine.daemon import ServerStartupError, run_daemon

    try:
        run_daemon(settings, log_level="debug" if args.debug else "info")
    except ServerStartupError as e:
        logger.error("%s", e)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    sys.exit(main())
