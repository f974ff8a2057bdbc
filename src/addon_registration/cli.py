"""
Command-line interface for the add-on registration tool.

Commands:
- regcodes: Look up reg-codes on removable media
- profile: Inspect or normalize an unattended registration profile
- config: Configuration management
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .audit_logger import AuditLogger, parse_log_level
from .config import (
    DEFAULT_CONFIG_PATH,
    AppConfig,
    apply_env_overrides,
    create_default_config,
    load_config_from_file,
    save_config_to_file,
)
from .exceptions import ProfileError
from .i18n import get_message
from .media import MediaFetcher
from .profile_xml import read_profile, write_profile
from .regcodes import RegCodeDiscovery
from .storage import ConfigProfile, RegistrationContext


def resolve_config(config_path: Optional[str], language: Optional[str] = None) -> Optional[AppConfig]:
    """
    Load the configuration and apply environment overrides.

    An explicitly given file must exist; the default file is optional.
    """
    if config_path:
        config = load_config_from_file(Path(config_path))
        if config is None:
            print(f"Error: Could not load config from {config_path}", file=sys.stderr)
            return None
    else:
        config = load_config_from_file(DEFAULT_CONFIG_PATH) or create_default_config()

    config = apply_env_overrides(config)
    if language:
        config.language = language
    return config


def create_logger(config: AppConfig, verbose: bool) -> Optional[AuditLogger]:
    """Create a logger when verbose output is requested."""
    if not verbose:
        return None
    return AuditLogger(
        output_format=config.logging.output_format,
        min_level=parse_log_level(config.logging.level),
    )


def create_context(config: AppConfig, logger: Optional[AuditLogger] = None) -> RegistrationContext:
    """Create the process-scoped registration context for a configuration."""
    fetcher = MediaFetcher(
        usb_mount_dir=config.media.usb_mount_dir,
        timeout=config.media.timeout_seconds,
        logger=logger,
    )
    discovery = RegCodeDiscovery(fetcher, base_url=config.media.base_url, logger=logger)
    return RegistrationContext(
        discovery=discovery,
        default_registration_url=config.default_registration_url,
        logger=logger,
    )


def mask_code(code: str) -> str:
    """Keep only the last four characters of a reg-code visible."""
    if len(code) <= 4:
        return "*" * len(code)
    return "*" * (len(code) - 4) + code[-4:]


def cmd_regcodes(args: argparse.Namespace) -> int:
    """Handle the 'regcodes' command."""
    config = resolve_config(args.config, args.language)
    if config is None:
        return 1
    if args.media_url:
        config.media.base_url = args.media_url

    logger = create_logger(config, args.verbose)
    context = create_context(config, logger)
    codes = context.reg_codes

    if not codes:
        print(get_message("regcodes.none_found", config.language))
        return 1

    shown = codes if args.show_codes else {name: mask_code(code) for name, code in codes.items()}
    if args.json:
        print(json.dumps(shown, indent=2, ensure_ascii=False))
    else:
        print(get_message("regcodes.found", config.language, count=len(codes)))
        for name, code in shown.items():
            print(f"  {name}: {code}")
    return 0


def load_profile(path: Path, language: str) -> Optional[ConfigProfile]:
    """Import a profile file, printing an error if it cannot be read."""
    try:
        settings = read_profile(path)
    except ProfileError as e:
        print(get_message("profile.read_failed", language, path=path, error=e.message), file=sys.stderr)
        return None

    profile = ConfigProfile()
    profile.import_settings(settings)
    return profile


def print_profile_summary(profile: ConfigProfile, language: str) -> None:
    """Print a short, secret-free description of a profile."""
    if not profile.do_registration:
        print(get_message("profile.registration_disabled", language))
        return

    print(get_message("profile.registration_enabled", language))
    server = profile.reg_server or get_message("profile.default_server", language)
    print(f"  {get_message('profile.server', language, server=server)}")
    print(f"  {get_message('profile.addons', language, count=len(profile.addons))}")
    for addon in profile.addons:
        release_type = addon.get("release_type") or "-"
        print(f"    - {addon.get('name', '')} {addon.get('version', '')} ({release_type})")


def cmd_profile(args: argparse.Namespace) -> int:
    """Handle the 'profile' command."""
    language = args.language
    profile = load_profile(Path(args.path), language)
    if profile is None:
        return 1

    if args.action == "show":
        print_profile_summary(profile, language)
        return 0

    if args.action == "normalize":
        output = Path(args.output) if args.output else Path(args.path)
        try:
            write_profile(output, profile.export())
        except ProfileError as e:
            print(f"Error: {e.message}", file=sys.stderr)
            return 1
        print(get_message("profile.written", language, path=output))
        return 0

    return 1


def cmd_config(args: argparse.Namespace) -> int:
    """Handle the 'config' command."""
    config_path = Path(args.path) if args.path else DEFAULT_CONFIG_PATH

    if args.action == "show":
        config = load_config_from_file(config_path)
        if config is None:
            print(f"No configuration found at: {config_path}")
            print("Use 'config init' to create a default configuration.")
            return 1

        print(f"Configuration from: {config_path}")
        print(f"  Language: {config.language}")
        print(f"  Media URL: {config.media.base_url}")
        print(f"  USB mount directory: {config.media.usb_mount_dir}")
        print(f"  Registration URL: {config.default_registration_url}")
        print(f"  Log level: {config.logging.level}")
        return 0

    elif args.action == "init":
        if config_path.exists() and not args.force:
            print(f"Configuration already exists at: {config_path}")
            print("Use --force to overwrite.")
            return 1

        config = create_default_config(language=args.language)
        if save_config_to_file(config, config_path):
            print(f"Configuration created at: {config_path}")
            return 0
        return 1

    elif args.action == "validate":
        config = load_config_from_file(config_path)
        if config is None:
            print(f"Error: Could not load config from {config_path}", file=sys.stderr)
            return 1
        try:
            parse_log_level(config.logging.level)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

        print(f"Configuration at {config_path} is valid.")
        return 0

    return 1


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="addon-registration",
        description="Add-on registration helper for (auto)installation",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # 'regcodes' command
    regcodes_parser = subparsers.add_parser(
        "regcodes",
        help="Look up reg-codes on removable media",
    )
    regcodes_parser.add_argument(
        "--media-url", "-m",
        help="Location of the reg-code files (default: usb:///)",
    )
    regcodes_parser.add_argument(
        "--show-codes",
        action="store_true",
        help="Print the reg-codes unmasked",
    )
    regcodes_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as JSON",
    )
    regcodes_parser.add_argument(
        "--config", "-c",
        help="Path to configuration file",
    )
    regcodes_parser.add_argument(
        "--language", "-l",
        choices=["de", "en"],
        help="Output language",
    )
    regcodes_parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose output",
    )
    regcodes_parser.set_defaults(func=cmd_regcodes)

    # 'profile' command
    profile_parser = subparsers.add_parser(
        "profile",
        help="Inspect or normalize an unattended registration profile",
    )
    profile_parser.add_argument(
        "action",
        choices=["show", "normalize"],
        help="Profile action",
    )
    profile_parser.add_argument(
        "path",
        help="Path to the XML profile",
    )
    profile_parser.add_argument(
        "--output", "-o",
        help="Where 'normalize' writes the profile (default: in place)",
    )
    profile_parser.add_argument(
        "--language", "-l",
        choices=["de", "en"],
        default="en",
        help="Output language (default: en)",
    )
    profile_parser.set_defaults(func=cmd_profile)

    # 'config' command
    config_parser = subparsers.add_parser(
        "config",
        help="Configuration management",
    )
    config_parser.add_argument(
        "action",
        choices=["show", "init", "validate"],
        help="Configuration action",
    )
    config_parser.add_argument(
        "--path", "-p",
        help="Path to configuration file",
    )
    config_parser.add_argument(
        "--force", "-f",
        action="store_true",
        help="Force overwrite existing configuration",
    )
    config_parser.add_argument(
        "--language", "-l",
        choices=["de", "en"],
        default="en",
        help="Default language for new configuration",
    )
    config_parser.set_defaults(func=cmd_config)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
