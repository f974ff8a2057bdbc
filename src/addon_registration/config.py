"""
Configuration dataclasses for the add-on registration tool.

This module defines the settings used by the command line tool: where
reg-code files are fetched from, the default registration server, logging
and output language. Settings are stored as JSON and can be overridden
from the environment (or a .env file).
"""

import json
import os
import sys
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

DEFAULT_CONFIG_PATH = Path.home() / ".addon_registration" / "config.json"
DEFAULT_REGISTRATION_URL = "https://scc.suse.com"

# Environment variable => setting overridden by it
ENV_MEDIA_URL = "REGISTRATION_MEDIA_URL"
ENV_USB_MOUNT = "REGISTRATION_USB_MOUNT"
ENV_REGISTRATION_URL = "REGISTRATION_URL"
ENV_LANGUAGE = "REGISTRATION_LANG"


@dataclass
class MediaConfig:
    """Location of the removable media holding reg-code files."""

    base_url: str = "usb:///"
    usb_mount_dir: Path = Path("/media/usb")
    timeout_seconds: float = 10.0


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str = "info"
    output_format: str = "text"  # 'json', 'text', 'both'


@dataclass
class AppConfig:
    """Main tool configuration combining all sub-configurations."""

    media: MediaConfig = field(default_factory=MediaConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    default_registration_url: str = DEFAULT_REGISTRATION_URL
    language: str = "en"  # 'de' or 'en'


def create_default_config(language: str = "en") -> AppConfig:
    """Create a default configuration."""
    return AppConfig(language=language)


def load_config_from_file(config_path: Path) -> Optional[AppConfig]:
    """
    Load configuration from a JSON file.

    Args:
        config_path: Path to the configuration file

    Returns:
        AppConfig if successful, None otherwise
    """
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = json.load(f)

        media_data = data.get("media", {})
        media = MediaConfig(
            base_url=media_data.get("base_url", "usb:///"),
            usb_mount_dir=Path(media_data.get("usb_mount_dir", "/media/usb")),
            timeout_seconds=float(media_data.get("timeout_seconds", 10.0)),
        )

        logging_data = data.get("logging", {})
        logging_config = LoggingConfig(
            level=logging_data.get("level", "info"),
            output_format=logging_data.get("output_format", "text"),
        )

        return AppConfig(
            media=media,
            logging=logging_config,
            default_registration_url=data.get(
                "default_registration_url", DEFAULT_REGISTRATION_URL
            ),
            language=data.get("language", "en"),
        )

    except (json.JSONDecodeError, KeyError, TypeError, ValueError, AttributeError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return None
    except FileNotFoundError:
        return None


def save_config_to_file(config: AppConfig, config_path: Path) -> bool:
    """
    Save configuration to a JSON file.

    Args:
        config: AppConfig to save
        config_path: Path to save the configuration

    Returns:
        True if successful, False otherwise
    """
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)

        data = {
            "media": {
                "base_url": config.media.base_url,
                "usb_mount_dir": str(config.media.usb_mount_dir),
                "timeout_seconds": config.media.timeout_seconds,
            },
            "logging": {
                "level": config.logging.level,
                "output_format": config.logging.output_format,
            },
            "default_registration_url": config.default_registration_url,
            "language": config.language,
        }

        with open(config_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

        return True

    except (OSError, TypeError) as e:
        print(f"Error saving config: {e}", file=sys.stderr)
        return False


def apply_env_overrides(config: AppConfig, dotenv_path: Optional[Path] = None) -> AppConfig:
    """
    Return a copy of the configuration with environment overrides applied.

    A .env file (the given path, or one found from the working directory) is
    loaded first; variables already set in the environment take precedence.
    """
    load_dotenv(dotenv_path=dotenv_path)

    media = config.media
    if os.getenv(ENV_MEDIA_URL):
        media = replace(media, base_url=os.environ[ENV_MEDIA_URL])
    if os.getenv(ENV_USB_MOUNT):
        media = replace(media, usb_mount_dir=Path(os.environ[ENV_USB_MOUNT]))

    return replace(
        config,
        media=media,
        default_registration_url=os.getenv(ENV_REGISTRATION_URL) or config.default_registration_url,
        language=(os.getenv(ENV_LANGUAGE) or config.language).lower(),
    )
