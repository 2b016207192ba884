"""Application configuration for the DevTools UI strings generator."""
import logging
import os
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional, Any

import jsonschema
import yaml
from dotenv import load_dotenv

from devtools_ui_strings.build_gate import DEFAULT_AUTOFIX_COMMAND
from devtools_ui_strings.logging_config import setup_logger
from devtools_ui_strings.string_scanner import DEFAULT_EXCLUDED_DIRS
from devtools_ui_strings.table_generator import DEFAULT_IDS_HEADER

DEFAULT_GRD_FILE_PATH = 'front_end/langpacks/devtools_ui_strings.grd'

# Shape of config.yaml. Unknown keys are tolerated so one file can be shared
# with other build scripts.
CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "frontend_root": {"type": "string"},
        "grd_file_path": {"type": "string"},
        "excluded_dirs": {"type": "array", "items": {"type": "string"}},
        "ids_header": {"type": "string"},
        "autofix_command": {"type": "string"},
        "show_progress": {"type": "boolean"},
        "logging": {
            "type": "object",
            "properties": {
                "log_level": {"type": "string"},
                "log_file_path": {"type": "string"},
                "log_to_console": {"type": "boolean"}
            }
        }
    }
}


@dataclass
class AppConfig:
    """Application configuration dataclass."""
    # Core paths
    project_root: str
    frontend_root: str
    grd_file_path: str

    # Scanning
    excluded_dirs: List[str]
    show_progress: bool

    # Generation
    ids_header: str
    autofix_command: str


def _compute_project_root() -> str:
    """Compute the project root directory."""
    script_real_path = os.path.realpath(__file__)
    script_dir = os.path.dirname(script_real_path)
    return os.path.abspath(os.path.join(script_dir, os.pardir))


def _load_dotenv_files(project_root: str) -> None:
    """Load .env files from project root or docker directory."""
    dotenv_path_project_root = os.path.join(project_root, '.env')
    dotenv_path_docker_dir = os.path.join(project_root, 'docker', '.env')

    if os.path.exists(dotenv_path_project_root):
        load_dotenv(dotenv_path_project_root)
    elif os.path.exists(dotenv_path_docker_dir):
        load_dotenv(dotenv_path_docker_dir)


def _load_yaml_config(project_root: str, config_file: Optional[str] = None) -> Dict[str, Any]:
    """Load and validate the YAML configuration file, falling back to defaults on any problem."""
    # An explicit path wins over DEVTOOLS_STRINGS_CONFIG_FILE, which wins over 'config.yaml'.
    if config_file is None:
        default_config_path = os.path.join(project_root, 'config.yaml')
        config_file = os.environ.get('DEVTOOLS_STRINGS_CONFIG_FILE', default_config_path)

    if not os.path.isabs(config_file):
        config_file = os.path.abspath(config_file)

    config = {}
    try:
        if not os.path.exists(config_file):
            print(f"Warning: Configuration file '{config_file}' not found. Using default configuration.",
                  file=sys.stderr)
            return config

        if not os.access(config_file, os.R_OK):
            print(f"Error: Configuration file '{config_file}' exists but is not readable. Check file permissions.",
                  file=sys.stderr)
            return config

        with open(config_file, 'r', encoding='utf-8') as config_file_stream:
            loaded_config = yaml.safe_load(config_file_stream)
            if loaded_config is None:
                print(f"Warning: Configuration file '{config_file}' is empty. Using default configuration.",
                      file=sys.stderr)
            elif isinstance(loaded_config, dict):
                jsonschema.validate(instance=loaded_config, schema=CONFIG_SCHEMA)
                config = loaded_config
            else:
                print(f"Error: Configuration file '{config_file}' must contain a YAML dictionary. Using defaults.",
                      file=sys.stderr)

    except yaml.YAMLError as e:
        print(f"Error: Invalid YAML in configuration file '{config_file}': {e}", file=sys.stderr)
        print("Please check your YAML syntax. Using default configuration.", file=sys.stderr)
    except jsonschema.ValidationError as e:
        print(f"Error: Configuration file '{config_file}' is invalid: {e.message}", file=sys.stderr)
        print("Using default configuration.", file=sys.stderr)
    except (OSError, IOError) as e:
        print(f"Error: Could not read configuration file '{config_file}': {e}", file=sys.stderr)
        print("Using default configuration.", file=sys.stderr)

    return config


def _setup_logger_from_config(config: Dict[str, Any]) -> logging.Logger:
    """Set up logger based on configuration."""
    log_config = config.get('logging', {})
    log_level_str = log_config.get('log_level', 'INFO').upper()
    log_file_path = log_config.get('log_file_path', '')
    log_to_console = log_config.get('log_to_console', True)
    return setup_logger(log_level_str, log_file_path, log_to_console)


def _resolve_grd_path(frontend_root: str, grd_file_path: str) -> str:
    if os.path.isabs(grd_file_path):
        return grd_file_path
    return os.path.join(frontend_root, grd_file_path)


def load_app_config(config_file: Optional[str] = None) -> AppConfig:
    """
    Load application configuration from YAML file and environment variables.

    Args:
        config_file: Optional explicit path to the YAML file.

    Returns:
        AppConfig: The loaded application configuration.
    """
    project_root = _compute_project_root()

    _load_dotenv_files(project_root)

    config = _load_yaml_config(project_root, config_file)

    logger = _setup_logger_from_config(config)

    frontend_root = os.path.abspath(
        os.environ.get('DEVTOOLS_FRONTEND_ROOT', config.get('frontend_root', '.'))
    )
    grd_file_path = _resolve_grd_path(frontend_root, config.get('grd_file_path', DEFAULT_GRD_FILE_PATH))
    logger.debug("Frontend root: %s, catalog: %s", frontend_root, grd_file_path)

    return AppConfig(
        project_root=project_root,
        frontend_root=frontend_root,
        grd_file_path=grd_file_path,
        excluded_dirs=config.get('excluded_dirs', list(DEFAULT_EXCLUDED_DIRS)),
        show_progress=config.get('show_progress', False),
        ids_header=config.get('ids_header', DEFAULT_IDS_HEADER),
        autofix_command=config.get('autofix_command', DEFAULT_AUTOFIX_COMMAND)
    )
