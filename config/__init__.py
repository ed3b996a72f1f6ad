import os
import json
from pathlib import Path
from dotenv import load_dotenv
from .logging_config import setup_app_logging
import logging

# Load environment variables from .env file
load_dotenv()

# Get the config directory path (where this file is located)
CONFIG_DIR = Path(__file__).parent

PROJECT_ROOT = CONFIG_DIR.parent

# Load configuration from config.json
config_path = CONFIG_DIR / 'config.json'
with open(config_path, 'r', encoding='utf-8') as f:
    CONFIG = json.load(f)

CONFIG['project_root'] = str(PROJECT_ROOT)

SUPPORTED_ANALYSIS_PROVIDERS = ("mock", "remote")


# --- Helper function to get config value from CONFIG or environment variable ---
def get_config_value(json_keys: list, env_var_name: str, default_value: any = None):
    """
    Retrieves a configuration value.
    Priority:
    1. Environment variable (if env_var_name is provided and variable is set).
    2. Value from CONFIG dictionary (using json_keys).
    3. default_value.
    """
    # Try environment variable first
    if env_var_name:
        env_value = os.getenv(env_var_name)
        if env_value is not None:
            # Attempt to match type of default_value if it's bool, int or float
            if isinstance(default_value, bool):
                if env_value.lower() == 'true': return True
                if env_value.lower() == 'false': return False
            elif isinstance(default_value, int):
                try:
                    return int(env_value)
                except ValueError:
                    pass # Fall through to JSON or default if not a valid int
            elif isinstance(default_value, float):
                try:
                    return float(env_value)
                except ValueError:
                    pass
            else:
                return env_value

    # Try from CONFIG dictionary (loaded from JSON)
    current_level = CONFIG
    try:
        for key in json_keys:
            current_level = current_level[key]
        if isinstance(current_level, (str, int, bool, float, list, dict)):
            return current_level
    except (KeyError, TypeError):
        pass # Key not found or CONFIG structure not as expected, fall through to default

    # Fallback to default value
    return default_value


def validate_config():
    """Validate that all required configuration sections are present.

    Identity backend credentials are optional: when they are missing or still
    placeholders the identity layer runs in simulated mode.
    """
    required_sections = ['identity', 'analysis', 'session']
    for section in required_sections:
        if section not in CONFIG:
            raise ValueError(f"Missing configuration section: {section}")

    provider = str(CONFIG['analysis'].get('provider', 'mock')).strip().lower()
    if provider not in SUPPORTED_ANALYSIS_PROVIDERS:
        raise ValueError(f"Unsupported analysis provider: {provider}")


# --- Environment overrides ---
CONFIG['identity'].setdefault('backend', {})
CONFIG['identity']['backend']['api_key'] = get_config_value(
    ['identity', 'backend', 'api_key'], 'IDENTITY_API_KEY', ''
)
CONFIG['identity']['backend']['project_id'] = get_config_value(
    ['identity', 'backend', 'project_id'], 'IDENTITY_PROJECT_ID', ''
)
CONFIG['identity'].setdefault('simulated', {})
CONFIG['identity']['simulated']['login_delay_s'] = get_config_value(
    ['identity', 'simulated', 'login_delay_s'], 'SIMULATED_LOGIN_DELAY_S', 1.0
)
CONFIG['identity']['simulated']['logout_delay_s'] = get_config_value(
    ['identity', 'simulated', 'logout_delay_s'], 'SIMULATED_LOGOUT_DELAY_S', 0.5
)

CONFIG['analysis'] = {
    'provider': get_config_value(['analysis', 'provider'], 'ANALYSIS_PROVIDER', 'mock'),
    'base_url': get_config_value(['analysis', 'base_url'], 'ANALYSIS_BASE_URL', 'http://localhost:8000'),
    'timeout_s': get_config_value(['analysis', 'timeout_s'], 'ANALYSIS_TIMEOUT_S', 30.0),
}

# Validate configuration on module import
validate_config()

# --- Logging Configuration ---
# Environment variables take precedence over config.json.
CONFIG['logging'] = {
    'level': get_config_value(['logging', 'level'], 'LOG_LEVEL', 'INFO'),
    'file_path': get_config_value(['logging', 'file_path'], 'LOG_FILE_PATH', 'logs/vernacular_ops.log'),
    'max_bytes': get_config_value(['logging', 'max_bytes'], 'LOG_MAX_BYTES', 5*1024*1024), # 5MB
    'backup_count': get_config_value(['logging', 'backup_count'], 'LOG_BACKUP_COUNT', 3),
    'format': get_config_value(
        ['logging', 'format'],
        'LOG_FORMAT',
        '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(lineno)d - %(message)s'
    ),
    'date_format': get_config_value(
        ['logging', 'date_format'],
        'LOG_DATE_FORMAT',
        '%Y-%m-%d %H:%M:%S'
    )
}

# --- Setup Application Logging ---
setup_app_logging(config=CONFIG.get('logging'))

config_init_logger = logging.getLogger(__name__)
config_init_logger.info("[config_init] Logging initialized from config/__init__.py using setup_app_logging.")
