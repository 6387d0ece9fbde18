import logging

from error_handler import ConfigurationError

logger = logging.getLogger('table_grapher.config_validator')

DEFAULT_NUMERIC_THRESHOLD = 0.5
DEFAULT_FETCH_TIMEOUT_SECONDS = 30
DEFAULT_LOG_LEVEL = "INFO"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _validate_required_string(config_module, attr_name, min_length=1, display_name=None):
    """Validate a required string configuration attribute."""
    if display_name is None:
        display_name = attr_name.replace('_', ' ').title()

    if not hasattr(config_module, attr_name) or not getattr(config_module, attr_name):
        logger.error(f"{display_name} not found in config or is empty")
        raise ConfigurationError(f"{display_name} is missing or empty in config")

    value = getattr(config_module, attr_name)
    if not isinstance(value, str) or len(value) < min_length:
        logger.warning(f"{display_name} in config appears to be invalid (too short or not a string).")


def _validate_numeric_threshold(config_module):
    """Validate the numeric column threshold, which must lie in (0, 1]."""
    raw_threshold = getattr(config_module, "numeric_threshold", DEFAULT_NUMERIC_THRESHOLD)

    try:
        threshold = float(raw_threshold)
        if not 0 < threshold <= 1:
            logger.warning(f"numeric_threshold in config ('{raw_threshold}') must be in (0, 1]. Using default.")
            threshold = DEFAULT_NUMERIC_THRESHOLD
    except (ValueError, TypeError):
        logger.warning(f"Invalid numeric_threshold in config ('{raw_threshold}'), using default.")
        threshold = DEFAULT_NUMERIC_THRESHOLD

    config_module.numeric_threshold = threshold


def _validate_fetch_timeout(config_module):
    """Validate the page fetch timeout."""
    raw_timeout = getattr(config_module, "fetch_timeout_seconds", DEFAULT_FETCH_TIMEOUT_SECONDS)

    try:
        timeout = int(raw_timeout)
        if timeout <= 0:
            logger.warning(f"fetch_timeout_seconds in config ('{raw_timeout}') must be positive. Using default.")
            timeout = DEFAULT_FETCH_TIMEOUT_SECONDS
    except (ValueError, TypeError):
        logger.warning(f"Invalid fetch_timeout_seconds in config ('{raw_timeout}'), using default.")
        timeout = DEFAULT_FETCH_TIMEOUT_SECONDS

    config_module.fetch_timeout_seconds = timeout


def _validate_log_level(config_module):
    """Validate the configured log level name."""
    level = str(getattr(config_module, "log_level", DEFAULT_LOG_LEVEL)).upper()
    if level not in VALID_LOG_LEVELS:
        logger.warning(f"Unknown log_level in config ('{level}'). Using {DEFAULT_LOG_LEVEL}.")
        level = DEFAULT_LOG_LEVEL
    config_module.log_level = level


def _validate_public_url_prefix(config_module):
    """Strip a trailing slash so references join cleanly."""
    prefix = getattr(config_module, "graph_public_url_prefix", "") or ""
    if prefix.endswith("/") and len(prefix) > 1:
        config_module.graph_public_url_prefix = prefix.rstrip("/")


def validate_config(config_module):
    """
    Validate the configuration module (config.py)

    Args:
        config_module: The imported config module

    Returns:
        bool: True if the configuration is valid

    Raises:
        ConfigurationError: If critical configuration is invalid or missing
    """
    _validate_required_string(config_module, "graph_output_dir", display_name="Graph output directory")
    _validate_required_string(config_module, "table_selector", display_name="Table selector")

    _validate_numeric_threshold(config_module)
    _validate_fetch_timeout(config_module)
    _validate_log_level(config_module)
    _validate_public_url_prefix(config_module)

    logger.info(
        f"Graphs will be written to {config_module.graph_output_dir} "
        f"(numeric threshold {config_module.numeric_threshold:.2f})"
    )

    return True
