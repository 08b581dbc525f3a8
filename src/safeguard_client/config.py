"""Configuration and logging setup for applications using the client."""

import json
import logging
import os
import pathlib

import pydantic
import structlog

from . import safeguardapi

CONFIG_ENV_VAR = "SAFEGUARD_CLIENT_CONFIG_PATH"
logger = structlog.get_logger(__name__)


class ClientConfig(pydantic.BaseModel):
    """Configuration for a Safeguard client."""

    appliance_url: str = pydantic.Field(description="Base URL of the appliance")
    access_token_file: str | None = pydantic.Field(
        None,
        description="Path to file containing the API user token",
    )
    api_version: str = pydantic.Field(
        safeguardapi.DEFAULT_API_VERSION,
        description="Safeguard core API version",
    )
    timeout: float = pydantic.Field(
        safeguardapi.DEFAULT_TIMEOUT,
        description="Request timeout in seconds",
        gt=0,
    )
    verify_tls: bool = pydantic.Field(
        True,
        description="Verify the appliance's TLS certificate",
    )
    checkout_poll_interval: float = pydantic.Field(
        safeguardapi.DEFAULT_CHECKOUT_POLL_INTERVAL,
        description="Seconds between re-fetches while waiting for a pending request",
        gt=0,
    )
    task_poll_interval: float = pydantic.Field(
        safeguardapi.DEFAULT_TASK_POLL_INTERVAL,
        description="Seconds between report queries while waiting for a task",
        gt=0,
    )
    log_level: str = pydantic.Field("INFO", description="Logging level")


def configure_logging(log_level_name: str) -> None:
    """Configure structlog for logfmt output."""
    log_level = getattr(logging, log_level_name.upper(), logging.INFO)
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.EventRenamer("msg"),
            structlog.processors.format_exc_info,
            structlog.processors.LogfmtRenderer(
                key_order=("timestamp", "level", "msg"),
            ),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def load_config(config_path: str | None = None) -> ClientConfig:
    """Load configuration from a JSON file.

    Without an explicit path, the path is taken from the
    ``SAFEGUARD_CLIENT_CONFIG_PATH`` environment variable.
    """
    resolved_path = config_path or os.environ.get(CONFIG_ENV_VAR)
    if not resolved_path:
        msg = f"No configuration path given and {CONFIG_ENV_VAR} is not set"
        raise FileNotFoundError(msg)

    path = pathlib.Path(resolved_path)
    if not path.exists():
        msg = f"Configuration file not found: {resolved_path}"
        raise FileNotFoundError(msg)

    with path.open("r") as f:
        data = json.load(f)

    return ClientConfig(**data)


def create_client(config: ClientConfig) -> safeguardapi.SafeguardClient:
    """Construct a client from validated config."""
    client = safeguardapi.SafeguardClient(
        appliance_url=config.appliance_url,
        token_file=config.access_token_file,
        api_version=config.api_version,
        timeout=config.timeout,
        verify=config.verify_tls,
        checkout_poll_interval=config.checkout_poll_interval,
        task_poll_interval=config.task_poll_interval,
    )
    logger.info(
        "Created Safeguard client",
        appliance_url=config.appliance_url,
        api_version=config.api_version,
    )
    return client


def create_client_from_file(
    config_path: str | None = None,
) -> safeguardapi.SafeguardClient:
    """Load config, configure logging and construct a client.

    Args:
        config_path: Path to JSON config file. If not provided, reads from
            the SAFEGUARD_CLIENT_CONFIG_PATH environment variable.
    """
    config = load_config(config_path)
    configure_logging(config.log_level)
    return create_client(config)
