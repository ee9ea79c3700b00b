"""
Snowflake session factory.

A named connection (from connections.toml / config.toml) wins; otherwise
the session is built from SNOWFLAKE_* environment variables.
"""

import logging
import os
from typing import Any, Dict, Optional

from snowflake.snowpark import Session

from snowkit.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Session parameter -> environment variable
ENV_PARAMETERS = {
    "account": "SNOWFLAKE_ACCOUNT",
    "user": "SNOWFLAKE_USER",
    "password": "SNOWFLAKE_PASSWORD",
    "authenticator": "SNOWFLAKE_AUTHENTICATOR",
    "private_key_file": "SNOWFLAKE_PRIVATE_KEY_FILE",
    "role": "SNOWFLAKE_ROLE",
    "warehouse": "SNOWFLAKE_WAREHOUSE",
    "host": "SNOWFLAKE_HOST",
}

REQUIRED_PARAMETERS = ("account", "user")


def connection_parameters_from_env() -> Dict[str, Any]:
    """Session parameters found in the environment (unset variables are left out)."""
    return {
        parameter: os.environ[variable]
        for parameter, variable in ENV_PARAMETERS.items()
        if os.environ.get(variable)
    }


def get_session(connection_name: Optional[str] = None) -> Session:
    """
    Create a Snowpark session.

    Args:
        connection_name: Named connection; defaults to $SNOWFLAKE_CONNECTION_NAME

    Raises:
        ConfigurationError: If neither a connection name nor account/user are set
    """
    connection_name = connection_name or os.environ.get("SNOWFLAKE_CONNECTION_NAME")
    if connection_name:
        logger.info(f"Connecting with named connection '{connection_name}'")
        return Session.builder.config("connection_name", connection_name).create()

    parameters = connection_parameters_from_env()
    missing = [p for p in REQUIRED_PARAMETERS if p not in parameters]
    if missing:
        variables = ", ".join(ENV_PARAMETERS[p] for p in missing)
        raise ConfigurationError(f"No connection name given and {variables} not set")

    logger.info(f"Connecting to account {parameters['account']} as {parameters['user']}")
    return Session.builder.configs(parameters).create()
