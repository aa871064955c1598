"""Writers for database client configuration files

Each writer takes the resolved configuration and the credentials returned
by the Okta flow. Files are written atomically.
"""

from .dbt import write_dbt_config
from .generic import write_generic_credentials
from .odbc import write_odbc_config

__all__ = [
    "write_dbt_config",
    "write_generic_credentials",
    "write_odbc_config",
]
