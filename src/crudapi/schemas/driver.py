"""Database driver defaults.

Each supported driver has a fixed default address and port. These sit
between the schema defaults and the caller-supplied values during
resolution.
"""

import logging
from enum import Enum
from typing import Mapping, Any

from crudapi.schemas.base import CrudApiBaseModel
from crudapi.schemas.errors import UnknownDriverError


logger = logging.getLogger(__name__)


class Driver(str, Enum):
    """Supported database drivers."""
    MYSQL = "mysql"
    PGSQL = "pgsql"
    SQLSRV = "sqlsrv"
    SQLITE = "sqlite"


DEFAULT_DRIVER = Driver.MYSQL

# driver -> (address, port)
_DRIVER_ENDPOINTS = {
    Driver.MYSQL: ("localhost", 3306),
    Driver.PGSQL: ("localhost", 5432),
    Driver.SQLSRV: ("localhost", 1433),
    Driver.SQLITE: ("data.db", 0),
}


class DriverDefaults(CrudApiBaseModel):
    """Driver-specific layer of the configuration merge."""
    driver: Driver
    address: str
    port: int

    def to_values(self) -> dict:
        return self.model_dump()


def get_driver(values: Mapping[str, Any]) -> Driver:
    """Return the requested driver, falling back to mysql.

    Raises
    ------
    UnknownDriverError
        If the requested driver has no known defaults.
    """
    requested = values.get("driver")
    if requested is None:
        return DEFAULT_DRIVER
    try:
        return Driver(requested)
    except ValueError:
        raise UnknownDriverError(requested) from None


def driver_defaults(values: Mapping[str, Any]) -> DriverDefaults:
    """Compute driver, address and port defaults for raw caller values.

    Parameters
    ----------
    values : Mapping
        Raw caller values; only ``driver`` is inspected.

    Returns
    -------
    DriverDefaults
        The driver with its default address and port.

    Examples
    --------
    >>> driver_defaults({}).to_values()
    {'driver': 'mysql', 'address': 'localhost', 'port': 3306}
    >>> driver_defaults({"driver": "sqlite"}).address
    'data.db'
    """
    driver = get_driver(values)
    address, port = _DRIVER_ENDPOINTS[driver]
    logger.debug("Using %s driver defaults (%s:%d)", driver.value, address, port)
    return DriverDefaults(driver=driver, address=address, port=port)
