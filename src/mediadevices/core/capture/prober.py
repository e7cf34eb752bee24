"""Reading supported configurations from registered drivers."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from mediadevices.core.driver.base import Driver
from mediadevices.core.driver.filters import FilterFn
from mediadevices.core.driver.manager import DriverManager, get_manager
from mediadevices.core.errors import DeviceError
from mediadevices.core.models import DeviceState
from mediadevices.core.prop.media import Media

logger = logging.getLogger(__name__)


def query_driver_properties(
    filter_fn: FilterFn, manager: Optional[DriverManager] = None
) -> Dict[Driver, List[Media]]:
    """Get the configuration sets of every driver accepted by a filter.

    Closed drivers are opened for the duration of the call and closed again
    before returning, on every exit path. Drivers that were already open are
    read as they are and left open. A driver that fails to open or to report
    its configurations is left out of the result.

    Args:
        filter_fn: Predicate selecting the drivers to probe
        manager: Driver registry (default: the process-wide manager)

    Returns:
        Mapping of driver to its configuration sets, in registry order
    """
    manager = manager if manager is not None else get_manager()
    drivers = manager.query(filter_fn)
    properties: Dict[Driver, List[Media]] = {}
    need_to_close: List[Driver] = []

    try:
        for d in drivers:
            if d.status() == DeviceState.CLOSED:
                try:
                    d.open()
                except DeviceError as e:
                    # Without opening it we can't read its properties
                    logger.warning(f"Skipping driver {d.info().label} ({d.id}): {e}")
                    continue
                need_to_close.append(d)

            try:
                properties[d] = d.properties()
            except DeviceError as e:
                logger.warning(f"Skipping driver {d.info().label} ({d.id}): {e}")
    finally:
        for d in need_to_close:
            try:
                d.close()
            except DeviceError as e:
                logger.warning(f"Failed to close driver {d.info().label} ({d.id}) after probing: {e}")

    logger.debug(
        f"Probed {len(properties)} of {len(drivers)} driver(s), "
        f"{sum(len(p) for p in properties.values())} configuration(s)"
    )
    return properties
