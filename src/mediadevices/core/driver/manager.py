"""Registry of available capture drivers.

This module provides the DriverManager class which keeps every registered
driver in registration order and answers filtered queries over them.
"""

from __future__ import annotations

import logging
import threading
from typing import List, Optional

from mediadevices.core.driver.base import Driver
from mediadevices.core.driver.filters import FilterFn

logger = logging.getLogger(__name__)


class DriverManager:
    """Manages the set of registered drivers.

    Query results follow registration order, which makes selection between
    equally fitting devices deterministic.
    """

    def __init__(self):
        """Initialize an empty DriverManager."""
        self._drivers: dict[str, Driver] = {}
        self._lock = threading.RLock()
        logger.debug("DriverManager initialized")

    def register(self, driver: Driver) -> None:
        """Register a driver.

        Args:
            driver: Driver instance

        Raises:
            ValueError: If a driver with the same id is already registered
        """
        with self._lock:
            if driver.id in self._drivers:
                raise ValueError(f"Driver already registered: {driver.id}")

            self._drivers[driver.id] = driver
            logger.info(f"Registered driver: {driver.info().label} ({driver.id})")

    def unregister(self, driver_id: str) -> Driver:
        """Remove a driver from the registry.

        Args:
            driver_id: Driver identifier

        Returns:
            The removed driver

        Raises:
            KeyError: If driver_id is not registered
        """
        with self._lock:
            if driver_id not in self._drivers:
                raise KeyError(f"Driver not found: {driver_id}")

            driver = self._drivers.pop(driver_id)
            logger.info(f"Unregistered driver: {driver.info().label} ({driver_id})")
            return driver

    def query(self, filter_fn: FilterFn) -> List[Driver]:
        """Get every driver accepted by a filter.

        Args:
            filter_fn: Predicate over drivers

        Returns:
            Matching drivers in registration order
        """
        with self._lock:
            drivers = list(self._drivers.values())
        return [d for d in drivers if filter_fn(d)]

    def get(self, driver_id: str) -> Optional[Driver]:
        """Get a driver by id, or None if not registered."""
        with self._lock:
            return self._drivers.get(driver_id)

    def clear(self) -> None:
        """Remove every driver."""
        with self._lock:
            self._drivers.clear()
            logger.info("Cleared all drivers")

    def __len__(self) -> int:
        with self._lock:
            return len(self._drivers)

    def __contains__(self, driver_id: str) -> bool:
        with self._lock:
            return driver_id in self._drivers

    def __repr__(self) -> str:
        with self._lock:
            return f"DriverManager(drivers={len(self._drivers)})"


_default_manager: Optional[DriverManager] = None
_default_lock = threading.Lock()


def get_manager() -> DriverManager:
    """Get the process-wide default DriverManager."""
    global _default_manager
    with _default_lock:
        if _default_manager is None:
            _default_manager = DriverManager()
        return _default_manager
