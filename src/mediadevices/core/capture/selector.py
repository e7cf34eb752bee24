"""Selection of the driver configuration that best fits a request.

Implements the SelectSettings algorithm of the W3C Media Capture and Streams
standard: every (driver, configuration) pair is scored by fitness
distance minus driver priority, and the lowest score wins. On ties the pair
scanned first wins; scan order is registry order, then the order in which
the driver lists its configurations.

Reference: https://w3c.github.io/mediacapture-main/#dfn-selectsettings
"""

from __future__ import annotations

import copy
import dataclasses
import logging
import math
from typing import Optional, Tuple

from mediadevices.core.capture.constraints import MediaTrackConstraints
from mediadevices.core.capture.prober import query_driver_properties
from mediadevices.core.driver.base import Driver
from mediadevices.core.driver.filters import FilterFn
from mediadevices.core.driver.manager import DriverManager
from mediadevices.core.errors import Candidate, NotFoundError
from mediadevices.core.prop.media import Media

logger = logging.getLogger(__name__)


def select_best_driver(
    filter_fn: FilterFn,
    constraints: MediaTrackConstraints,
    manager: Optional[DriverManager] = None,
) -> Tuple[Driver, MediaTrackConstraints]:
    """Find the driver and configuration closest to the constraints.

    Args:
        filter_fn: Predicate selecting candidate drivers
        constraints: Requested constraints
        manager: Driver registry (default: the process-wide manager)

    Returns:
        The winning driver and a copy of the constraints whose
        selected_media holds the configuration to drive it at

    Raises:
        NotFoundError: If no configuration satisfies the constraints
    """
    best_driver: Optional[Driver] = None
    best_prop: Optional[Media] = None
    min_fitness_dist = math.inf

    driver_properties = query_driver_properties(filter_fn, manager)
    for d, props in driver_properties.items():
        priority = float(d.info().priority)
        for p in props:
            fitness_dist, ok = constraints.fitness_distance(p)
            if not ok:
                continue
            fitness_dist -= priority
            if fitness_dist < min_fitness_dist:
                min_fitness_dist = fitness_dist
                best_driver = d
                best_prop = p

    if best_driver is None or best_prop is None:
        candidates = [
            Candidate(driver_id=d.id, label=d.info().label, media=p)
            for d, props in driver_properties.items()
            for p in props
        ]
        logger.warning(
            f"No driver fits the constraints ({len(candidates)} configuration(s) rejected)"
        )
        raise NotFoundError(candidates, copy.deepcopy(constraints))

    selected = Media()
    selected.merge_constraints(constraints)
    selected.merge(best_prop)

    logger.debug(
        f"Selected {best_driver.info().label} ({best_driver.id}) "
        f"with fitness distance {min_fitness_dist:.4f}"
    )
    return best_driver, dataclasses.replace(constraints, selected_media=selected)
