"""Location Directory — enumerates registered locations with sensor counts."""

from __future__ import annotations

import logging

from src.contracts.errors import CatalogLoadFailed, UnknownLocation
from src.contracts.location import Location
from src.catalog.naming import format_location_name
from src.catalog.repository import CatalogRepository

log = logging.getLogger(__name__)


class LocationDirectory:
    """Lists locations in registration order.

    Sensor counts come from the repository, which warms its cache as a
    side effect. One unreadable source never aborts the listing: it is
    logged and omitted, or flagged with ``available=False`` on request.
    """

    def __init__(self, repository: CatalogRepository) -> None:
        self.repository = repository

    def list_locations(self, include_unavailable: bool = False) -> list[Location]:
        locations: list[Location] = []
        skipped = 0
        for location_id in self.repository.registry.ids():
            try:
                locations.append(self._describe(location_id))
            except CatalogLoadFailed as exc:
                skipped += 1
                log.warning("Location '%s' unavailable: %s", location_id, exc)
                if include_unavailable:
                    locations.append(
                        Location(
                            id=location_id,
                            name=format_location_name(location_id),
                            sensor_count=0,
                            region=self.repository.registry.region_for(location_id),
                            available=False,
                        )
                    )
        log.info("Directory listed %d locations (%d unavailable)", len(locations), skipped)
        return locations

    def get(self, location_id: str) -> Location:
        """Describe one location.

        Raises:
            UnknownLocation: If the id is not registered.
            CatalogLoadFailed: If its catalogue cannot be loaded.
        """
        if location_id not in self.repository.registry:
            raise UnknownLocation(location_id)
        return self._describe(location_id)

    def _describe(self, location_id: str) -> Location:
        catalogue = self.repository.get_catalogue(location_id)
        return Location(
            id=location_id,
            name=format_location_name(location_id),
            sensor_count=len(catalogue),
            region=self.repository.registry.region_for(location_id),
        )
