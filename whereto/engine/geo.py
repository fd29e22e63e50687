"""
whereto.engine.geo — Neighborhood Catalogue & Zone Lookup
==========================================================

A neighborhood is a named circle (center + radius in meters).  The
catalogue is an ordered, immutable tuple built once at import time and
shared by every request; nothing mutates it, so no locking is needed.

Lookup walks the catalogue in declaration order and returns the **first**
circle containing the point.  Circles overlap in a few places (Greektown /
Danforth, Queen West / Chinatown); declaration order settles those, not the
nearest center.

This module is pure calculation — no database I/O.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

EARTH_RADIUS_M = 6_371_000.0


# ---------------------------------------------------------------------------
# Distance
# ---------------------------------------------------------------------------
def haversine_m(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """Great-circle distance in meters.  Used for zone membership."""
    p1 = math.radians(lat1)
    p2 = math.radians(lat2)
    dp = math.radians(lat2 - lat1)
    dl = math.radians(lng2 - lng1)
    a = math.sin(dp / 2) ** 2 + math.cos(p1) * math.cos(p2) * math.sin(dl / 2) ** 2
    return 2 * EARTH_RADIUS_M * math.asin(math.sqrt(a))


# ---------------------------------------------------------------------------
# Neighborhood
# ---------------------------------------------------------------------------
@dataclass(frozen=True, slots=True)
class Neighborhood:
    """One named circular zone."""

    name: str
    area: str
    lat: float
    lng: float
    radius_meters: float
    popular_intents: tuple[str, ...] = field(default=())

    def contains(self, lat: float, lng: float) -> bool:
        return haversine_m(lat, lng, self.lat, self.lng) <= self.radius_meters


def _hood(name, area, lat, lng, radius, *intents) -> Neighborhood:
    return Neighborhood(name, area, lat, lng, float(radius), tuple(intents))


TORONTO_NEIGHBORHOODS: tuple[Neighborhood, ...] = (
    # Downtown
    _hood("Financial District", "Downtown", 43.6480, -79.3816, 700, "Client Dinner", "Cocktails"),
    _hood("Harbourfront", "Downtown", 43.6383, -79.3855, 1000, "Scenic Views", "Patio Weather"),
    _hood("St. Lawrence Market", "Downtown", 43.6487, -79.3715, 600, "Trending Now", "Budget Eats"),
    _hood("King West", "Downtown", 43.6441, -79.3996, 700, "Group Hang", "Cocktails"),
    _hood("Distillery District", "Downtown", 43.6503, -79.3596, 500, "Date / Chill", "Scenic Views"),
    # West End
    _hood("Liberty Village", "West End", 43.6380, -79.4187, 700, "Study / Work", "Laptop-Friendly"),
    _hood("Parkdale", "West End", 43.6402, -79.4357, 800, "Budget Eats", "Hidden Gems"),
    _hood("Roncesvalles", "West End", 43.6455, -79.4501, 800, "Coffee & Catch-Up", "Family-Friendly"),
    _hood("Junction", "West End", 43.6655, -79.4655, 700, "Locals Only", "Trending Now"),
    _hood("High Park", "West End", 43.6465, -79.4637, 1000, "Scenic Views", "Coffee & Catch-Up"),
    _hood("Queen West", "West End", 43.6476, -79.3970, 700, "Trending Now", "Date / Chill"),
    _hood("Ossington", "West End", 43.6457, -79.4195, 500, "Date / Chill", "Cocktails"),
    _hood("Dundas West", "West End", 43.6498, -79.4215, 800, "Locals Only", "Group Hang"),
    _hood("Trinity Bellwoods", "West End", 43.6465, -79.4137, 600, "Group Hang", "Coffee & Catch-Up"),
    _hood("Little Italy", "West End", 43.6552, -79.4143, 600, "Date / Chill", "Patio Weather"),
    _hood("Bloor West Village", "West End", 43.6496, -79.4842, 800, "Family-Friendly", "Coffee & Catch-Up"),
    # East End
    _hood("Leslieville", "East End", 43.6625, -79.3315, 800, "Coffee & Catch-Up", "Locals Only"),
    _hood("The Beaches", "East End", 43.6710, -79.2967, 1000, "Scenic Views", "Patio Weather"),
    _hood("Greektown", "East End", 43.6780, -79.3486, 700, "Group Hang", "Family-Friendly"),
    _hood("Danforth", "East End", 43.6792, -79.3444, 900, "Group Hang", "Budget Eats"),
    _hood("Cabbagetown", "East End", 43.6657, -79.3644, 700, "Hidden Gems", "Coffee & Catch-Up"),
    _hood("Riverdale", "East End", 43.6698, -79.3508, 800, "Scenic Views", "Locals Only"),
    # Midtown
    _hood("Yorkville", "Midtown", 43.6704, -79.3910, 600, "Date / Chill", "Trending Now"),
    _hood("The Annex", "Midtown", 43.6698, -79.4075, 800, "Study / Work", "Coffee & Catch-Up"),
    _hood("Summerhill", "Midtown", 43.6823, -79.3897, 600, "Patio Weather", "Cocktails"),
    _hood("Midtown", "Midtown", 43.7058, -79.3983, 1200, "Group Hang", "Family-Friendly"),
    _hood("College Street", "Midtown", 43.6558, -79.4128, 800, "Trending Now", "Study / Work"),
    _hood("Koreatown", "Midtown", 43.6644, -79.4173, 600, "Budget Eats", "Group Hang"),
    _hood("Chinatown", "Midtown", 43.6529, -79.3980, 600, "Budget Eats", "Hidden Gems"),
    _hood("Kensington Market", "Midtown", 43.6548, -79.4007, 600, "Budget Eats", "Coffee & Catch-Up"),
    # North York
    _hood("North York Centre", "North York", 43.7673, -79.4121, 1000, "Trending Now", "Group Hang"),
    _hood("Yonge & Sheppard", "North York", 43.7615, -79.4111, 600, "Coffee & Catch-Up", "Budget Eats"),
    _hood("Yonge & Finch", "North York", 43.7801, -79.4148, 600, "Group Hang", "Budget Eats"),
    _hood("Bayview Village", "North York", 43.7688, -79.3878, 600, "Client Dinner", "Family-Friendly"),
    _hood("Don Mills", "North York", 43.7445, -79.3460, 700, "Family-Friendly", "Coffee & Catch-Up"),
    # Scarborough
    _hood("Scarborough Town Centre", "Scarborough", 43.7764, -79.2578, 700, "Locals Only", "Family-Friendly"),
    _hood("Agincourt", "Scarborough", 43.7940, -79.2810, 700, "Budget Eats", "Hidden Gems"),
    _hood("Birch Cliff", "Scarborough", 43.6920, -79.2640, 600, "Scenic Views", "Locals Only"),
    # Etobicoke
    _hood("Islington Village", "Etobicoke", 43.6490, -79.5240, 600, "Coffee & Catch-Up", "Locals Only"),
    _hood("The Kingsway", "Etobicoke", 43.6530, -79.5070, 600, "Date / Chill", "Client Dinner"),
    _hood("Mimico", "Etobicoke", 43.6150, -79.4940, 600, "Scenic Views", "Patio Weather"),
    _hood("Long Branch", "Etobicoke", 43.5930, -79.5410, 600, "Locals Only", "Budget Eats"),
)

# City key (from config.yaml) → catalogue
CATALOGUES: dict[str, tuple[Neighborhood, ...]] = {
    "toronto": TORONTO_NEIGHBORHOODS,
}


# ---------------------------------------------------------------------------
# GeoZoneIndex
# ---------------------------------------------------------------------------
class GeoZoneIndex:
    """Ordered, read-only set of zones with first-match point lookup."""

    __slots__ = ("_zones",)

    def __init__(self, zones: tuple[Neighborhood, ...] | list[Neighborhood]) -> None:
        zones = tuple(zones)
        names = [z.name for z in zones]
        if len(set(names)) != len(names):
            raise ValueError("Neighborhood names must be unique")
        self._zones = zones

    @classmethod
    def for_city(cls, city: str) -> GeoZoneIndex:
        try:
            return cls(CATALOGUES[city.lower()])
        except KeyError:
            raise KeyError(
                f"No neighborhood catalogue for city {city!r}. "
                f"Known cities: {sorted(CATALOGUES)}"
            ) from None

    @property
    def zones(self) -> tuple[Neighborhood, ...]:
        return self._zones

    def __len__(self) -> int:
        return len(self._zones)

    def __iter__(self):
        return iter(self._zones)

    def zone_for(self, lat: float | None, lng: float | None) -> Neighborhood | None:
        """Return the first declared zone containing the point, else None.

        Missing coordinates resolve to None rather than raising.
        """
        if lat is None or lng is None:
            return None
        for zone in self._zones:
            if zone.contains(lat, lng):
                return zone
        return None
