"""Data models for the trip viewer: the itinerary record and KML places.

Every record maps 1:1 onto the JSON documents consumed by the front end.
``to_dict`` emits camelCase keys in a fixed order and never drops a field;
``from_dict`` reverses it so a persisted snapshot can be reloaded.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from trip_viewer.config import ROUTE_KEYS, TRIP_TITLE


@dataclass(frozen=True)
class Flight:
    direction: str = ""  # 去程 / 回程
    date: str = ""
    flight: str = ""  # flight number, e.g. "CX 001"
    depart: str = ""
    arrive: str = ""

    def to_dict(self) -> dict:
        return {
            "direction": self.direction,
            "date": self.date,
            "flight": self.flight,
            "depart": self.depart,
            "arrive": self.arrive,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Flight:
        return cls(
            direction=data.get("direction", ""),
            date=data.get("date", ""),
            flight=data.get("flight", ""),
            depart=data.get("depart", ""),
            arrive=data.get("arrive", ""),
        )


@dataclass(frozen=True)
class Hotel:
    name: str
    check_in: str = ""
    check_out: str = ""
    room_type: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "checkIn": self.check_in,
            "checkOut": self.check_out,
            "roomType": self.room_type,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Hotel:
        return cls(
            name=data.get("name", ""),
            check_in=data.get("checkIn", ""),
            check_out=data.get("checkOut", ""),
            room_type=data.get("roomType", ""),
        )


@dataclass(frozen=True)
class ReservedRestaurant:
    date: str
    name: str
    time: str = ""
    note: str = ""

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "time": self.time,
            "name": self.name,
            "note": self.note,
        }

    @classmethod
    def from_dict(cls, data: dict) -> ReservedRestaurant:
        return cls(
            date=data.get("date", ""),
            time=data.get("time", ""),
            name=data.get("name", ""),
            note=data.get("note", ""),
        )


@dataclass(frozen=True)
class MdPlace:
    """A place listed in the itinerary map tables of the Markdown document."""
    name: str
    category: str = ""
    reserved_time: str = ""
    google_maps_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "category": self.category,
            "reservedTime": self.reserved_time,
            "googleMapsUrl": self.google_maps_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> MdPlace:
        return cls(
            name=data.get("name", ""),
            category=data.get("category", ""),
            reserved_time=data.get("reservedTime", ""),
            google_maps_url=data.get("googleMapsUrl"),
        )


@dataclass(frozen=True)
class Slot:
    time: str = ""
    activity: str = ""
    note: str = ""

    def to_dict(self) -> dict:
        return {"time": self.time, "activity": self.activity, "note": self.note}

    @classmethod
    def from_dict(cls, data: dict) -> Slot:
        return cls(
            time=data.get("time", ""),
            activity=data.get("activity", ""),
            note=data.get("note", ""),
        )


@dataclass(frozen=True)
class Day:
    day: int
    date: str
    title: str
    slots: List[Slot] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "date": self.date,
            "title": self.title,
            "slots": [s.to_dict() for s in self.slots],
        }

    @classmethod
    def from_dict(cls, data: dict) -> Day:
        return cls(
            day=int(data.get("day", 0)),
            date=data.get("date", ""),
            title=data.get("title", ""),
            slots=[Slot.from_dict(s) for s in data.get("slots", [])],
        )


@dataclass(frozen=True)
class Route:
    title: str = ""
    rows: List[Dict[str, str]] = field(default_factory=list)  # raw table rows

    def to_dict(self) -> dict:
        return {"title": self.title, "rows": [dict(r) for r in self.rows]}

    @classmethod
    def from_dict(cls, data: dict) -> Route:
        return cls(
            title=data.get("title", ""),
            rows=[dict(r) for r in data.get("rows", [])],
        )


def empty_routes() -> Dict[str, Route]:
    return {key: Route() for key in ROUTE_KEYS}


@dataclass(frozen=True)
class Itinerary:
    title: str = TRIP_TITLE
    flights: List[Flight] = field(default_factory=list)
    hotel: Optional[Hotel] = None
    reserved_restaurants: List[ReservedRestaurant] = field(default_factory=list)
    places_from_md: List[MdPlace] = field(default_factory=list)
    days: List[Day] = field(default_factory=list)
    routes: Dict[str, Route] = field(default_factory=empty_routes)

    def to_dict(self) -> dict:
        return {
            "title": self.title,
            "flights": [f.to_dict() for f in self.flights],
            "hotel": self.hotel.to_dict() if self.hotel else None,
            "reservedRestaurants": [r.to_dict() for r in self.reserved_restaurants],
            "placesFromMd": [p.to_dict() for p in self.places_from_md],
            "days": [d.to_dict() for d in self.days],
            "routes": {key: self.routes[key].to_dict() for key in ROUTE_KEYS},
        }

    @classmethod
    def from_dict(cls, data: dict) -> Itinerary:
        hotel = data.get("hotel")
        routes = data.get("routes") or {}
        return cls(
            title=data.get("title", TRIP_TITLE),
            flights=[Flight.from_dict(f) for f in data.get("flights", [])],
            hotel=Hotel.from_dict(hotel) if hotel else None,
            reserved_restaurants=[
                ReservedRestaurant.from_dict(r) for r in data.get("reservedRestaurants", [])
            ],
            places_from_md=[MdPlace.from_dict(p) for p in data.get("placesFromMd", [])],
            days=[Day.from_dict(d) for d in data.get("days", [])],
            routes={key: Route.from_dict(routes.get(key) or {}) for key in ROUTE_KEYS},
        )


@dataclass(frozen=True)
class Place:
    """A point of interest read from a KML map export."""
    id: str  # "kml-<category>-<ordinal>"
    name: str
    category: str
    lat: Optional[float] = None
    lng: Optional[float] = None
    description: str = ""  # tags stripped, truncated
    google_maps_url: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "category": self.category,
            "lat": self.lat,
            "lng": self.lng,
            "description": self.description,
            "googleMapsUrl": self.google_maps_url,
        }

    @classmethod
    def from_dict(cls, data: dict) -> Place:
        lat = data.get("lat")
        lng = data.get("lng")
        return cls(
            id=data.get("id", ""),
            name=data.get("name", ""),
            category=data.get("category", ""),
            lat=float(lat) if lat is not None else None,
            lng=float(lng) if lng is not None else None,
            description=data.get("description", ""),
            google_maps_url=data.get("googleMapsUrl"),
        )
