"""Data models for schedule and location processing."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class RawClassRecord:
    """Class schedule entry as returned by the booking platform."""
    id: Any
    class_id: Any
    name: Optional[str]
    location: Optional[str]
    arrival_date: Optional[str]
    start_time: Optional[str]
    end_time: Optional[str]
    availability: Optional[str] = None
    description: Optional[str] = None
    description_html: Optional[str] = None

    @classmethod
    def from_api_item(cls, item: Dict[str, Any]) -> 'RawClassRecord':
        """
        Build a record from an upstream schedule item.

        Accepts the GymMaster wire keys (``arrival``, ``starttime``, ...) and
        their camelCase equivalents.
        """
        def pick(*keys):
            for key in keys:
                value = item.get(key)
                if value is not None and value != '':
                    return value
            return None

        return cls(
            id=item.get('id'),
            class_id=pick('classid', 'classId'),
            name=pick('classname', 'name'),
            location=pick('location') or pick('companyname', 'companyName'),
            arrival_date=pick('arrival', 'arrivalDate'),
            start_time=pick('starttime', 'startTime'),
            end_time=pick('endtime', 'endTime'),
            availability=pick('availability'),
            description=pick('description'),
            description_html=pick('description_html', 'descriptionHtml')
        )


@dataclass
class NormalizedClass:
    """Class entry annotated with local and UTC times."""
    id: Any
    class_id: Any
    name: Optional[str]
    location: Optional[str]
    local_date: str
    local_day_of_week: str
    local_day_of_week_full: str
    local_start_time: str
    local_end_time: str
    local_start_time_str: str
    local_end_time_str: str
    utc_start: str
    utc_end: str
    utc_start_short: str
    utc_end_short: str
    availability: Optional[str]
    description: Optional[str]
    description_html: Optional[str]

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'classId': self.class_id,
            'name': self.name,
            'location': self.location,
            'localDate': self.local_date,
            'localDayOfWeek': self.local_day_of_week,
            'localDayOfWeekFull': self.local_day_of_week_full,
            'localStartTime': self.local_start_time,
            'localEndTime': self.local_end_time,
            'localStartTimeStr': self.local_start_time_str,
            'localEndTimeStr': self.local_end_time_str,
            'utcStart': self.utc_start,
            'utcEnd': self.utc_end,
            'utcStartShort': self.utc_start_short,
            'utcEndShort': self.utc_end_short,
            'availability': self.availability,
            'description': self.description,
            'descriptionHtml': self.description_html
        }


@dataclass
class DayGroup:
    """All classes held on one local calendar date."""
    date: str
    day_short: str
    day_full: str
    classes: List[NormalizedClass] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'date': self.date,
            'dayShort': self.day_short,
            'dayFull': self.day_full,
            'classes': [cls.to_dict() for cls in self.classes]
        }


@dataclass
class Coordinates:
    """Latitude/longitude pair in decimal degrees."""
    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {'lat': self.lat, 'lng': self.lng}


@dataclass
class Location:
    """Business location pulled from the CMS."""
    id: str
    name: str
    lat: float
    lng: float
    image: Optional[str]
    address: str
    details_url: str
    book_url: str


@dataclass
class DistanceResult:
    """One element of a distance matrix response."""
    index: int
    status: str
    distance: Optional[Dict[str, Any]]
    duration: Optional[Dict[str, Any]]


@dataclass
class RankedLocation:
    """Location with air and driving distance attached."""
    location: Location
    air_km: float
    distance_text: Optional[str] = None
    distance_meters: Optional[int] = None
    duration_text: Optional[str] = None
    duration_seconds: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.location.id,
            'name': self.location.name,
            'address': self.location.address,
            'image': self.location.image,
            'distanceText': self.distance_text,
            'durationText': self.duration_text,
            'detailsUrl': self.location.details_url,
            'bookUrl': self.location.book_url,
            'lat': self.location.lat,
            'lng': self.location.lng
        }
