"""Schedule normalizer grouping class records by local date."""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from processor.central_time import (
    central_to_utc,
    format_utc_iso,
    parse_civil_datetime,
)
from processor.models import DayGroup, NormalizedClass, RawClassRecord

logger = logging.getLogger(__name__)

DAY_NAMES_SHORT = ('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun')
DAY_NAMES_FULL = (
    'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday',
    'Sunday'
)


class ScheduleNormalizer:
    """Converts raw class records into day-grouped, UTC-annotated views."""

    def transform(self, raw_schedule: Any) -> List[DayGroup]:
        """
        Group and sort a raw schedule.

        Args:
            raw_schedule: List of upstream schedule items, or a mapping whose
                ``result`` key holds that list

        Returns:
            DayGroups ascending by date, each with classes ascending by UTC
            start. Unusable input yields an empty list.
        """
        items = self._extract_items(raw_schedule)
        if items is None:
            logger.warning(
                f"Schedule payload has no record list: {type(raw_schedule).__name__}"
            )
            return []

        by_date: Dict[str, DayGroup] = {}
        skipped = 0

        for item in items:
            if not isinstance(item, dict):
                skipped += 1
                continue

            record = RawClassRecord.from_api_item(item)
            normalized = self._normalize_record(record)
            if normalized is None:
                skipped += 1
                continue

            day = by_date.get(record.arrival_date)
            if day is None:
                day = DayGroup(
                    date=record.arrival_date,
                    day_short=normalized.local_day_of_week,
                    day_full=normalized.local_day_of_week_full
                )
                by_date[record.arrival_date] = day
            day.classes.append(normalized)

        days = sorted(by_date.values(), key=lambda day: day.date)
        for day in days:
            # list.sort is stable, equal start times keep input order
            day.classes.sort(key=lambda cls: cls.utc_start)

        logger.info(
            f"Normalized {len(items) - skipped} classes into {len(days)} days "
            f"({skipped} skipped)"
        )
        return days

    def transform_to_dicts(self, raw_schedule: Any) -> List[Dict[str, Any]]:
        """Same as transform, rendered as JSON-ready dicts."""
        return [day.to_dict() for day in self.transform(raw_schedule)]

    def _extract_items(self, raw_schedule: Any) -> Optional[list]:
        if isinstance(raw_schedule, list):
            return raw_schedule
        if isinstance(raw_schedule, dict) and isinstance(raw_schedule.get('result'), list):
            return raw_schedule['result']
        return None

    def _normalize_record(self, record: RawClassRecord) -> Optional[NormalizedClass]:
        """
        Annotate a single record with local and UTC times.

        Returns:
            NormalizedClass, or None if the record cannot be placed in time
        """
        if not record.arrival_date or not record.start_time or not record.end_time:
            logger.warning(
                f"Class '{record.name}' ({record.id}) missing arrival, start "
                f"or end time"
            )
            return None

        utc_start = central_to_utc(record.arrival_date, record.start_time)
        utc_end = central_to_utc(record.arrival_date, record.end_time)
        if utc_start is None or utc_end is None:
            logger.warning(
                f"Invalid date/time for class '{record.name}' ({record.id}): "
                f"{record.arrival_date} {record.start_time}-{record.end_time}"
            )
            return None

        local_start = parse_civil_datetime(record.arrival_date, record.start_time)
        local_end = parse_civil_datetime(record.arrival_date, record.end_time)
        weekday = local_start.weekday()

        return NormalizedClass(
            id=record.id,
            class_id=record.class_id,
            name=record.name,
            location=record.location,
            local_date=record.arrival_date,
            local_day_of_week=DAY_NAMES_SHORT[weekday],
            local_day_of_week_full=DAY_NAMES_FULL[weekday],
            local_start_time=local_start.strftime('%H:%M:%S'),
            local_end_time=local_end.strftime('%H:%M:%S'),
            local_start_time_str=format_clock_12h(local_start),
            local_end_time_str=format_clock_12h(local_end),
            utc_start=format_utc_iso(utc_start),
            utc_end=format_utc_iso(utc_end),
            utc_start_short=utc_start.strftime('%H:%M'),
            utc_end_short=utc_end.strftime('%H:%M'),
            availability=record.availability,
            description=record.description,
            description_html=record.description_html
        )


def format_clock_12h(value: datetime) -> str:
    """Render a time as ``h:mm AM`` / ``h:mm PM``."""
    hour = value.hour % 12 or 12
    suffix = 'AM' if value.hour < 12 else 'PM'
    return f"{hour}:{value.minute:02d} {suffix}"
