import django_filters
from django import forms
from django.utils import timezone
from django.utils.dateparse import parse_datetime, parse_date
from datetime import datetime, date, time
import logging

logger = logging.getLogger(__name__)


def normalize_datetime_value(value, *, is_end=False):
    """
    Normalize a date or datetime value to a timezone-aware datetime.

    Args:
        value: A string (date or datetime), date object, or datetime object
        is_end: If True and value is date-only, returns end of day (23:59:59.999999)
                If False, returns start of day (00:00:00)

    Returns:
        Timezone-aware datetime, or None when the value cannot be parsed

    Examples:
        normalize_datetime_value("2025-11-11", is_end=False)  # 2025-11-11 00:00:00
        normalize_datetime_value("2025-11-11", is_end=True)   # 2025-11-11 23:59:59.999999
        normalize_datetime_value("2025-11-11T10:30:00Z")      # 2025-11-11 10:30:00 (unchanged)
    """
    if value in (None, ""):
        return None

    if isinstance(value, datetime):
        if timezone.is_naive(value):
            return timezone.make_aware(value)
        return value

    if isinstance(value, date):
        return timezone.make_aware(datetime.combine(value, time.max if is_end else time.min))

    if isinstance(value, str):
        value = value.strip()
        # Date-only strings first: parse_datetime also accepts "YYYY-MM-DD"
        # on newer Pythons and would pin end bounds to midnight.
        try:
            date_obj = parse_date(value)
            if date_obj:
                return normalize_datetime_value(date_obj, is_end=is_end)

            dt = parse_datetime(value)
        except ValueError:
            dt = None

        if dt:
            return timezone.make_aware(dt) if timezone.is_naive(dt) else dt

    logger.debug(f"Ignoring unparseable date bound: {value!r}")
    return None


class DateBoundFilter(django_filters.Filter):
    """
    Inclusive date bound on a datetime field.

    Date-only inputs cover the whole day: lower bounds start at 00:00,
    upper bounds end at 23:59:59.999999. Unparseable values are ignored.
    """

    field_class = forms.Field

    def __init__(self, *args, is_end=False, **kwargs):
        self.is_end = is_end
        kwargs.setdefault("lookup_expr", "lte" if is_end else "gte")
        super().__init__(*args, **kwargs)

    def filter(self, qs, value):
        bound = normalize_datetime_value(value, is_end=self.is_end)
        if bound is None:
            return qs
        return super().filter(qs, bound)


class BaseFilterSet(django_filters.FilterSet):
    """
    Base filter set with the created-at date window shared by every listing.
    """

    start_date = DateBoundFilter(field_name="created_at")
    end_date = DateBoundFilter(field_name="created_at", is_end=True)
