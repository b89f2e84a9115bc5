from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Iterable, Optional, Union

import pytz
from babel.dates import get_timezone_name

from .moment import Moment


@dataclass
class TimezoneTranslator:
    """Resolve localized display names for time zones."""

    locale: str
    width: str = "long"

    def get_display_name(
        self,
        tz_id: str,
        dt: Union[datetime, Moment, int, float, None] = None,
    ) -> str:
        """Return the localized display name for a time zone.

        Args:
            tz_id: The time zone ID (e.g. 'America/New_York').
            dt: Optional datetime, `Moment` or epoch milliseconds used to
                pick the daylight or standard name. Naive datetimes are
                wall-clock times in `tz_id`.

        Returns:
            Localized time zone name.
        """
        tz = pytz.timezone(tz_id)

        if dt is None:
            aware_dt = datetime.now(tz)
        elif isinstance(dt, Moment):
            aware_dt = dt.to_datetime().astimezone(tz)
        elif isinstance(dt, (int, float)):
            aware_dt = datetime.fromtimestamp(dt / 1000, tz)
        elif dt.tzinfo is None:
            aware_dt = tz.localize(dt)
        else:
            aware_dt = dt.astimezone(tz)

        return get_timezone_name(aware_dt, width=self.width, locale=self.locale.replace("-", "_"))

    def get_display_names(
        self,
        tz_ids: Iterable[str],
        dt: Union[datetime, Moment, int, float, None] = None,
    ) -> Dict[str, str]:
        return {tz_id: self.get_display_name(tz_id, dt) for tz_id in tz_ids}

    def describe(self, moment: Moment) -> Optional[str]:
        """Display name for the zone a `Moment` is shown in, if it has one."""
        if moment.zone is None:
            return None
        return self.get_display_name(moment.zone.name, moment)
