from __future__ import annotations

from datetime import date, timedelta

from config import SUPPORTED_LOCALES, settings
from utils.datetime_utils import parse_date, today_for_tz


_LOCALE_TEXT: dict[str, dict] = {
    "zh-CN": {
        "today": "今天",
        "yesterday": "昨天",
        "tomorrow": "明天",
        "weekdays": ("周一", "周二", "周三", "周四", "周五", "周六", "周日"),
        "months": tuple(f"{n}月" for n in range(1, 13)),
        "month_day_weekday": "{month}月{day}日 {weekday}",
        "month_title": "{year}年{month}月",
        "week_theme": "第 {week} 周学习",
    },
    "en-US": {
        "today": "Today",
        "yesterday": "Yesterday",
        "tomorrow": "Tomorrow",
        "weekdays": ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"),
        "months": (
            "January", "February", "March", "April", "May", "June",
            "July", "August", "September", "October", "November", "December",
        ),
        "month_day_weekday": "{month_abbr} {day} {weekday}",
        "month_title": "{month_name} {year}",
        "week_theme": "Week {week} study",
    },
}


class DateLabelFormatter:
    """Human-readable date labels for one locale, fixed at construction."""

    def __init__(self, locale: str | None = None, tz_name: str | None = None) -> None:
        chosen = locale or settings.PLAN_LOCALE
        if chosen not in SUPPORTED_LOCALES or chosen not in _LOCALE_TEXT:
            raise ValueError(f"Unsupported locale: {chosen!r}")
        self.locale = chosen
        self.tz_name = tz_name if tz_name is not None else settings.PLAN_TIMEZONE
        self._text = _LOCALE_TEXT[chosen]

    def _today(self, today: date | None) -> date:
        if today is not None:
            return parse_date(today)
        return today_for_tz(self.tz_name)

    def weekday_short(self, value: date | str) -> str:
        return self._text["weekdays"][parse_date(value).weekday()]

    def weekday_headers(self) -> list[str]:
        return list(self._text["weekdays"])

    def month_day_weekday(self, value: date | str) -> str:
        d = parse_date(value)
        month_name = self._text["months"][d.month - 1]
        return self._text["month_day_weekday"].format(
            month=d.month,
            month_abbr=month_name[:3],
            day=d.day,
            weekday=self.weekday_short(d),
        )

    def friendly_label(self, value: date | str, today: date | None = None) -> str:
        d = parse_date(value)
        current = self._today(today)
        if d == current:
            return self._text["today"]
        if d == current - timedelta(days=1):
            return self._text["yesterday"]
        if d == current + timedelta(days=1):
            return self._text["tomorrow"]
        return self.month_day_weekday(d)

    def month_title(self, year: int, month: int) -> str:
        if not 1 <= int(month) <= 12:
            raise ValueError(f"Month must be between 1 and 12, got {month}")
        return self._text["month_title"].format(
            year=year,
            month=month,
            month_name=self._text["months"][month - 1],
        )

    def week_theme(self, week: int) -> str:
        return self._text["week_theme"].format(week=week)


def default_formatter() -> DateLabelFormatter:
    return DateLabelFormatter(settings.PLAN_LOCALE, settings.PLAN_TIMEZONE)
