#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import sys
import re
import json
from datetime import date, datetime
from typing import Iterable, List, Optional, Tuple

from dateutil import parser

from . import MINUTES_PER_DAY, build_time_range_pattern, format_minutes, time_token_to_minutes
from .config import get_testing_mode
from .logger import setup_logger
from .models import ChipInput, ParsedEvent, coerce_chip

# Get logger
logger = setup_logger('event_extractor', testing=get_testing_mode())

ENGLISH_MONTHS = (
    'january', 'february', 'march', 'april', 'may', 'june', 'july',
    'august', 'september', 'october', 'november', 'december'
)
FRENCH_MONTHS = (
    'janvier', 'février', 'mars', 'avril', 'mai', 'juin', 'juillet',
    'août', 'septembre', 'octobre', 'novembre', 'décembre'
)
# Shortest month spelling is "mai"/"may"; "on", "am" etc. are not dates
MIN_MONTH_TOKEN_LENGTH = 3

# Indexed by 0=Sunday
DAY_NAMES = ('Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday')


class EventExtractor:
    def __init__(self, reference_date: Optional[date] = None):
        self.reference_date = reference_date or datetime.now()
        self.reference_year = self.reference_date.year

        self.month_map = {name: idx for idx, name in enumerate(ENGLISH_MONTHS, start=1)}
        self.month_map.update({name: idx for idx, name in enumerate(FRENCH_MONTHS, start=1)})

        self.time_range_pattern = re.compile(build_time_range_pattern(), re.IGNORECASE)
        self.parser_info = parser.parserinfo()

        # Date patterns, tried in order
        self._month_token = r'(?P<month>[a-zéû]+)\b'
        self._day_token = r'(?P<day>\d{1,2})(?!\d)'
        self._year_token = r'[,\s]*(?:(?P<year>\d{4})(?!\d))?'
        self.date_patterns = [
            re.compile(rf'(?<!\d){self._day_token}\s+{self._month_token}{self._year_token}', re.IGNORECASE),
            re.compile(rf'\b{self._month_token}\s+{self._day_token}{self._year_token}', re.IGNORECASE),
        ]

        months = '|'.join(ENGLISH_MONTHS + FRENCH_MONTHS)
        self.placeholder_pattern = re.compile(rf'(?:{months})(?:\s+\d{{4}})?', re.IGNORECASE)
        self.declined_prefix_pattern = re.compile(r'^\s*(?:declined|refusé)\s*:', re.IGNORECASE)
        self.excluded_keywords = [
            'planning de rendez-vous', 'lunch', 'déjeuner', 'break', 'pause'
        ]

    def is_declined(self, chip: ChipInput) -> bool:
        """Check side-channel hints and the text prefix for a declined response"""
        if chip.is_declined:
            return True
        return bool(self.declined_prefix_pattern.match(chip.text))

    def is_month_placeholder(self, title: str) -> bool:
        """Bare month name, optionally with a year"""
        return bool(self.placeholder_pattern.fullmatch(title.strip()))

    def is_excluded_title(self, title: str) -> bool:
        """Lunch/break chips and month-view placeholders"""
        lower_title = title.strip().lower()
        if any(keyword in lower_title for keyword in self.excluded_keywords):
            return True
        return self.is_month_placeholder(lower_title)

    def is_excluded(self, title: str, chip: Optional[ChipInput] = None) -> bool:
        """Decide whether a chip must never show up in the output"""
        if chip is not None and self.is_declined(chip):
            return True
        return self.is_excluded_title(title)

    def match_time_range(self, text: str) -> Optional[re.Match]:
        """Find start time, end time and the trailing title region"""
        return self.time_range_pattern.search(text)

    def parse_duration(self, start: str, end: str) -> int:
        """Extract duration in minutes, wrapping around midnight"""
        duration = time_token_to_minutes(end) - time_token_to_minutes(start)
        if duration < 0:
            duration %= MINUTES_PER_DAY
        return duration

    def split_title(self, tail: str) -> Tuple[str, str]:
        """Clean up the captured tail into title and comment"""
        title = tail.split('•', 1)[0]
        title = title.split('\n', 1)[0]
        title = title.strip()

        # Location/attendees come after the first comma
        if ',' in title:
            title = title.split(',', 1)[0]

        comment = ''
        if '+' in title:
            title, comment = title.split('+', 1)
            comment = comment.strip()
        return title.strip(), comment

    def find_date_candidate(self, text: str, time_span: Optional[Tuple[int, int]] = None) -> Optional[re.Match]:
        """First date-shaped substring outside the time tokens, month-then-day only if no day-then-month"""
        for pattern in self.date_patterns:
            for match in pattern.finditer(text):
                if len(match.group('month')) < MIN_MONTH_TOKEN_LENGTH:
                    continue
                if time_span and self._overlaps(match, time_span):
                    continue
                return match
        return None

    def _overlaps(self, match: re.Match, span: Tuple[int, int]) -> bool:
        start, end = match.start(), self._candidate_end(match)
        return start < span[1] and end > span[0]

    def _candidate_end(self, match: re.Match) -> int:
        if match.group('year'):
            return match.end('year')
        return max(match.end('day'), match.end('month'))

    def resolve_date(self, match: re.Match, text: str) -> Optional[date]:
        """Resolve the candidate through the month table, then dateutil"""
        token = match.group('month').lower()
        month = self.month_map.get(token)
        if month:
            year = int(match.group('year')) if match.group('year') else self.reference_year
            try:
                return date(year, month, int(match.group('day')))
            except ValueError:
                logger.debug(f"Impossible date: {match.group(0)!r}")
                return None

        # dateutil fills a missing month from its default, so only hand it real month names
        if self.parser_info.month(token) is None:
            logger.debug(f"Unknown month token: {token!r}")
            return None
        return self.fallback_parse(text[match.start():self._candidate_end(match)])

    def fallback_parse(self, date_text: str) -> Optional[date]:
        """Generic date parse for month names missing from the tables"""
        default = datetime(self.reference_year, 1, 1)
        try:
            return parser.parse(date_text, default=default, parserinfo=self.parser_info).date()
        except (ValueError, OverflowError) as e:
            logger.debug(f"Fallback date parse failed for {date_text!r}: {e}")
            return None

    def parse_date(self, text: str, time_span: Optional[Tuple[int, int]] = None) -> Tuple[bool, Optional[date]]:
        """
        Find and resolve the chip date.

        Returns:
            (found, value): found is False when the text has no date-shaped
            substring; value is None when the candidate does not resolve
        """
        match = self.find_date_candidate(text, time_span)
        if match is None:
            return False, None
        return True, self.resolve_date(match, text)

    def parse_chip(self, chip: ChipInput) -> Optional[ParsedEvent]:
        """Parse one chip, None when it is excluded or unparseable"""
        if self.is_declined(chip):
            logger.debug(f"Skipping declined chip: {chip.text!r}")
            return None

        text = chip.text.strip()
        match = self.match_time_range(text)
        if not match:
            logger.debug(f"No time range in chip: {text!r}")
            return None
        start, end, tail = match.groups()

        title, comment = self.split_title(tail)
        if self.is_excluded_title(title):
            logger.debug(f"Excluded chip: {title!r}")
            return None

        found, event_date = self.parse_date(text, (match.start(1), match.end(2)))
        if found and event_date is None:
            logger.debug(f"Unresolvable date in chip: {text!r}")
            return None

        date_fields = {}
        if event_date:
            day_of_week = event_date.isoweekday() % 7
            date_fields = {
                'date': event_date.isoformat(),
                'day_of_week': day_of_week,
                'day_name': DAY_NAMES[day_of_week]
            }

        event = ParsedEvent(
            title=title,
            comment=comment,
            start_time=format_minutes(time_token_to_minutes(start)),
            duration=self.parse_duration(start, end),
            **date_fields
        )
        logger.debug(f"Parsed event: {event}")
        return event

    def parse(self, chips: Iterable) -> List[ParsedEvent]:
        """Parse a batch of chips, preserving input order"""
        events = []
        for raw in chips or []:
            chip = coerce_chip(raw)
            if chip is None:
                logger.debug(f"Ignoring chip without text: {raw!r}")
                continue
            try:
                event = self.parse_chip(chip)
            except Exception as e:
                logger.warning(f"Failed to parse chip {chip.text!r}: {e}", exc_info=True)
                continue
            if event:
                events.append(event)
        return events


def parse_events(chips: Iterable, reference_date: Optional[date] = None) -> List[ParsedEvent]:
    """Parse chip texts into events; missing years default to reference_date's year"""
    return EventExtractor(reference_date).parse(chips)


def main():
    if len(sys.argv) < 2:
        print(json.dumps({"error": "No chip text provided"}))
        sys.exit(1)

    events = parse_events(sys.argv[1:])
    logger.debug(f"Parsed {len(events)} event(s) from {len(sys.argv) - 1} chip(s)")
    print(json.dumps([event.as_dict() for event in events], ensure_ascii=False))


if __name__ == "__main__":
    main()
