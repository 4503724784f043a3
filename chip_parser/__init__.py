import re

# Time pattern components
TIME_COMPONENTS = {
    'connector': r'(?:from|de)?',               # from/de
    'hours': r'\d{1,2}',                        # 0-23 or 1-12
    'minutes': r'(?:(?::|\s*h\s*)\d{2})?',      # :00, h00, " h 00"
    'meridiem': r'(?:[ap]m)?',                  # am/pm
    'spaces': r'\s*',                           # Optional spaces
    'separator': r'(?:à|to|[-–])',              # à/to/-/–
    'rest': r',?\s*(.+)'                        # Title + comment
}

# Same token, with hour/minute/meridiem as groups
TIME_TOKEN_PATTERN = r'(\d{1,2})(?:(?::|\s*h\s*)(\d{2}))?\s*(am|pm)?'

MINUTES_PER_DAY = 24 * 60


def build_time_pattern():
    """Build a capturing time token pattern from components"""
    return (f"({TIME_COMPONENTS['hours']}"
            f"{TIME_COMPONENTS['minutes']}"
            f"{TIME_COMPONENTS['spaces']}"
            f"{TIME_COMPONENTS['meridiem']})")


def build_time_range_pattern():
    """Build the start/end/title pattern from components"""
    time_token = build_time_pattern()
    return (f"{TIME_COMPONENTS['connector']}"
            f"{TIME_COMPONENTS['spaces']}"
            f"{time_token}"
            f"{TIME_COMPONENTS['spaces']}"
            f"{TIME_COMPONENTS['separator']}"
            f"{TIME_COMPONENTS['spaces']}"
            f"{time_token}"
            f"{TIME_COMPONENTS['rest']}")


# Shared time parsing function
def parse_time_match(match):
    """Parse time from regex match"""
    hour = int(match.group(1))
    minutes = int(match.group(2)) if match.group(2) else 0
    meridiem = match.group(3)

    if meridiem == 'pm' and hour != 12:
        hour += 12
    elif meridiem == 'am' and hour == 12:
        hour = 0

    return hour, minutes


def time_token_to_minutes(token) -> int:
    """Minutes since midnight for a captured time token, 0 if unreadable"""
    if not isinstance(token, str):
        return 0
    match = re.search(TIME_TOKEN_PATTERN, token.strip().lower())
    if not match:
        return 0
    hour, minutes = parse_time_match(match)
    return hour * 60 + minutes


def format_minutes(total: int) -> str:
    """Format minutes since midnight as HH:MM"""
    hours, minutes = divmod(total, 60)
    return f"{hours:02d}:{minutes:02d}"
