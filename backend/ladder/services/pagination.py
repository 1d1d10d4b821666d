from typing import Optional, Tuple

from ladder.errors import InvalidArgument


def parse_positive_int(value) -> Optional[int]:
    """Return value as a positive int, or None if it is missing, non-numeric or < 1."""
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(value)
    except (TypeError, ValueError):
        return None
    return number if number >= 1 else None


def parse_account_id(value, field: str) -> int:
    """Account ids arrive as JSON numbers or numeric strings; bools are not ids."""
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidArgument(f'Invalid {field}')
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidArgument(f'Invalid {field}') from None


def parse_score(value, field: str) -> int:
    """Whole-number goal count; 3 and 3.0 are accepted, 2.9, '3' and True are not."""
    if isinstance(value, bool):
        raise InvalidArgument(f'Invalid {field}')
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    raise InvalidArgument(f'Invalid {field}')


def strict_page(page, count) -> Tuple[int, int]:
    """Validate paging parameters, failing on the first bad one."""
    parsed_page = parse_positive_int(page)
    if parsed_page is None:
        raise InvalidArgument('Invalid page parameter')
    parsed_count = parse_positive_int(count)
    if parsed_count is None:
        raise InvalidArgument('Invalid count parameter')
    return parsed_page, parsed_count


def lenient_page(page, count, default_page: int = 1, default_count: int = 10) -> Tuple[int, int]:
    """Like strict_page, but invalid values silently fall back to the defaults."""
    parsed_page = parse_positive_int(page)
    parsed_count = parse_positive_int(count)
    return parsed_page or default_page, parsed_count or default_count


def page_bounds(page: int, count: int) -> Tuple[int, int]:
    """Inclusive (start, end) offsets of a 1-indexed page."""
    start = (page - 1) * count
    return start, start + count - 1
