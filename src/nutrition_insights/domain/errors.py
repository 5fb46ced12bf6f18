"""Validation errors reported back to callers."""


class InvalidDateRangeError(ValueError):
    """The end of a date range falls before its start."""


class InvalidModeError(ValueError):
    """A week view mode other than chart or detailed was requested."""


class InvalidQuantityError(ValueError):
    """A logged quantity is zero or negative."""


class InvalidGoalError(ValueError):
    """A goal value is negative."""


class MealNotFoundError(LookupError):
    """No meal with the given id belongs to the caller."""
