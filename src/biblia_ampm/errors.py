"""Errors raised by the planner, tracker and importer."""


class PlanError(Exception):
    """Base class for every condition the front end reports to the user."""


class NotSeeded(PlanError):
    """The reading plan or catechism is empty and must be seeded first."""


class InvalidDate(PlanError):
    """A date string is not in YYYY-MM-DD form."""


class InvalidPeriod(PlanError):
    """A reading period other than morning or evening."""


class NotFound(PlanError):
    """A row the operation needs to write against does not exist."""


class ImportFormatError(PlanError):
    """Imported corpus data could not be interpreted."""


class InvalidTimezone(PlanError):
    """A time zone name the zoneinfo database does not know."""
