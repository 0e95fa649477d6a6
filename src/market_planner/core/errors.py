"""Planner exceptions."""


class PreconditionError(Exception):
    """An operation was requested in a state that does not allow it.

    Surfaced to the operator as a blocking notice; state is left unchanged.
    """


class ProjectionUnavailable(Exception):
    """The renderer has not produced a projection or viewport bounds yet."""


class GeocodingError(Exception):
    """The place search service could not be reached or answered badly."""
