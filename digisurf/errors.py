"""
Exceptions raised by digisurf.

Configuration problems with a Khalimsky space are reported by the boolean
return of ``KhalimskySpace.init``; everything else surfaces as one of the
classes below.
"""


class DigitalSurfaceError(Exception):
    """Base exception for digisurf-specific errors"""
    pass


class BelNotFoundError(DigitalSurfaceError):
    """No boundary element found within the trial budget"""
    pass


class InvalidSurfelError(DigitalSurfaceError, ValueError):
    """A cell given as a boundary surfel is not one"""
    pass


class TraversalStateError(DigitalSurfaceError, RuntimeError):
    """A visitor was queried or advanced in a state that forbids it"""
    pass


class EstimatorStateError(DigitalSurfaceError, RuntimeError):
    """An estimator was evaluated before being attached and initialized"""
    pass
