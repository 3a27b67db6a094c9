"""
Custom exceptions for the transit backend
"""

class TransitError(Exception):
    """Base exception for the transit backend"""
    pass


class NetworkDataError(TransitError):
    """Raised when the loaded network tables break a structural invariant"""
    pass
