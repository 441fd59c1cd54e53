"""
Filter-specific exceptions for the LTI filter engine.
"""

class FilterError(Exception):
    """Base class for all filter errors"""
    pass

class FilterDesignError(FilterError):
    """Raised when a transfer function cannot be built or converted"""
    pass

class FilterProcessingError(FilterError):
    """Raised when filter processing fails"""
    pass

class InvalidCoefficientsError(FilterDesignError, ValueError):
    """Raised when coefficients are empty or the leading denominator coefficient is zero"""
    pass

class UnsupportedDegreeError(FilterDesignError):
    """Raised when a conversion is requested for an improper system"""
    pass

class SosPairingError(FilterDesignError):
    """Raised when roots cannot be grouped into real second-order sections"""
    pass

class LengthMismatchError(FilterProcessingError, ValueError):
    """Raised when replacement coefficients do not match the filter's coefficient count"""
    pass
