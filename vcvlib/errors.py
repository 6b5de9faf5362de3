class VCVError(ValueError):
    """
    Base class for invalid inputs to the vcv generators

    Every error stores the offending value and the constraint it violated so that
    callers can decide whether to abort or substitute a default.
    """

    def __init__(self, value, constraint: str):
        self.value = value
        self.constraint = constraint
        super().__init__(f"{self.__class__.__name__}: got {value!r}, expected {constraint}")


class InvalidDimension(VCVError):
    pass


class InvalidShape(VCVError):
    pass


class InvalidCovariance(VCVError):
    pass


class InvalidMinThickness(VCVError):
    pass


class InvalidSize(VCVError):
    pass


class InvalidPosition(VCVError):
    pass
