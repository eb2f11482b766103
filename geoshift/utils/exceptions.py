class InvalidCoordinateError(ValueError):
    """
    Raised when a longitude or latitude falls outside its valid domain.

    Attributes:
        field: The name of the offending field ("longitude" or "latitude")
        value: The rejected value, as supplied by the caller
    """

    def __init__(self, field: str, value):
        self.field = field
        self.value = value
        super().__init__(f"invalid {field}: {value!r}")
