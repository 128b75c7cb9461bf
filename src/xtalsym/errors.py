class InvalidArgumentError(ValueError):
    """
    Raised when a matrix, vector or symbol text passed to one of the
    constructors or parsers in this package is malformed.

    Attributes:
        token (str, optional): the offending piece of input, when one
            can be singled out (e.g. a generator in a Hall symbol)
    """

    def __init__(self, message, token=None):
        super().__init__(message)
        self.token = token
