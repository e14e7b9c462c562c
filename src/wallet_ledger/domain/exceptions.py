class OutOfRangeError(ValueError):
    """Raised when a numeric argument falls outside its allowed range."""

    def __init__(self, param_name: str, message: str):
        self.param_name = param_name
        super().__init__(f"{message} (Parameter '{param_name}')")
