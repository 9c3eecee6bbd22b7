class ControllerNotFoundError(RuntimeError):
    """Raised when no matching controller could be found."""
    pass


class MultipleControllersError(RuntimeError):
    """Raised when more than one matching controller is found."""
    def __init__(self, message, devices):
        super().__init__(message)
        self.devices = devices  # list[ControllerInfo] but avoid circular imports
