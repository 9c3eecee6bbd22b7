from .core import (
    ControllerInfo,
    XBOX_VENDOR_ID,
    XBOX_ONE_PRODUCT_ID,
    find_controllers,
    find_single_controller,
    is_matching_controller,
)
from .errors import ControllerNotFoundError, MultipleControllersError

__all__ = [
    "ControllerInfo",
    "XBOX_VENDOR_ID",
    "XBOX_ONE_PRODUCT_ID",
    "find_controllers",
    "find_single_controller",
    "is_matching_controller",
    "ControllerNotFoundError",
    "MultipleControllersError",
]
