"""Mean-image reduction and reference subtraction."""
from .mean_image import Accumulator, combine, compute_mean_image
from .subtract import ResultRecord, subtract_mean_from_list

__all__ = [
    "Accumulator",
    "combine",
    "compute_mean_image",
    "ResultRecord",
    "subtract_mean_from_list",
]
