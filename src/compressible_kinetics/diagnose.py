import jaxtyping as jt
import numpy as np
from beartype import beartype


def runtime_check_array_sizes(f):
    """Decorator to enforce jaxtyping shape annotations at runtime."""
    return jt.jaxtyped(typechecker=beartype)(f)


def count_nonfinite(values: np.ndarray) -> int:
    """Number of inf/NaN entries, e.g. in ln(kf) after an update."""
    return int(np.count_nonzero(~np.isfinite(values)))
