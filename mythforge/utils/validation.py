"""Input validation utilities for configuration values.

These helpers raise clear ValueError or TypeError exceptions for invalid
inputs.
"""


def validate_non_negative_int(value: object, param_name: str) -> None:
    """Validate that a parameter is a non-negative integer.

    Args:
        value: The value to validate
        param_name: Name of the parameter for error messages

    Raises:
        TypeError: If value is not an int (bools are rejected too)
        ValueError: If value is negative
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"Parameter '{param_name}' must be an integer, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"Parameter '{param_name}' must be non-negative, got {value}")


def validate_in_range(
    value: int | float | None,
    param_name: str,
    min_val: int | float | None = None,
    max_val: int | float | None = None,
) -> None:
    """Validate that a numeric parameter is within a specified range.

    Args:
        value: The numeric value to validate
        param_name: Name of the parameter for error messages
        min_val: Minimum allowed value (inclusive), None for no minimum
        max_val: Maximum allowed value (inclusive), None for no maximum

    Raises:
        ValueError: If value is None or not in range
        TypeError: If value is not int or float
    """
    if value is None:
        raise ValueError(f"Parameter '{param_name}' cannot be None")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"Parameter '{param_name}' must be numeric, got {type(value).__name__}")

    if min_val is not None and value < min_val:
        raise ValueError(f"Parameter '{param_name}' must be >= {min_val}, got {value}")
    if max_val is not None and value > max_val:
        raise ValueError(f"Parameter '{param_name}' must be <= {max_val}, got {value}")
