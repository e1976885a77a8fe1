import math

# Runtime values are plain Python objects:
#   nil -> None, number -> float, bool -> bool, string -> str

NIL = "nil"
NUMBER = "number"
BOOL = "bool"
STRING = "string"


def type_name(value) -> str:
    if value is None:
        return NIL
    if isinstance(value, bool):
        return BOOL
    if isinstance(value, float):
        return NUMBER
    if isinstance(value, str):
        return STRING
    raise TypeError(f"not a Lox value: {value!r}")


def from_literal(literal):
    """Convert a token literal into a runtime value (ints widen to float)."""
    if isinstance(literal, bool) or literal is None or isinstance(literal, str):
        return literal
    return float(literal)


def values_equal(left, right) -> bool:
    # 1.0 == True in Python, so the tags have to match first
    return type_name(left) == type_name(right) and left == right


def stringify(value) -> str:
    if value is None:
        return "nil"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float):
        if math.isnan(value):
            return "NaN"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        if value.is_integer():
            return str(int(value))
        return repr(value)
    return value
