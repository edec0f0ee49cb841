def append_dict(d1, d2):
    """
    Merge d2 into d1. Nested dicts are merged, other values replaced
    """
    for key, value in d2.items():
        if isinstance(value, dict) and isinstance(d1.get(key), dict):
            append_dict(d1[key], value)
        else:
            d1[key] = value

    return d1


def convert_value_format(value):
    """
    Convert a VCD value literal ('b0101', '1', 'x') to an integer.
    Unknown (x) and high impedance (z) bits count as 0.
    """
    if value[:1] in ('b', 'B'):
        bits = value[1:]
    else:
        bits = value
    result = 0
    for bit in bits:
        result = result * 2 + (1 if bit == '1' else 0)
    return result


def get_kwarg(kwargs, key, default=None):
    """ Return kwargs[key] if it exists, else default """
    return kwargs[key] if key in kwargs else default
