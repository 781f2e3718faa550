from typing import cast

import orjson


def load_json(json_str: str | bytes) -> dict[str, object] | list[object] | None:
    """Load and parse a JSON string.

    Args:
        json_str: The JSON string to parse.

    Returns:
        The parsed JSON data as a dictionary or list, or None if parsing fails.
    """
    try:
        return cast("dict[str, object] | list[object]", orjson.loads(json_str))
    except orjson.JSONDecodeError:
        return None


def dump_json(data: object, *, indent: bool = False) -> str:
    """Serialize data to a JSON string, compact unless ``indent`` is set.

    Raises:
        TypeError: If the data contains values orjson cannot serialize.
    """
    options = orjson.OPT_INDENT_2 if indent else 0
    return orjson.dumps(data, option=options).decode()
