"""
Query string encoding for option bundles

Each dataclass field becomes one query parameter. The key comes from the
field's ``qs`` metadata or, without it, from the field name with
underscores removed. ``qs='-'`` keeps a field out of the query entirely
(streams, values that travel in the path).
"""

import json
from dataclasses import fields, is_dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlencode

SKIP = '-'


def qs(key: str) -> Dict[str, str]:
    """Field metadata naming the query key"""
    return {'qs': key}


def _encode_value(value: Any) -> Optional[str]:
    """Encode a single value, None means 'leave it out'"""
    if value is None:
        return None
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return '1' if value else None
    if isinstance(value, (int, float)):
        return str(value) if value > 0 else None
    if isinstance(value, str):
        return value or None
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value) if value else None
    return str(value)


def query_params(options) -> Dict[str, str]:
    """
    Build query parameters from an options dataclass

    Args:
        options: Dataclass instance

    Returns:
        Dict of query key -> encoded value, sorted by key
    """
    if not is_dataclass(options):
        raise TypeError(f"Expected a dataclass instance, got {type(options).__name__}")

    params = {}
    for field in fields(options):
        key = field.metadata.get('qs') or field.name.replace('_', '')
        if key == SKIP:
            continue
        value = _encode_value(getattr(options, field.name))
        if value is not None:
            params[key] = value

    return dict(sorted(params.items()))


def query_string(options) -> str:
    """Encode an options dataclass as a URL query string"""
    return urlencode(query_params(options))
