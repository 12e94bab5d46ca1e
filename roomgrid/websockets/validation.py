"""Lightweight websocket payload validation utilities.

Minimal schema-like checking with clear, consistent error responses for the
growth channel events.

Schema Mini-Language (Python dict):
{
  'field_name': ('type', required: bool, extras: dict)
}
Supported types: 'str', 'int', 'number', 'seed'
Extras examples:
  max_len / min_len (str), min / max (int, number)

'seed' accepts an int or a non-empty string (strings are hashed later).

If invalid: (False, {'field': 'layout_id', 'error': 'too long', 'code': 'max_len'})
If valid: (True, normalized_data)
"""
from __future__ import annotations

from typing import Any, Dict, Tuple

PRIMITIVES = {
    'str': (str,),
    'int': (int,),
    'number': (int, float),
    'seed': (int, str),
}


def _fail(field: str, message: str, code: str) -> Tuple[bool, Dict[str, Any]]:
    return False, {'field': field, 'error': message, 'code': code}


def validate(payload: Any, schema: Dict[str, tuple]) -> Tuple[bool, Dict[str, Any]]:
    if not isinstance(payload, dict):
        return _fail('__root__', 'payload must be an object', 'type')
    out = {}
    for name, spec in schema.items():
        if not isinstance(spec, tuple) or len(spec) < 2:
            return _fail('__schema__', f'invalid spec for {name}', 'schema')
        type_name, required = spec[0], spec[1]
        extras = spec[2] if len(spec) > 2 else {}
        if type_name not in PRIMITIVES:
            return _fail('__schema__', f'unsupported type {type_name}', 'schema')
        if name not in payload or payload[name] is None:
            if required:
                return _fail(name, 'missing required field', 'required')
            continue
        value = payload[name]
        # bool is an int subclass; never accept it as a number
        if isinstance(value, bool) or not isinstance(value, PRIMITIVES[type_name]):
            return _fail(name, f'expected {type_name}', 'type')
        if isinstance(value, str):
            s = value.strip()
            if len(s) == 0:
                return _fail(name, 'must not be empty', 'empty')
            if 'max_len' in extras and len(s) > extras['max_len']:
                return _fail(name, 'too long', 'max_len')
            if 'min_len' in extras and len(s) < extras['min_len']:
                return _fail(name, 'too short', 'min_len')
            out[name] = s
            continue
        if 'min' in extras and value < extras['min']:
            return _fail(name, f'must be >= {extras["min"]}', 'min')
        if 'max' in extras and value > extras['max']:
            return _fail(name, f'must be <= {extras["max"]}', 'max')
        out[name] = value
    return True, out


# Predefined schemas used by handlers
LAYOUT_REF = {
    'layout_id': ('str', True, {'min_len': 1, 'max_len': 64}),
}
WATCH_LAYOUT = LAYOUT_REF
STEP_LAYOUT = LAYOUT_REF
STOP_GROWTH = LAYOUT_REF
START_GROWTH = {
    'layout_id': ('str', True, {'min_len': 1, 'max_len': 64}),
    'interval': ('number', False, {'min': 0, 'max': 10}),
}
REGENERATE_LAYOUT = {
    'layout_id': ('str', True, {'min_len': 1, 'max_len': 64}),
    'rng_seed': ('seed', False, {'max_len': 128}),
}
