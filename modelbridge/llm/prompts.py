"""JSON system-prompt synthesis from pydantic models.

Given an output schema, generate_system_prompt() builds an instruction that
names every field with its kind and shows one synthetic example:

  You are an assistant that only responds in valid JSON following this
  format: Give me the data in JSON format with the following fields:
  temperature (number), conditions (string) in this form:
  {"temperature": 12.5, "conditions": "abc"}

Example values are random (the model is being shown a *shape*, not data).
Pass a seeded random.Random for reproducible prompts.
"""

import enum
import json
import random
import string
import types
from datetime import date, datetime, time, timedelta
from typing import Any, Literal, Optional, Union, get_args, get_origin

from pydantic import BaseModel

_rng = random.Random()

_NONE_TYPE = type(None)


def _unwrap_optional(annotation: Any) -> Any:
    """Optional[X] / X | None → X. Other unions are returned unchanged."""
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [a for a in get_args(annotation) if a is not _NONE_TYPE]
        if len(args) == 1:
            return args[0]
    return annotation


def _is_model(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, BaseModel)


def _is_enum(annotation: Any) -> bool:
    return isinstance(annotation, type) and issubclass(annotation, enum.Enum)


def describe_type(annotation: Any) -> str:
    """Describe a field annotation as a primitive kind.

    number | string | boolean | array of <kind> | object | enum(a|b) | date
    Anything else is "unknown".
    """
    annotation = _unwrap_optional(annotation)
    origin = get_origin(annotation)

    # bool before int: bool is a subclass of int
    if annotation is bool:
        return "boolean"
    if annotation in (int, float):
        return "number"
    if annotation is str:
        return "string"
    if annotation in (date, datetime, time):
        return "date"
    if origin in (list, tuple, set, frozenset):
        args = get_args(annotation)
        return f"array of {describe_type(args[0]) if args else 'unknown'}"
    if origin is Literal:
        return f"enum({'|'.join(str(v) for v in get_args(annotation))})"
    if _is_enum(annotation):
        return f"enum({'|'.join(str(m.value) for m in annotation)})"
    if _is_model(annotation) or annotation is dict or origin is dict:
        return "object"
    return "unknown"


def _random_word(rng: random.Random) -> str:
    return "".join(rng.choices(string.ascii_lowercase, k=rng.randint(4, 10)))


def example_value(annotation: Any, rng: Optional[random.Random] = None) -> Any:
    """Generate one JSON-compatible value matching `annotation`."""
    rng = rng or _rng
    annotation = _unwrap_optional(annotation)
    origin = get_origin(annotation)

    if annotation is bool:
        return rng.choice([True, False])
    if annotation is int:
        return rng.randint(0, 100)
    if annotation is float:
        return round(rng.uniform(0, 100), 2)
    if annotation is str:
        return _random_word(rng)
    if annotation is datetime:
        moment = datetime(2024, 1, 1) + timedelta(minutes=rng.randint(0, 525_600))
        return moment.isoformat()
    if annotation is date:
        return (date(2024, 1, 1) + timedelta(days=rng.randint(0, 365))).isoformat()
    if annotation is time:
        return time(rng.randint(0, 23), rng.randint(0, 59)).isoformat()
    if origin in (list, tuple, set, frozenset):
        args = get_args(annotation)
        item = args[0] if args else str
        return [example_value(item, rng) for _ in range(rng.randint(1, 3))]
    if origin is Literal:
        return rng.choice(get_args(annotation))
    if _is_enum(annotation):
        return rng.choice(list(annotation)).value
    if _is_model(annotation):
        return build_example(annotation, rng)
    if annotation is dict or origin is dict:
        return {_random_word(rng): _random_word(rng)}
    return None


def build_example(schema: type[BaseModel], rng: Optional[random.Random] = None) -> dict:
    """Build an example object for `schema`, fields in declaration order."""
    rng = rng or _rng
    return {
        field.alias or name: example_value(field.annotation, rng)
        for name, field in schema.model_fields.items()
    }


def describe_fields(schema: type[BaseModel]) -> str:
    """`name (kind), name (kind), ...` in declaration order."""
    return ", ".join(
        f"{field.alias or name} ({describe_type(field.annotation)})"
        for name, field in schema.model_fields.items()
    )


def generate_system_prompt(
    schema: type[BaseModel],
    rng: Optional[random.Random] = None,
) -> str:
    example = build_example(schema, rng)
    description = (
        "Give me the data in JSON format with the following fields: "
        f"{describe_fields(schema)} in this form: {json.dumps(example)}"
    )
    return f"You are an assistant that only responds in valid JSON following this format: {description}"
