"""
Typed projection of a store snapshot onto a Pydantic model.

Three stages:
1. Deserialize: store -> JSON tree -> model, matching each FieldSpec's
   source key against the normalized store keys. Fields with no matching
   key keep their zero value.
2. Defaults: a field still holding its zero value receives its default
   literal, parsed by the field's annotation.
3. Validation: rules are checked field by field, in declaration order; the
   first failure aborts. Nothing is rolled back.
"""

import json
import logging
import types
from typing import Any, Callable, Dict, Mapping, Optional, Sequence, Type, TypeVar, Union, get_args, get_origin

from pydantic import BaseModel, ValidationError

from .errors import ConfigValidationError, ProjectionError, RuleViolation
from .formats import encode_json
from .normalize import normalize_key, parse_bool, parse_int
from .schema import LOWER_BOUND_RULES, FieldSpec, Rule, as_field_specs

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse_float(text: str) -> Optional[float]:
    try:
        return float(text)
    except ValueError:
        return None


DEFAULT_PARSERS: Dict[type, Callable[[str], Any]] = {
    str: lambda text: text,
    int: lambda text: parse_int(text.strip()),
    bool: lambda text: parse_bool(text.strip()),
    float: lambda text: _parse_float(text.strip()),
}


_NO_ZERO = object()

_ZERO_FACTORIES: Dict[Any, Callable[[], Any]] = {
    str: str,
    int: int,
    float: float,
    bool: bool,
    list: list,
    tuple: tuple,
    dict: dict,
    set: set,
    frozenset: frozenset,
}


def zero_value(annotation: Any) -> Any:
    """
    Return the zero value of a field annotation.

    ``Optional[X]`` is None; ``List[X]``, ``Dict[K, V]`` and friends are
    empty containers. Annotations with no zero value (nested models, dates)
    return a sentinel so the field is left to the model's own validation.
    """
    origin = get_origin(annotation)
    if origin is Union or origin is getattr(types, "UnionType", None):
        if type(None) in get_args(annotation):
            return None
        return _NO_ZERO
    factory = _ZERO_FACTORIES.get(origin or annotation)
    if factory is None:
        return _NO_ZERO
    return factory()


def is_zero(value: Any) -> bool:
    """True for None, "", 0, 0.0, False and empty containers."""
    if value is None:
        return True
    if isinstance(value, (str, int, float, list, tuple, dict, set, frozenset)):
        return not value
    return False


def project(
    values: Mapping[str, Any],
    model_cls: Type[ModelT],
    fields: Optional[Sequence[Union[FieldSpec, Dict[str, Any]]]] = None,
) -> ModelT:
    """
    Project a store snapshot onto ``model_cls``.

    Args:
        values: Store snapshot (normalized keys)
        model_cls: Target Pydantic model; fields should default to zero values
        fields: FieldSpec table; derived from the model when omitted

    Returns:
        Populated, defaulted and validated model instance

    Raises:
        ProjectionError: deserialization failed, or the table is inconsistent
            with the model
        ConfigValidationError: a rule rejected a field (``target`` carries the
            partially populated instance)
    """
    specs = as_field_specs(fields, model_cls)

    target = _deserialize(values, model_cls, specs)
    apply_defaults(target, specs)
    validate_fields(target, specs)
    return target


def _deserialize(
    values: Mapping[str, Any],
    model_cls: Type[ModelT],
    specs: Sequence[FieldSpec],
) -> ModelT:
    tree = json.loads(encode_json(values))

    payload: Dict[str, Any] = {}
    for spec in specs:
        info = model_cls.model_fields.get(spec.name)
        if info is None:
            raise ProjectionError(
                f"{model_cls.__name__} has no field {spec.name!r}"
            )
        key = normalize_key(spec.source_key)
        if key in tree:
            payload[info.alias or spec.name] = tree[key]

    # fields declared without a default start from their type's zero value
    for name, info in model_cls.model_fields.items():
        payload_key = info.alias or name
        if payload_key in payload or not info.is_required():
            continue
        zero = zero_value(info.annotation)
        if zero is not _NO_ZERO:
            payload[payload_key] = zero

    try:
        return model_cls.model_validate(payload)
    except ValidationError as e:
        raise ProjectionError(
            f"cannot deserialize config into {model_cls.__name__}: {e}"
        ) from e


def _field_type(model_cls: Type[BaseModel], name: str) -> Any:
    annotation = model_cls.model_fields[name].annotation
    origin = get_origin(annotation)
    if origin is Union or origin is getattr(types, "UnionType", None):
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return annotation


def apply_defaults(target: BaseModel, specs: Sequence[FieldSpec]) -> None:
    """Assign default literals to zero-valued fields, in place."""
    model_cls = type(target)
    for spec in specs:
        if spec.default is None:
            continue
        if not is_zero(getattr(target, spec.name)):
            continue

        field_type = _field_type(model_cls, spec.name)
        parser = DEFAULT_PARSERS.get(field_type)
        if parser is None:
            raise ProjectionError(
                f"field {spec.name!r}: defaults are not supported for type {field_type!r}"
            )

        parsed = parser(spec.default)
        if parsed is None:
            logger.debug("Skipping unparseable default %r for %s", spec.default, spec.name)
            continue

        try:
            setattr(target, spec.name, parsed)
        except (ValidationError, TypeError) as e:
            raise ProjectionError(f"field {spec.name!r}: cannot assign default: {e}") from e


def _measure(rule: Rule, value: Any) -> Any:
    if isinstance(value, bool):
        raise ProjectionError(f"rule {str(rule)!r} does not apply to booleans")
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, (str, list, tuple, dict, set, frozenset)):
        return len(value)
    if value is None:
        raise RuleViolation(str(rule), value)
    raise ProjectionError(
        f"rule {str(rule)!r} does not apply to {type(value).__name__}"
    )


def check_rule(rule: Rule, value: Any) -> None:
    """Raise RuleViolation if ``value`` does not satisfy ``rule``."""
    if rule.name == "required":
        if is_zero(value):
            raise RuleViolation(str(rule), value)
        return

    measured = _measure(rule, value)
    if rule.name in LOWER_BOUND_RULES:
        satisfied = measured >= rule.param
    else:
        satisfied = measured <= rule.param
    if not satisfied:
        raise RuleViolation(str(rule), value)


def validate_fields(target: BaseModel, specs: Sequence[FieldSpec]) -> None:
    """Check every rule; the first failure raises ConfigValidationError."""
    for spec in specs:
        value = getattr(target, spec.name)
        for rule in spec.rules:
            try:
                check_rule(rule, value)
            except RuleViolation as e:
                raise ConfigValidationError(
                    spec.name, str(rule), value, source_key=spec.source_key, target=target
                ) from e
