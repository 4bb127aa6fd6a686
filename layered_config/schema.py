"""
Field descriptor definitions for typed projection.

Uses Pydantic for validation of the descriptors themselves: a malformed
rule list is rejected when the ``FieldSpec`` is built, not when a store is
projected.
"""

from typing import Any, Dict, List, Literal, Optional, Sequence, Tuple, Type, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

RuleName = Literal["required", "gte", "lte", "min", "max"]

RULE_NAMES: Tuple[str, ...] = ("required", "gte", "lte", "min", "max")
LOWER_BOUND_RULES = frozenset({"gte", "min"})
UPPER_BOUND_RULES = frozenset({"lte", "max"})
RULE_SEPARATOR = ","


class Rule(BaseModel):
    """A single validation constraint, e.g. ``required`` or ``gte=1000``."""

    model_config = ConfigDict(frozen=True)

    name: RuleName = Field(description="Constraint name")
    param: Optional[int] = Field(
        default=None,
        description="Integer bound for gte/lte/min/max"
    )

    @model_validator(mode="after")
    def check_param(self) -> "Rule":
        if self.name == "required":
            if self.param is not None:
                raise ValueError("rule 'required' takes no parameter")
        elif self.param is None:
            raise ValueError(f"rule {self.name!r} requires an integer parameter")
        return self

    @classmethod
    def parse(cls, text: str) -> "Rule":
        """Parse ``name`` or ``name=<int>``."""
        name, sep, raw_param = text.strip().partition("=")
        name = name.strip()
        if name not in RULE_NAMES:
            raise ValueError(f"unknown validation rule: {name!r}")
        if not sep:
            return cls(name=name)
        try:
            param = int(raw_param.strip())
        except ValueError:
            raise ValueError(
                f"rule {name!r} parameter must be an integer, got {raw_param!r}"
            ) from None
        return cls(name=name, param=param)

    def __str__(self) -> str:
        if self.param is None:
            return self.name
        return f"{self.name}={self.param}"


class FieldSpec(BaseModel):
    """Projection descriptor for one attribute of a target model."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Attribute name on the target model")
    source_key: str = Field(description="Store key the attribute is read from")
    default: Optional[str] = Field(
        default=None,
        description="Literal applied when the attribute holds its zero value"
    )
    rules: Tuple[Rule, ...] = Field(
        default=(),
        description="Constraints checked in order after defaults are applied"
    )

    @field_validator("rules", mode="before")
    @classmethod
    def parse_rules(cls, v: Any) -> Tuple[Any, ...]:
        """Accept ``"gte=1,lte=9"``, a sequence of strings, or Rule objects."""
        if v is None:
            return ()
        if isinstance(v, str):
            items: List[Any] = [part for part in v.split(RULE_SEPARATOR) if part.strip()]
        else:
            items = list(v)
        return tuple(Rule.parse(item) if isinstance(item, str) else item for item in items)


def field_specs(model_cls: Type[BaseModel]) -> List[FieldSpec]:
    """
    Build a FieldSpec table from a model's own field declarations.

    Source key is the field alias, or the uppercased attribute name. The
    default literal and rules come from ``json_schema_extra``::

        port: int = Field(0, alias="APP_PORT",
                          json_schema_extra={"default": "8080", "validate": "gte=1000"})
    """
    specs: List[FieldSpec] = []
    for name, info in model_cls.model_fields.items():
        extra: Dict[str, Any] = (
            info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        )
        specs.append(
            FieldSpec(
                name=name,
                source_key=info.alias or name.upper(),
                default=extra.get("default"),
                rules=extra.get("validate", ()),
            )
        )
    return specs


def as_field_specs(
    fields: Optional[Sequence[Union[FieldSpec, Dict[str, Any]]]],
    model_cls: Type[BaseModel],
) -> List[FieldSpec]:
    """Normalize a caller-supplied table (or None) into FieldSpec objects."""
    if fields is None:
        return field_specs(model_cls)
    return [
        spec if isinstance(spec, FieldSpec) else FieldSpec(**spec)
        for spec in fields
    ]
