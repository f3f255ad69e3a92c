from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple

from ..models.discovery import MethodDescriptor
from ..models.errors import MissingRequiredParameterError
from ._url import template_placeholders
from .constants import RESERVED_PARAMETERS


@dataclass(frozen=True)
class ResolvedParameters:
    """Call parameters split by where they end up in the request."""

    path_params: Dict[str, Any] = field(default_factory=dict)
    query_params: Dict[str, Any] = field(default_factory=dict)
    reserved: Dict[str, Any] = field(default_factory=dict)


def merge_parameters(
    defaults: Optional[Mapping[str, Any]], params: Optional[Mapping[str, Any]]
) -> Dict[str, Any]:
    """Layer call parameters over defaults into a new dict.

    Overridden defaults keep their original position.
    """
    return {**(defaults or {}), **(params or {})}


def canonicalize(
    descriptor: MethodDescriptor, params: Mapping[str, Any]
) -> Dict[str, Any]:
    """Rewrite alias names to canonical parameter names.

    When both the alias and the canonical name are given the alias wins, at
    whichever position came first.
    """
    aliases = descriptor.alias_map()
    result: Dict[str, Any] = {}
    from_alias = set()
    for key, value in params.items():
        canonical = aliases.get(key)
        if canonical is not None:
            result[canonical] = value
            from_alias.add(canonical)
        elif key in from_alias:
            continue
        else:
            result[key] = value
    return result


def resolve_parameters(
    descriptor: MethodDescriptor,
    defaults: Optional[Mapping[str, Any]],
    params: Optional[Mapping[str, Any]],
) -> ResolvedParameters:
    """Merge, canonicalize, validate and partition the parameters of one call.

    Neither ``defaults`` nor ``params`` is mutated. ``None`` values count as
    absent. Aliases are resolved within each layer before the layers are
    merged, so a call parameter overrides a default under any of its names.

    Args:
        descriptor: The method being called.
        defaults: Client level default parameters.
        params: Parameters supplied with the call.

    Returns:
        ResolvedParameters: Path-bound and query-bound parameters, in schema
            declaration order followed by undeclared extras in the order they
            were supplied, and the reserved ``resource``/``media``/``auth`` keys.

    Raises:
        MissingRequiredParameterError: When declared required parameters are
            missing; every missing name is listed.
    """
    default_reserved, default_values = _split_reserved(defaults)
    call_reserved, call_values = _split_reserved(params)

    reserved = {
        key: value
        for key, value in merge_parameters(default_reserved, call_reserved).items()
        if value is not None
    }
    merged = merge_parameters(
        canonicalize(descriptor, default_values), canonicalize(descriptor, call_values)
    )
    values = {key: value for key, value in merged.items() if value is not None}

    missing = [p.name for p in descriptor.required_parameters() if p.name not in values]
    if missing:
        raise MissingRequiredParameterError(descriptor.id, missing)

    placeholders = set(template_placeholders(descriptor.path_template))
    if descriptor.upload_path_template:
        placeholders.update(template_placeholders(descriptor.upload_path_template))

    path_params: Dict[str, Any] = {}
    query_params: Dict[str, Any] = {}

    def place(name: str, value: Any) -> None:
        if name in placeholders:
            path_params[name] = value
        else:
            query_params[name] = value

    for param in descriptor.parameters:
        if param.name in values:
            place(param.name, values.pop(param.name))
    for name, value in values.items():
        place(name, value)

    return ResolvedParameters(
        path_params=path_params, query_params=query_params, reserved=reserved
    )


def _split_reserved(
    params: Optional[Mapping[str, Any]],
) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    reserved: Dict[str, Any] = {}
    rest: Dict[str, Any] = {}
    for key, value in (params or {}).items():
        if key in RESERVED_PARAMETERS:
            reserved[key] = value
        else:
            rest[key] = value
    return reserved, rest
