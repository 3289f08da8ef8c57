"""Registry of the agenda operations exposed to HTTP and MCP clients.

Each registered function carries a JSON schema derived from its signature.
Parameters restricted to a closed set (event types, regions) declare that set
through ``choices`` so clients see the allowed values.
"""

from __future__ import annotations

import inspect
import types
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, Type, Union, get_args, get_origin

JsonSchema = Dict[str, Any]

_SCALARS: Dict[Any, str] = {
    str: "string",
    int: "integer",
    float: "number",
    bool: "boolean",
    dict: "object",
    list: "array",
}


def _schema_for(annotation: Any) -> JsonSchema:
    origin = get_origin(annotation)
    if origin in (Union, types.UnionType):
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        return _schema_for(members[0]) if members else {"type": "string"}
    if origin in (list, List):
        args = get_args(annotation)
        return {"type": "array", "items": _schema_for(args[0])} if args else {"type": "array"}
    if origin in (dict, Dict):
        return {"type": "object"}
    if inspect.isclass(annotation) and issubclass(annotation, Enum):
        return {"type": "string", "enum": [member.value for member in annotation]}
    return {"type": _SCALARS.get(annotation, "string")}


@dataclass(frozen=True)
class ApiFunction:
    name: str
    func: Callable[..., Any]
    description: str
    category: str
    tags: tuple[str, ...]
    signature: inspect.Signature
    choices: Mapping[str, Type[Enum]] = field(default_factory=dict)

    def _property(self, param: inspect.Parameter) -> JsonSchema:
        schema = _schema_for(param.annotation)
        allowed = self.choices.get(param.name)
        if allowed is not None:
            values = [member.value for member in allowed]
            if schema.get("type") == "array":
                schema["items"] = {"type": "string", "enum": values}
            else:
                schema["enum"] = values
        default = param.default
        if default is not inspect.Parameter.empty and isinstance(default, (str, int, float, bool)):
            schema["default"] = default
        return schema

    @property
    def parameter_schema(self) -> JsonSchema:
        params = list(self.signature.parameters.values())
        schema: JsonSchema = {
            "type": "object",
            "properties": {param.name: self._property(param) for param in params},
        }
        required = [param.name for param in params if param.default is inspect.Parameter.empty]
        if required:
            schema["required"] = required
        return schema

    def describe(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "tags": list(self.tags),
            "parameters": self.parameter_schema,
        }


REGISTRY: Dict[str, ApiFunction] = {}


def register_api(
    name: str,
    *,
    description: str,
    category: str,
    tags: Optional[Iterable[str]] = None,
    choices: Optional[Mapping[str, Type[Enum]]] = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if name in REGISTRY:
            raise ValueError(f"API function '{name}' is already registered.")
        signature = inspect.signature(func, eval_str=True)
        unknown = set(choices or ()) - set(signature.parameters)
        if unknown:
            raise ValueError(f"Choices for unknown parameters of '{name}': {sorted(unknown)}")
        REGISTRY[name] = ApiFunction(
            name=name,
            func=func,
            description=description,
            category=category,
            tags=tuple(tags or ()),
            signature=signature,
            choices=dict(choices or {}),
        )
        return func

    return decorator


def get_api_function(name: str) -> ApiFunction:
    try:
        return REGISTRY[name]
    except KeyError:
        raise KeyError(f"API function '{name}' is not registered.") from None


def get_api_functions(category: Optional[str] = None) -> List[ApiFunction]:
    return [item for item in REGISTRY.values() if category is None or item.category == category]


async def call_api(name: str, **kwargs: Any) -> Any:
    """Invoke a registered function, awaiting it when it is a coroutine."""

    result = get_api_function(name).func(**kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
