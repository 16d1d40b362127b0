"""Static tool catalog: descriptor + typed argument model + executor per tool name."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Type

from pydantic import BaseModel, ConfigDict, Field

Executor = Callable[[Any, Any], Awaitable[Any]]


class ToolDescriptor(BaseModel):
    name: str
    description: str
    input_schema: Dict[str, Any] = Field(alias="inputSchema")

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @property
    def required_fields(self) -> List[str]:
        req = self.input_schema.get("required")
        return [str(x) for x in req] if isinstance(req, list) else []

    def to_spec(self) -> Dict[str, Any]:
        return {"name": self.name, "description": self.description, "inputSchema": self.input_schema}


@dataclass(frozen=True)
class ToolEntry:
    descriptor: ToolDescriptor
    args_model: Type[BaseModel]
    executor: Executor


class ToolRegistry:
    def __init__(
        self,
        specs: Sequence[Mapping[str, Any]],
        executors: Mapping[str, Tuple[Type[BaseModel], Executor]],
    ) -> None:
        entries: Dict[str, ToolEntry] = {}
        order: List[str] = []
        for spec in specs:
            desc = ToolDescriptor.model_validate(dict(spec))
            if desc.name in entries:
                raise ValueError(f"duplicate tool name: {desc.name}")
            bound = executors.get(desc.name)
            if bound is None:
                raise ValueError(f"tool has no executor: {desc.name}")
            args_model, executor = bound
            entries[desc.name] = ToolEntry(descriptor=desc, args_model=args_model, executor=executor)
            order.append(desc.name)
        extra = sorted(set(executors) - set(entries))
        if extra:
            raise ValueError(f"executors without a tool spec: {extra}")
        self._entries = entries
        self._order = tuple(order)

    def list_tools(self) -> List[ToolDescriptor]:
        return [self._entries[name].descriptor for name in self._order]

    def resolve(self, name: str) -> Optional[ToolEntry]:
        return self._entries.get(str(name or ""))

    def names(self) -> Tuple[str, ...]:
        return self._order
