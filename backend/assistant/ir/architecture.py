from typing import Any, Dict, List, Optional, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    model_serializer,
)


# Wire/storage keys stay camelCase (estCost, dataFlow, ...) through aliases.
# Unknown keys coming back from the model ("type", "label", ...) are kept.
_GRAPH_CONFIG = ConfigDict(
    extra="allow",
    populate_by_name=True,
    coerce_numbers_to_str=True,
)


class GraphModel(BaseModel):
    """
    Unset optional fields are left out of dumps. Extra keys are dumped as
    received, explicit nulls included.
    """

    model_config = _GRAPH_CONFIG

    @model_serializer(mode="wrap")
    def _drop_unset_fields(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> Dict[str, Any]:
        data = handler(self)
        for name, field in type(self).model_fields.items():
            if getattr(self, name) is None:
                data.pop(field.alias if info.by_alias and field.alias else name, None)
        return data


# ---- Nodes ----

class Position(GraphModel):
    x: float = Field(allow_inf_nan=False)
    y: float = Field(allow_inf_nan=False)


class NodeData(GraphModel):
    label: str
    service: str
    description: Optional[str] = None
    est_cost: Optional[str] = Field(default=None, alias="estCost")
    fault_tolerance: Optional[str] = Field(default=None, alias="faultTolerance")


class NodeStyle(GraphModel):
    background: Optional[str] = None
    color: Optional[str] = None
    border: Optional[str] = None
    width: Optional[Union[int, float, str]] = None


class ArchitectureNode(GraphModel):
    id: str
    position: Position
    data: NodeData
    style: Optional[NodeStyle] = None


# ---- Edges ----

class EdgeData(GraphModel):
    data_flow: Optional[str] = Field(default=None, alias="dataFlow")
    protocol: Optional[str] = None


class EdgeStyle(GraphModel):
    stroke: Optional[str] = None


class ArchitectureEdge(GraphModel):
    id: str
    source: str   # node id, may dangle after an AI edit
    target: str
    animated: Optional[bool] = None
    data: Optional[EdgeData] = None
    style: Optional[EdgeStyle] = None


# ---- Root ----

class Architecture(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    nodes: List[ArchitectureNode] = Field(default_factory=list)
    edges: List[ArchitectureEdge] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)

    def node_by_id(self, node_id: str) -> Optional[ArchitectureNode]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict with camelCase keys. Metadata is kept as is, nulls included."""
        return self.model_dump(mode="json", by_alias=True)
