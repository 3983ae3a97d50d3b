from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ChatMessage(BaseModel):
    role: Literal["user", "assistant"]
    content: str


# Required fields are Optional here on purpose: a missing field must come
# back as 400 {"message": ...}, not as FastAPI's 422.

class AssistantTurnRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: Optional[str] = None
    architecture_id: Optional[str] = Field(default=None, alias="architectureId")
    message_history: Optional[List[ChatMessage]] = Field(default=None, alias="messageHistory")


class AssistantTurnResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response: str
    architecture_updated: bool = Field(alias="architectureUpdated")


class UpdateArchitectureRequest(BaseModel):
    """Graph edited by hand in the diagram editor"""
    model_config = ConfigDict(populate_by_name=True)

    architecture_id: Optional[str] = Field(default=None, alias="architectureId")
    nodes: Optional[List[Dict[str, Any]]] = None
    edges: Optional[List[Dict[str, Any]]] = None


class SaveCdkRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    architecture_id: Optional[str] = Field(default=None, alias="architectureId")
    cdk_code: Optional[str] = Field(default=None, alias="cdkCode")
