from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field


class Position(BaseModel):
    row: int
    column: int


class Capture(BaseModel):
    name: str
    text: str
    start: Position
    end: Position


class CodeElement(BaseModel):
    name: str
    type: str
    text: str
    start: Position
    end: Position


class CstNode(BaseModel):
    type: str
    text: str
    start: Position
    end: Position
    children: list["CstNode"]


CstNode.model_rebuild()  # necessary for recursive types


class ThinAstNode(BaseModel):
    type: str
    name: str | None = None
    start: Position
    end: Position
    children: list["ThinAstNode"] | None = None


ThinAstNode.model_rebuild()  # necessary for recursive types


class Analysis(BaseModel):
    original_token_count: int
    cst_token_count: int
    ast_token_count: int
    cst: CstNode
    ast: ThinAstNode | None


# ---------------------------------------------------------------------------
# Tool results
# ---------------------------------------------------------------------------


class TextContent(BaseModel):
    type: Literal["text"] = "text"
    text: str


class JsonContent(BaseModel):
    type: Literal["json"] = "json"
    data: Any


class ErrorContent(BaseModel):
    type: Literal["error"] = "error"
    error: str


Content = Annotated[TextContent | JsonContent | ErrorContent, Field(discriminator="type")]


class ToolResult(BaseModel):
    content: list[Content]
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> "ToolResult":
        return cls(content=[TextContent(text=text)])

    @classmethod
    def structured(cls, data: Any) -> "ToolResult":
        return cls(content=[JsonContent(data=data)])

    @classmethod
    def error(cls, message: str) -> "ToolResult":
        return cls(content=[ErrorContent(error=message)], is_error=True)
