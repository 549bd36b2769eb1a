"""
Structured tool responses.

Hierarchy:
    TextBlock / ImageBlock   - content blocks
    ToolResponse             - success or failure payload of one tool call

``to_mcp_content()`` turns the blocks into ``mcp.types`` content for the
server boundary in ``app/server.py``.
"""

from __future__ import annotations

import base64
from typing import Annotated, Literal, Union

from mcp.types import ImageContent, TextContent
from pydantic import BaseModel, Field


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str


class ImageBlock(BaseModel):
    type: Literal["image"] = "image"
    data: str = Field(description="Base64-encoded image bytes")
    mime_type: str = "image/png"

    @classmethod
    def from_bytes(cls, raw: bytes, mime_type: str = "image/png") -> "ImageBlock":
        return cls(data=base64.b64encode(raw).decode("ascii"), mime_type=mime_type)


ContentBlock = Annotated[Union[TextBlock, ImageBlock], Field(discriminator="type")]


class ToolResponse(BaseModel):
    """Tagged result of a tool call: content blocks plus a failure flag."""

    content: list[ContentBlock] = Field(default_factory=list)
    is_error: bool = False

    @classmethod
    def text(cls, text: str) -> "ToolResponse":
        return cls(content=[TextBlock(text=text)])

    @classmethod
    def failure(cls, message: str) -> "ToolResponse":
        return cls(content=[TextBlock(text=message)], is_error=True)

    @property
    def text_content(self) -> str:
        """All text blocks joined by newlines."""
        return "\n".join(block.text for block in self.content if isinstance(block, TextBlock))

    @property
    def images(self) -> list[ImageBlock]:
        return [block for block in self.content if isinstance(block, ImageBlock)]

    def to_mcp_content(self) -> list[TextContent | ImageContent]:
        blocks: list[TextContent | ImageContent] = []
        for block in self.content:
            if isinstance(block, TextBlock):
                blocks.append(TextContent(type="text", text=block.text))
            else:
                blocks.append(ImageContent(type="image", data=block.data, mimeType=block.mime_type))
        return blocks
