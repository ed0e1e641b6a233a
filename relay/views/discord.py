"""Pydantic schemas for the message object Discord echoes back with ``wait=true``."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Attachment(BaseModel):
    url: Optional[str] = None

    model_config = ConfigDict(extra="ignore")


class EmbedField(BaseModel):
    name: str = ""
    value: str = ""

    model_config = ConfigDict(extra="ignore")


class Embed(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    fields: List[EmbedField] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")


class DiscordMessage(BaseModel):
    """Subset of a Discord message object the relay inspects."""

    id: Optional[str] = None
    attachments: List[Attachment] = Field(default_factory=list)
    embeds: List[Embed] = Field(default_factory=list)

    model_config = ConfigDict(extra="ignore")
