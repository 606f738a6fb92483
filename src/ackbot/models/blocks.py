"""Slack rich-text block tree as a closed tagged union.

Known block types get their own model. Every other type falls through to
``OtherBlock``, which keeps an optional ``elements`` list so container types
we don't model (lists, quotes, preformatted sections) still get walked.
"""

import logging
from typing import Annotated, Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Discriminator,
    Tag,
    TypeAdapter,
    ValidationError,
    field_validator,
)

logger = logging.getLogger(__name__)

_KNOWN_TYPES = frozenset({"rich_text", "rich_text_section", "user", "usergroup", "text"})


def _block_tag(value: Any) -> str:
    """Map a raw dict or model instance to its union tag."""
    if isinstance(value, dict):
        block_type = value.get("type")
    else:
        block_type = getattr(value, "type", None)
    return block_type if block_type in _KNOWN_TYPES else "other"


def _valid_elements(value: Any) -> list:
    """Validate blocks one at a time, dropping the ones that don't parse.

    A malformed leaf costs only itself, never its valid siblings.
    """
    if not isinstance(value, list):
        return []
    elements = []
    for item in value:
        if isinstance(item, BaseModel):
            elements.append(item)
            continue
        # Slack payloads are loosely typed; anything that isn't an object can't be a block
        if not isinstance(item, dict):
            continue
        try:
            elements.append(_block_adapter.validate_python(item))
        except ValidationError as exc:
            logger.warning(
                "Skipping malformed block",
                extra={"block_type": item.get("type"), "error_count": exc.error_count()},
            )
    return elements


class RichTextBlock(BaseModel):
    """Top-level rich_text block."""

    type: Literal["rich_text"] = "rich_text"
    block_id: str | None = None
    elements: list["Block"] = []

    @field_validator("elements", mode="before")
    @classmethod
    def clean_elements(cls, value: Any) -> list:
        return _valid_elements(value)


class RichTextSectionBlock(BaseModel):
    """A paragraph-like run of inline elements."""

    type: Literal["rich_text_section"] = "rich_text_section"
    elements: list["Block"] = []

    @field_validator("elements", mode="before")
    @classmethod
    def clean_elements(cls, value: Any) -> list:
        return _valid_elements(value)


class UserBlock(BaseModel):
    """Direct user mention (<@U123>)."""

    type: Literal["user"] = "user"
    user_id: str


class UserGroupBlock(BaseModel):
    """User-group mention (<!subteam^S123>)."""

    type: Literal["usergroup"] = "usergroup"
    usergroup_id: str


class TextBlock(BaseModel):
    """Plain text run."""

    type: Literal["text"] = "text"
    text: str = ""


class OtherBlock(BaseModel):
    """Any block type not modelled above. Recursed into only if it has elements."""

    model_config = ConfigDict(extra="allow")

    type: str | None = None
    elements: list["Block"] | None = None

    @field_validator("elements", mode="before")
    @classmethod
    def clean_elements(cls, value: Any) -> list | None:
        if value is None:
            return None
        return _valid_elements(value)


Block = Annotated[
    Union[
        Annotated[RichTextBlock, Tag("rich_text")],
        Annotated[RichTextSectionBlock, Tag("rich_text_section")],
        Annotated[UserBlock, Tag("user")],
        Annotated[UserGroupBlock, Tag("usergroup")],
        Annotated[TextBlock, Tag("text")],
        Annotated[OtherBlock, Tag("other")],
    ],
    Discriminator(_block_tag),
]

for _model in (RichTextBlock, RichTextSectionBlock, OtherBlock):
    _model.model_rebuild()

_block_adapter: TypeAdapter = TypeAdapter(Block)


def parse_blocks(raw: Any) -> list[Block]:
    """Parse a raw ``blocks`` array from the Slack API.

    Validation happens per element at every nesting level. Non-object
    entries and elements that fail validation are skipped (logged) rather
    than failing the enclosing block or the whole message.
    """
    return _valid_elements(raw)
