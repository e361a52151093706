"""
Navigation target of a promotion card.

A promotion deep-links to nothing, to one section, or to one item. The three
cases are separate types tagged by ``kind`` so a renderer switches on the tag
instead of probing which optional id happens to be set.
"""

import uuid
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field


class AmbiguousTargetError(ValueError):
    """A promotion was given both a section and an item to link to."""


class NoTarget(BaseModel):
    kind: Literal["none"] = "none"

    model_config = {"frozen": True}


class SectionTarget(BaseModel):
    kind: Literal["section"] = "section"
    id: uuid.UUID

    model_config = {"frozen": True}


class ItemTarget(BaseModel):
    kind: Literal["item"] = "item"
    id: uuid.UUID

    model_config = {"frozen": True}


PromotionTarget = Annotated[Union[NoTarget, SectionTarget, ItemTarget], Field(discriminator="kind")]


def promotion_target(
    linked_section_id: uuid.UUID | None,
    linked_item_id: uuid.UUID | None,
) -> NoTarget | SectionTarget | ItemTarget:
    if linked_section_id is not None and linked_item_id is not None:
        raise AmbiguousTargetError("A promotion can link to a section or an item, not both")
    if linked_item_id is not None:
        return ItemTarget(id=linked_item_id)
    if linked_section_id is not None:
        return SectionTarget(id=linked_section_id)
    return NoTarget()
