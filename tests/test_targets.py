import uuid

import pytest
from pydantic import TypeAdapter

from app.core.targets import (
    AmbiguousTargetError,
    ItemTarget,
    NoTarget,
    PromotionTarget,
    SectionTarget,
    promotion_target,
)
from tests.factories import make_menu, make_promotion

MENU = make_menu()


def test_target_variants():
    section_id, item_id = uuid.uuid4(), uuid.uuid4()
    assert promotion_target(None, None) == NoTarget()
    assert promotion_target(section_id, None) == SectionTarget(id=section_id)
    assert promotion_target(None, item_id) == ItemTarget(id=item_id)


def test_both_links_are_rejected():
    with pytest.raises(AmbiguousTargetError):
        promotion_target(uuid.uuid4(), uuid.uuid4())


def test_promotion_record_refuses_both_links():
    with pytest.raises(ValueError, match="section or an item, not both"):
        make_promotion(MENU, linked_section_id=uuid.uuid4(), linked_item_id=uuid.uuid4())


def test_promotion_record_exposes_tagged_target():
    item_id = uuid.uuid4()
    assert make_promotion(MENU, linked_item_id=item_id).target == ItemTarget(id=item_id)
    assert make_promotion(MENU).target.kind == "none"
    section_id = uuid.uuid4()
    assert make_promotion(MENU, linked_section_id=section_id).target == promotion_target(section_id, None)


def test_target_serialises_with_discriminator():
    section_id = uuid.uuid4()
    adapter = TypeAdapter(PromotionTarget)
    dumped = adapter.dump_python(SectionTarget(id=section_id), mode="json")
    assert dumped == {"kind": "section", "id": str(section_id)}
    assert adapter.validate_python(dumped) == SectionTarget(id=section_id)
