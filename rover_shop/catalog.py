"""
Static parts catalog for the rover challenge
"""
from typing import Dict, List, Optional

from rover_shop.models import Part, PartCategory


PARTS_CATALOG: Dict[PartCategory, List[Part]] = {
    PartCategory.HUBS: [
        Part(id="large_hub", name="Large Hub", price=40, category=PartCategory.HUBS),
        Part(id="small_hub", name="Small Hub", price=30, category=PartCategory.HUBS),
    ],
    PartCategory.MOTORS: [
        Part(id="small_motor", name="Small Motor", price=10, category=PartCategory.MOTORS),
        Part(id="medium_motor", name="Medium Motor", price=18, category=PartCategory.MOTORS),
        Part(id="large_motor", name="Large Motor", price=25, category=PartCategory.MOTORS),
    ],
    PartCategory.TIRES: [
        Part(id="small_tires", name="Small Tires (pair)", price=6, category=PartCategory.TIRES),
        Part(id="medium_tires", name="Medium Tires (pair)", price=10, category=PartCategory.TIRES),
    ],
    PartCategory.CLAWS: [
        Part(id="small_claw", name="Small Claw", price=12, category=PartCategory.CLAWS),
        Part(id="large_claw", name="Large Claw", price=18, category=PartCategory.CLAWS),
    ],
}

_PARTS_BY_ID: Dict[str, Part] = {
    part.id: part for parts in PARTS_CATALOG.values() for part in parts
}


def get_part(part_id: str) -> Optional[Part]:
    return _PARTS_BY_ID.get(part_id)


def all_parts() -> List[Part]:
    return list(_PARTS_BY_ID.values())


def catalog_by_category() -> Dict[str, List[dict]]:
    """Catalog keyed by category name, in display order"""
    return {
        category.value: [part.to_record() for part in parts]
        for category, parts in PARTS_CATALOG.items()
    }
