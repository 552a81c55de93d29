"""Kanban column grouping and the drag-and-drop reorder protocol.

Cards are bucketed by their value for a grouping property (normally a
``select`` property such as "Status"). Every option of that property is a
column, in schema order, followed by a synthetic ``_none`` column for cards
with no value or a value that is not one of the options.

``order`` is only meaningful inside one column. A move renumbers the
destination column densely and leaves the source column alone, so the source
may end up with a gap.
"""
from typing import Dict, Iterable, List, Optional, Sequence

from app.core.errors import NotFound, ValidationError
from app.schemas.card import ReorderEntry
from app.schemas.fields import CardProperty

NO_VALUE_GROUP = "_none"


def pick_grouping_property(properties: Iterable[CardProperty]) -> Optional[CardProperty]:
    """First property that is named like a status or is a select."""
    for prop in properties:
        if "status" in prop.name.lower() or prop.type == "select":
            return prop
    return None


def group_ids(prop: CardProperty) -> List[str]:
    return [opt.id for opt in prop.options] + [NO_VALUE_GROUP]


def group_of(card, prop: CardProperty) -> str:
    value = (card.properties or {}).get(prop.id)
    if value and any(opt.id == value for opt in prop.options):
        return value
    return NO_VALUE_GROUP


def group_cards(cards: Iterable, prop: CardProperty) -> Dict[str, list]:
    groups: Dict[str, list] = {gid: [] for gid in group_ids(prop)}
    for card in cards:
        groups[group_of(card, prop)].append(card)
    for column in groups.values():
        column.sort(key=lambda c: c.order)
    return groups


def plan_move(
    cards: Sequence,
    prop: CardProperty,
    card_id: str,
    over_card_id: Optional[str] = None,
    target_group: Optional[str] = None,
) -> List[ReorderEntry]:
    """Compute the batch update for dropping ``card_id``.

    The drop target is either another card (``over_card_id``) or an empty
    area of a column (``target_group``). The first entry is always the moved
    card, carrying its new properties; the rest are order-only updates for
    destination cards whose position changed.
    """
    by_id = {c.id: c for c in cards}
    card = by_id.get(card_id)
    if card is None:
        raise NotFound("Card not found")

    groups = group_cards(cards, prop)
    source = group_of(card, prop)

    over = None
    if over_card_id:
        over = by_id.get(over_card_id)
        if over is None:
            raise NotFound("Drop target card not found")
        destination = group_of(over, prop)
    elif target_group:
        if target_group not in groups:
            raise ValidationError(f"Unknown group: {target_group}")
        destination = target_group
    else:
        raise ValidationError("A drop target card or group is required")

    column = groups[destination]
    remaining = [c for c in column if c.id != card.id]
    if over is not None:
        insert_at = min(column.index(over), len(remaining))
    else:
        insert_at = len(remaining)

    properties = dict(card.properties or {})
    if destination != source:
        if destination == NO_VALUE_GROUP:
            properties.pop(prop.id, None)
        else:
            properties[prop.id] = destination

    entries = [ReorderEntry(id=card.id, order=insert_at, properties=properties)]
    for index, other in enumerate(remaining):
        adjusted = index + 1 if index >= insert_at else index
        if other.order != adjusted:
            entries.append(ReorderEntry(id=other.id, order=adjusted))
    return entries
