"""
Shelf matching rules.

Decides which cocktails a user can make from the ingredients on their shelf.
Everything here works on plain ids and is free of I/O; ``services.shelf_matcher``
loads the rows and feeds them in.

A requirement slot (one cocktail ingredient line) is satisfied when:
- it is optional, or
- its ingredient is covered by the user's ownership, or
- any of its substitutes is owned directly (substitutes are never generalized).

Coverage depends on the ownership strategy picked by ``resolve_ownership``:
- ``DirectOwnership``: only the exact ingredient counts.
- ``ParentAwareOwnership``: a generic ingredient is also covered by any owned
  variety of it, and a variety is covered by its owned parent or by an owned
  sibling variety.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence
from uuid import UUID


@dataclass(frozen=True)
class MatchingConfig:
    parent_ingredient_as_substitute: bool = False


@dataclass(frozen=True)
class RequirementSlot:
    cocktail_id: UUID
    ingredient_id: UUID
    optional: bool = False
    substitutes: FrozenSet[UUID] = frozenset()
    sort: int = 0


class DirectOwnership:
    """Exactly the ingredients on the shelf."""

    def __init__(self, owned_ids: Iterable[UUID]):
        self.owned_ids = frozenset(owned_ids)

    def owns(self, ingredient_id: UUID) -> bool:
        return ingredient_id in self.owned_ids

    def covers(self, ingredient_id: UUID) -> bool:
        return self.owns(ingredient_id)


class ParentAwareOwnership(DirectOwnership):
    """Shelf ingredients plus the parent/child generalization rule.

    ``parent_of`` maps a variety id to its parent id; generic ingredients may
    be missing from it. The rule is evaluated per requested ingredient, since
    sibling coverage depends on which variety a recipe asks for.
    """

    def __init__(self, owned_ids: Iterable[UUID], parent_of: Mapping[UUID, Optional[UUID]]):
        super().__init__(owned_ids)
        self.parent_of = parent_of
        self.owned_parent_ids = frozenset(
            parent_id
            for parent_id in (parent_of.get(i) for i in self.owned_ids)
            if parent_id is not None
        )

    def covers(self, ingredient_id: UUID) -> bool:
        if self.owns(ingredient_id):
            return True

        parent_id = self.parent_of.get(ingredient_id)
        if parent_id is None:
            # Generic ingredient: any owned variety of it will do
            return ingredient_id in self.owned_parent_ids

        # Variety: the parent itself or a sibling variety
        return parent_id in self.owned_ids or parent_id in self.owned_parent_ids


def resolve_ownership(
    owned_ids: Iterable[UUID],
    config: MatchingConfig,
    parent_of: Optional[Mapping[UUID, Optional[UUID]]] = None,
) -> DirectOwnership:
    if config.parent_ingredient_as_substitute:
        return ParentAwareOwnership(owned_ids, parent_of or {})
    return DirectOwnership(owned_ids)


def slot_satisfied(slot: RequirementSlot, ownership: DirectOwnership) -> bool:
    if slot.optional:
        return True
    if ownership.covers(slot.ingredient_id):
        return True
    return any(ownership.owns(sub_id) for sub_id in slot.substitutes)


def is_feasible(slots: Iterable[RequirementSlot], ownership: DirectOwnership) -> bool:
    """A cocktail with no required slots is always feasible."""
    return all(slot_satisfied(slot, ownership) for slot in slots)


def group_slots(slots: Iterable[RequirementSlot]) -> Dict[UUID, List[RequirementSlot]]:
    grouped: Dict[UUID, List[RequirementSlot]] = {}
    for slot in slots:
        grouped.setdefault(slot.cocktail_id, []).append(slot)
    return grouped


def feasible_cocktail_ids(
    cocktail_ids: Sequence[UUID],
    slots: Iterable[RequirementSlot],
    ownership: DirectOwnership,
    limit: Optional[int] = None,
) -> List[UUID]:
    """Filter ``cocktail_ids`` down to the makeable ones, keeping their order.

    A falsy ``limit`` means no cap.
    """
    slots_by_cocktail = group_slots(slots)
    feasible: List[UUID] = []
    for cocktail_id in cocktail_ids:
        if not is_feasible(slots_by_cocktail.get(cocktail_id, ()), ownership):
            continue
        feasible.append(cocktail_id)
        if limit and len(feasible) >= limit:
            break
    return feasible


def direct_matches(slots: Iterable[RequirementSlot], owned_ids: Iterable[UUID]) -> List[UUID]:
    """Recipe ingredient ids that sit on the shelf as-is.

    Substitutes and parent/child coverage are deliberately ignored.
    """
    owned = frozenset(owned_ids)
    matched: List[UUID] = []
    for slot in sorted(slots, key=lambda s: s.sort):
        if slot.ingredient_id in owned and slot.ingredient_id not in matched:
            matched.append(slot.ingredient_id)
    return matched
