"""SlotMarket: lifecycle engine for a fixed pool of 25 marketplace slots.

Every slot carries two independent state machines, an operational one
(empty / live / maintenance) and a draft one (empty / drafting /
ready_to_publish). All mutations go through
:class:`~slotmarket.slots.slots_service.SlotTransitionService`.
"""

SLOT_COUNT = 25

__all__ = ["SLOT_COUNT"]
