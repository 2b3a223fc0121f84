# MIT License (see LICENSE)
"""
Ownership of the placed charges and of the drag ghost.

ChargeStore is the only place charges are created, moved or deleted. Every
mutation is published to subscribers as a StoreEvent so that derived data
(the sampled field) can mark itself dirty instead of being recomputed every
frame.

Dragging a charge goes through an EditGhost: begin_ghost() starts the drag,
update_ghost() moves the ghost, and commit_ghost() / cancel_ghost() end it.
Field evaluations see the ghost position; the stored charge only moves on
commit.
"""
from __future__ import annotations
import enum
import logging
from typing import Callable, Iterable

from .errors import InvalidReference
from .types import ChargeSource, EditGhost
from .util import vec3

logger = logging.getLogger(__name__)


class StoreEvent(enum.Enum):
    ADD = "add"
    MOVE = "move"
    REMOVE = "remove"
    RESET = "reset"
    GHOST_BEGIN = "ghost_begin"
    GHOST_UPDATE = "ghost_update"
    GHOST_COMMIT = "ghost_commit"
    GHOST_CANCEL = "ghost_cancel"

    @property
    def commits(self) -> bool:
        """True for events that change the committed charge list."""
        return self in (
            StoreEvent.ADD, StoreEvent.MOVE, StoreEvent.REMOVE,
            StoreEvent.RESET, StoreEvent.GHOST_COMMIT,
        )


Listener = Callable[[StoreEvent, "ChargeStore"], None]


class ChargeStore:
    """
    Mutable collection of ChargeSource plus at most one EditGhost.

    Attributes:
        revision: Incremented on every change to the committed charges.
    """

    def __init__(self, charges: Iterable[tuple] = ()) -> None:
        self._sources: list[ChargeSource] = []
        self._ghost: EditGhost | None = None
        self._listeners: list[Listener] = []
        self.revision = 0
        for position, charge in charges:
            self.add(position, charge)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def sources(self) -> tuple[ChargeSource, ...]:
        """Committed charges, in insertion order."""
        return tuple(self._sources)

    @property
    def ghost(self) -> EditGhost | None:
        return self._ghost

    def snapshot(self) -> tuple[tuple[ChargeSource, ...], EditGhost | None]:
        """Consistent (sources, ghost) pair for one frame's evaluations."""
        return self.sources, self._ghost

    def get(self, charge_id: int) -> ChargeSource:
        """
        Look up a charge by id.

        Raises:
            InvalidReference: If no charge has this id.
        """
        for s in self._sources:
            if s.id == charge_id:
                return s
        raise InvalidReference(charge_id)

    def __contains__(self, charge_id: int) -> bool:
        return any(s.id == charge_id for s in self._sources)

    def __len__(self) -> int:
        return len(self._sources)

    # -------------------------------------------------------------------------
    # Subscription
    # -------------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> None:
        """Call ``listener(event, store)`` after every mutation."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _publish(self, event: StoreEvent) -> None:
        if event.commits:
            self.revision += 1
        for listener in list(self._listeners):
            listener(event, self)

    # -------------------------------------------------------------------------
    # Committed mutations
    # -------------------------------------------------------------------------

    def add(self, position, charge: float) -> int:
        """
        Place a new charge.

        The id is one more than the largest id in use (1 for an empty store).

        Returns:
            The assigned id.
        """
        charge_id = max((s.id for s in self._sources), default=0) + 1
        source = ChargeSource(id=charge_id, position=position, charge=charge)
        self._sources.append(source)
        logger.debug("Added charge %d q=%g at %s", charge_id, source.charge, source.position)
        self._publish(StoreEvent.ADD)
        return charge_id

    def move(self, charge_id: int, position) -> None:
        """
        Move a charge in place.

        Raises:
            InvalidReference: If no charge has this id.
        """
        source = self.get(charge_id)
        source.position = vec3(position)
        logger.debug("Moved charge %d to %s", charge_id, source.position)
        self._publish(StoreEvent.MOVE)

    def remove(self, charge_id: int) -> bool:
        """
        Delete a charge. Removing the dragged charge also drops the ghost.

        Returns:
            False if there was no such charge (nothing changes).
        """
        for i, s in enumerate(self._sources):
            if s.id == charge_id:
                del self._sources[i]
                break
        else:
            logger.debug("Remove ignored: no charge %d", charge_id)
            return False

        if self._ghost is not None and self._ghost.target_id == charge_id:
            self._ghost = None
        logger.debug("Removed charge %d", charge_id)
        self._publish(StoreEvent.REMOVE)
        return True

    def reset(self, charges: Iterable[tuple] = ()) -> None:
        """Drop every charge and the ghost, then place ``charges`` afresh."""
        self._sources = [
            ChargeSource(id=i, position=position, charge=charge)
            for i, (position, charge) in enumerate(charges, start=1)
        ]
        self._ghost = None
        logger.debug("Store reset with %d charge(s)", len(self._sources))
        self._publish(StoreEvent.RESET)

    # -------------------------------------------------------------------------
    # Drag ghost
    # -------------------------------------------------------------------------

    def begin_ghost(self, charge_id: int, position=None) -> EditGhost:
        """
        Start dragging a charge.

        Replaces any ghost already active. ``position`` defaults to the
        charge's stored position.

        Raises:
            InvalidReference: If no charge has this id.
        """
        source = self.get(charge_id)
        start = source.position.copy() if position is None else position
        self._ghost = EditGhost(target_id=charge_id, position=start)
        self._publish(StoreEvent.GHOST_BEGIN)
        return self._ghost

    def update_ghost(self, position) -> bool:
        """Move the active ghost. Returns False when no drag is active."""
        if self._ghost is None:
            return False
        self._ghost = EditGhost(target_id=self._ghost.target_id, position=position)
        self._publish(StoreEvent.GHOST_UPDATE)
        return True

    def commit_ghost(self) -> bool:
        """
        Write the ghost position into its charge and end the drag.

        Returns:
            False when no drag is active.
        """
        ghost = self._ghost
        if ghost is None:
            return False
        self._ghost = None
        source = self.get(ghost.target_id)
        source.position = ghost.position.copy()
        logger.debug("Committed drag of charge %d to %s", source.id, source.position)
        self._publish(StoreEvent.GHOST_COMMIT)
        return True

    def cancel_ghost(self) -> bool:
        """End the drag without moving the charge. False when none is active."""
        if self._ghost is None:
            return False
        self._ghost = None
        self._publish(StoreEvent.GHOST_CANCEL)
        return True

