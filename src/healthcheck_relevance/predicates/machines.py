"""Relevance of Machine changes."""

from __future__ import annotations

from typing import Optional

from ..entities import MachineSnapshot
from .base import RelevancePredicate


class MachinePredicate(RelevancePredicate):
    """Only machines reaching the Running phase matter.

    Deleting a machine is deliberately not relevant; see DESIGN.md.
    """

    name = "machine"

    def create(self, obj: MachineSnapshot) -> bool:
        return obj.running

    def update(self, old: Optional[MachineSnapshot], new: MachineSnapshot) -> bool:
        if not new.running:
            return False
        if old is None:
            return True
        return old.phase is not new.phase

    def delete(self, obj: MachineSnapshot) -> bool:
        return False
