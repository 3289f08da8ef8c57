"""Agenda state machine and its render pipeline."""

from __future__ import annotations

from .controller import AgendaController
from .state import AgendaState, reduce
from .views import AgendaView, FilterPanel, TypeOption

__all__ = ["AgendaController", "AgendaState", "AgendaView", "FilterPanel", "TypeOption", "reduce"]
