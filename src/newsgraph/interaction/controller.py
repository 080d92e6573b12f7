"""Pointer click routing."""

import logging

from newsgraph.interaction.actions import Action, ExpandByTag, NoAction, OpenExternal
from newsgraph.interaction.expansion import ExpansionController
from newsgraph.models import Node, NodeKind
from newsgraph.render.pick_buffer import PickBuffer
from newsgraph.state import GraphState

logger = logging.getLogger(__name__)


def action_for(node: Node | None) -> Action:
    """What clicking ``node`` means."""
    if node is    def dispatch(self, action: Action) -> Action:
        """Run the in-process side effect of ``action``.

        Expansions are started in the background. Opening a URL belongs to
        the client, so OpenExternal is returned untouched for the caller.
        """
        if isinstance(action, ExpandByTag):
            self.expansion.request(action.tag_name)
        return action

    def click(self, px: float, py: float) -> Action:
        return self.dispatch(self.on_click(px, py))
