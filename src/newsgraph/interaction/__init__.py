"""Pointer interaction and tag expansion."""

from newsgraph.interaction.actions import Action, ExpandByTag, NoAction, OpenExternal
from newsgraph.interaction.controller import InteractionController, action_for
from newsgraph.interaction.expansion import ExpansionController

__all__ = [
    "Action",
    "ExpandByTag",
    "ExpansionController",
    "InteractionController",
    "NoAction",
    "OpenExternal",
    "action_for",
]
