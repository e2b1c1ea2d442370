"""Public package surface for lazyselect.

Headless selection engine for dropdown/combobox widgets. Renderers read
``SelectSession.view()`` and feed user events back into the session.
"""

from __future__ import annotations

from .errors import InvalidAddressError, ProviderFailure, SelectError, TaskCancelled
from .option_tree import CREATABLE, Address, CreatableSentinel, Group, Leaf, MenuView, OptionRow
from .runtime.cancellable import CancellableTask
from .session import SelectConfig, SelectSession


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = [
    "Address",
    "CREATABLE",
    "CancellableTask",
    "CreatableSentinel",
    "Group",
    "InvalidAddressError",
    "Leaf",
    "MenuView",
    "OptionRow",
    "ProviderFailure",
    "SelectConfig",
    "SelectError",
    "SelectSession",
    "TaskCancelled",
    "main",
]
