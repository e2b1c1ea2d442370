from __future__ import annotations

from dataclasses import dataclass

from ..option_tree import EMPTY_ADDRESS, Address, OptionTree

DEFAULT_NO_OPTIONS_MESSAGE = "No Options"


@dataclass
class SessionState:
    is_open: bool = False
    input_text: str = ""
    is_loading: bool = False
    first_load: bool = True
    current_tree: OptionTree = ()
    highlight_address: Address = EMPTY_ADDRESS
    no_options_message: str = DEFAULT_NO_OPTIONS_MESSAGE
    auto_focus: bool = False
    blur_pending: bool = False
    # Set by every transition, cleared by SelectSession.view().
    dirty: bool = True
