"""List keybindings manager."""

from __future__ import annotations

from typing import Literal

KeyId = str

ListAction = Literal[
    # Line scrolling
    "down",
    "up",
    # Item navigation
    "downOneItem",
    "upOneItem",
    # Page scrolling
    "halfPageDown",
    "halfPageUp",
    "pageDown",
    "pageUp",
    # Jumps
    "end",
    "home",
]

ListKeybindingsConfig = dict[ListAction, KeyId | list[KeyId]]

DEFAULT_LIST_KEYBINDINGS: dict[ListAction, KeyId | list[KeyId]] = {
    "down": ["down", "ctrl+j", "ctrl+n", "j"],
    "up": ["up", "ctrl+k", "ctrl+p", "k"],
    "downOneItem": ["shift+down", "J"],
    "upOneItem": ["shift+up", "K"],
    "halfPageDown": "d",
    "halfPageUp": "u",
    "pageDown": ["pageDown", "space", "f"],
    "pageUp": ["pageUp", "b"],
    "end": ["end", "G"],
    "home": ["home", "g"],
}


class ListKeybindingsManager:
    """Maps list actions to key ids, defaults overridden by user config."""

    def __init__(self, config: ListKeybindingsConfig | None = None) -> None:
        self._action_to_keys: dict[ListAction, list[KeyId]] = {}
        self._build_maps(config or {})

    def _build_maps(self, config: ListKeybindingsConfig) -> None:
        self._action_to_keys.clear()

        for action, keys in DEFAULT_LIST_KEYBINDINGS.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

        for action, keys in config.items():
            key_array = keys if isinstance(keys, list) else [keys]
            self._action_to_keys[action] = list(key_array)

    def matches(self, key: KeyId, action: ListAction) -> bool:
        """Check if the pressed *key* is bound to *action*."""
        return key in self._action_to_keys.get(action, ())

    def action_for(self, key: KeyId) -> ListAction | None:
        """First action bound to *key*, in declaration order."""
        for action, keys in self._action_to_keys.items():
            if key in keys:
                return action
        return None

    def get_keys(self, action: ListAction) -> list[KeyId]:
        return self._action_to_keys.get(action, [])

    def set_config(self, config: ListKeybindingsConfig) -> None:
        self._build_maps(config)


_global_list_keybindings: ListKeybindingsManager | None = None


def get_list_keybindings() -> ListKeybindingsManager:
    global _global_list_keybindings
    if _global_list_keybindings is None:
        _global_list_keybindings = ListKeybindingsManager()
    return _global_list_keybindings


def set_list_keybindings(manager: ListKeybindingsManager) -> None:
    global _global_list_keybindings
    _global_list_keybindings = manager
