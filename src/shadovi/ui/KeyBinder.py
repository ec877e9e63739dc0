# shadovi/ui/KeyBinder.py
"""KeyBinder.py
==================
Description:
-----------------------
The KeyBinder class translates key presses into editor actions for the
shadovi text editor. Keybindings come from the ``[keybindings]`` section of
the configuration (with built-in defaults) and may name keys with modifiers
("ctrl+s"), function keys ("f3"), named keys ("pageup") or raw integer codes.

Key Features:
- Loads and parses keybinding configurations, supporting user overrides.
- Maps key codes and logical key strings to editor action methods.
- Inserts printable characters into the buffer.
- Reads keys with `get_wch` so non-ASCII characters arrive whole, and decodes
  ESC-prefixed sequences that curses did not translate itself.
- Owns the quit confirmation: quitting with unsaved changes requires
  `quit_times` more presses of the quit key; any other key resets the count.

Main Methods:
1. handle_input: Processes a single key event and dispatches it.
2. get_key_input: Reads a single key or key sequence from the terminal.
3. lookup: Reverse lookup from a key specification to an action name.
"""

import curses
import logging
import re
from typing import TYPE_CHECKING, Any, Callable, Optional

from shadovi.utils.logging_config import KEY_LOGGER

if TYPE_CHECKING:
    from shadovi.core.Editor import Editor


DEFAULT_QUIT_TIMES = 3
INPUT_TIMEOUT_MS = 100


# ==================== KeyBinder Class ====================
class KeyBinder:
    """Class KeyBinder
    ====================
    Keybindings, input decoding and action dispatch for the editor.

    Attributes:
        editor (Editor): The editor whose actions are invoked.
        config: Editor configuration, including user-defined keybindings.
        stdscr: The curses window keys are read from.
        quit_times_default (int): Extra quit presses required with unsaved changes.
        quit_times (int): Remaining presses before a dirty buffer is abandoned.
        keybindings (dict): Action name -> list of key codes or key strings.
        action_map (dict): Key code or logical key string -> editor method.
    """
    # Keys do NOT include the leading ESC (0x1B); get_key_input() reads after it.
    ESCAPE_SEQUENCE_MAP: dict[str, str] = {
        "[A": "up", "[B": "down", "[C": "right", "[D": "left",
        "OA": "up", "OB": "down", "OC": "right", "OD": "left",
        "[H": "home", "[F": "end", "OH": "home", "OF": "end",
        "[1~": "home", "[4~": "end", "[7~": "home", "[8~": "end",
        "[3~": "delete", "[5~": "pageup", "[6~": "pagedown",
    }

    def __init__(self, editor: "Editor"):
        logging.debug("KeyBinder initialized with editor: %s", editor)
        self.editor = editor
        self.config = editor.config
        self.stdscr = editor.stdscr

        self.quit_times_default: int = int(
            self.config.get("editor", {}).get("quit_times", DEFAULT_QUIT_TIMES)
        )
        self.quit_times: int = self.quit_times_default

        self.keybindings = self._load_keybindings()
        self.action_map = self._setup_action_map()

    # ---------------------- Quit confirmation --------------------
    def request_quit(self) -> bool:
        """Quits, unless the buffer is dirty and confirmations remain."""
        if self.quit_times > 0 and self.editor.document.is_dirty():
            self.editor._set_status_message(
                "WARNING! File has unsaved changes. "
                f"Press Ctrl-Q {self.quit_times} more times to quit."
            )
            self.quit_times -= 1
            return True
        self.editor.exit_editor()
        return True

    def _reset_quit_confirmation(self) -> None:
        if self.quit_times < self.quit_times_default:
            self.quit_times = self.quit_times_default
            self.editor._set_status_message("")

    def _handle_printable_character(self, key: str | int) -> bool:
        """Handles insertion of a printable character into the buffer."""
        char_to_insert = ""
        if isinstance(key, str) and len(key) == 1:
            if key.isprintable():
                char_to_insert = key
        elif isinstance(key, int) and 32 <= key < 1114112 and key != 127:
            try:
                char_to_insert = chr(key)
                if not char_to_insert.isprintable():
                    char_to_insert = ""
            except ValueError:
                logging.warning(f"Invalid ordinal for chr(): {key}. Cannot convert.")
                return False

        if char_to_insert:
            logging.debug(f"handle_input: inserting printable character {char_to_insert!r}.")
            return self.editor.insert_text(char_to_insert)

        return False

    # ---------------------- Handle Input --------------------
    def handle_input(self, key: str | int) -> bool:
        """Processes a single key event and triggers the corresponding editor action.

        Args:
            key (Union[str, int]): The logical key event: an integer key
                code, an 'alt-...' string or a printable character.

        Returns:
            bool: True if the input caused a visual change in the editor.

        Exceptions raised by an action are logged and reported in the
        status bar; they are not propagated.
        """
        logging.debug(
            "handle_input: Received logical key event → %r (type: %s)",
            key,
            type(key).__name__,
        )

        original_status = self.editor.status_message
        action_caused_visual_change = False

        try:
            action = self.action_map.get(key)
            if action != self.request_quit:
                self._reset_quit_confirmation()

            if action is not None:
                logging.debug("handle_input: Key %r calls %r", key, action)
                if action():
                    action_caused_visual_change = True
            elif self._handle_printable_character(key):
                action_caused_visual_change = True
            else:
                logging.debug(
                    "Unhandled input: %r (type: %s)", key, type(key).__name__
                )

            if self.editor.status_message != original_status:
                action_caused_visual_change = True

            return action_caused_visual_change

        except Exception as e_handler:
            logging.exception("Input handler error.")
            self.editor._set_status_message(
                f"Input handler error: {str(e_handler)[:50]}"
            )
            return True

    def _load_keybindings(self) -> dict[str, list[int | str]]:
        """Returns action name -> key codes, merging config over the defaults.

        A config value may be a single spec, a list of specs or a string
        of specs separated by ``|``. An empty value disables the action.
        Specs that fail to parse are logged and skipped.
        """
        default_keybindings: dict[str, list[int | str]] = {
            "quit": ["ctrl+q", 17],
            "save_file": ["ctrl+s", 19],
            "find": ["ctrl+f", 6],
            "delete": ["del", curses.KEY_DC],
            "handle_backspace": ["backspace", curses.KEY_BACKSPACE, 8, 127],
            "handle_tab": ["tab", 9],
            "handle_home": ["home", curses.KEY_HOME],
            "handle_end": ["end", getattr(curses, "KEY_END", curses.KEY_LL)],
            "handle_page_up": ["pageup", curses.KEY_PPAGE],
            "handle_page_down": ["pagedown", curses.KEY_NPAGE],
            "handle_up": ["up"],
            "handle_down": ["down"],
            "handle_left": ["left"],
            "handle_right": ["right"],
        }

        user_keybindings_config: dict[str, object] = self.config.get("keybindings", {})
        parsed_keybindings: dict[str, list[int | str]] = {}

        for action, default_value_spec in default_keybindings.items():
            key_value_spec_from_config: object = user_keybindings_config.get(
                action, default_value_spec
            )

            if not key_value_spec_from_config:
                logging.debug("Keybinding for action %r is disabled or empty.", action)
                continue

            specs_to_process: list[int | str]
            if isinstance(key_value_spec_from_config, list):
                specs_to_process = key_value_spec_from_config  # type: ignore[assignment]
            elif isinstance(key_value_spec_from_config, str) and "|" in key_value_spec_from_config:
                specs_to_process = [s.strip() for s in key_value_spec_from_config.split("|")]
            else:
                specs_to_process = [key_value_spec_from_config]  # type: ignore[list-item]

            key_codes_for_action: list[int | str] = []
            for key_spec_item in specs_to_process:
                try:
                    key_code = self._decode_keystring(key_spec_item)
                except ValueError as e:
                    logging.error(
                        "Error parsing keybinding item %r for action %r: %s. "
                        "This specific binding for the action will be ignored.",
                        key_spec_item, action, e
                    )
                    continue
                if key_code not in key_codes_for_action:
                    key_codes_for_action.append(key_code)

            if key_codes_for_action:
                parsed_keybindings[action] = key_codes_for_action
            else:
                logging.warning(
                    "No valid key codes found for action %r after parsing. It will not be bound.",
                    action,
                )

        logging.debug(
            "Loaded and parsed keybindings (action -> list of key_codes): %s",
            parsed_keybindings,
        )
        return parsed_keybindings

    def _decode_keystring(self, key_input: str | int) -> int | str:
        """Decodes a key specification into a key code or logical key identifier.

        Args:
            key_input (Union[str, int]): e.g. "ctrl+s", "f3", "alt+x", 19.

        Returns:
            Union[int, str]: The key code, or "alt-<key>" for Alt bindings.

        Raises:
            ValueError: If the key string is invalid or has unknown modifiers.
        """
        if isinstance(key_input, bool) or not isinstance(key_input, (int, str)):
            raise ValueError(
                f"Invalid key_input type: {type(key_input)}. Expected str or int."
            )
        if isinstance(key_input, int):
            return key_input

        original_key_string = key_input
        s = key_input.strip().lower()
        if not s:
            raise ValueError("Key string cannot be empty.")

        parts = s.split("+")
        if "alt" in parts[:-1]:
            other_mods = sorted(m for m in parts[:-1] if m != "alt")
            prefix = "+".join(other_mods) + "+" if other_mods else ""
            return f"alt-{prefix}{parts[-1]}"
        if s.startswith("alt-"):
            return s

        named_keys_map: dict[str, int] = {
            "left": curses.KEY_LEFT,
            "right": curses.KEY_RIGHT,
            "up": curses.KEY_UP,
            "down": curses.KEY_DOWN,
            "home": curses.KEY_HOME,
            "end": getattr(curses, "KEY_END", curses.KEY_LL),
            "pageup": curses.KEY_PPAGE,
            "pgup": curses.KEY_PPAGE,
            "pagedown": curses.KEY_NPAGE,
            "pgdn": curses.KEY_NPAGE,
            "delete": curses.KEY_DC,
            "del": curses.KEY_DC,
            "backspace": curses.KEY_BACKSPACE,
            "insert": curses.KEY_IC,
            "tab": 9,
            "enter": curses.KEY_ENTER,
            "return": curses.KEY_ENTER,
            "space": ord(" "),
            "esc": 27,
            "escape": 27,
        }
        named_keys_map.update(
            {f"f{i}": getattr(curses, f"KEY_F{i}", 264 + i) for i in range(1, 13)}
        )

        if s in named_keys_map:
            return named_keys_map[s]

        base_key_str = parts[-1].strip()
        modifiers = set(p.strip() for p in parts[:-1])

        if base_key_str in named_keys_map:
            base_code = named_keys_map[base_key_str]
        elif len(base_key_str) == 1:
            base_code = ord(base_key_str)
        else:
            raise ValueError(
                f"Unknown base key '{base_key_str}' in '{original_key_string}'"
            )

        if "ctrl" in modifiers:
            modifiers.remove("ctrl")
            if len(base_key_str) == 1 and "a" <= base_key_str <= "z":
                base_code = ord(base_key_str) - ord("a") + 1
            elif base_key_str == "\\":
                base_code = 28
            elif base_key_str == "]":
                base_code = 29
            elif base_key_str == "/":
                base_code = 31

        if "shift" in modifiers:
            modifiers.remove("shift")
            if len(base_key_str) == 1 and "a" <= base_key_str <= "z" and base_code == ord(base_key_str):
                base_code = ord(base_key_str.upper())

        if modifiers:
            raise ValueError(
                f"Unknown or unhandled modifiers {sorted(modifiers)} in '{original_key_string}'"
            )
        return base_code

    def _setup_action_map(self) -> dict[int | str, Callable[..., Any]]:
        """Builds the key code -> editor method mapping from the keybindings."""
        logging.debug("Setting up action map for KeyBinder.")
        action_to_method_map: dict[str, Callable] = {
            "quit": self.request_quit,
            "save_file": self.editor.save_file,
            "find": self.editor.find,
            "delete": self.editor.handle_delete,
            "handle_backspace": self.editor.handle_backspace,
            "handle_tab": lambda: self.editor.insert_text("\t"),
            "handle_home": self.editor.handle_home,
            "handle_end": self.editor.handle_end,
            "handle_page_up": self.editor.handle_page_up,
            "handle_page_down": self.editor.handle_page_down,
            "handle_up": self.editor.handle_up,
            "handle_down": self.editor.handle_down,
            "handle_left": self.editor.handle_left,
            "handle_right": self.editor.handle_right,
        }

        final_key_action_map: dict[int | str, Callable] = {
            curses.KEY_UP: self.editor.handle_up,
            curses.KEY_DOWN: self.editor.handle_down,
            curses.KEY_LEFT: self.editor.handle_left,
            curses.KEY_RIGHT: self.editor.handle_right,
            curses.KEY_RESIZE: self.editor.handle_resize,
            curses.KEY_ENTER: self.editor.handle_enter,
            10: self.editor.handle_enter,  # LF
            13: self.editor.handle_enter,  # CR
        }

        for action_name, key_code_list in self.keybindings.items():
            method_callable = action_to_method_map.get(action_name)
            if not method_callable:
                logging.warning(
                    f"Action '{action_name}' in keybindings but no corresponding method. Ignored."
                )
                continue
            for key_code in key_code_list:
                if key_code in final_key_action_map and final_key_action_map[key_code] != method_callable:
                    logging.debug(
                        f"Keybinding for action '{action_name}' (key: {key_code}) overrides an existing mapping."
                    )
                final_key_action_map[key_code] = method_callable

        return final_key_action_map

    @staticmethod
    def _normalize_key(ch: str | int) -> str | int:
        # Control characters arrive from get_wch() as 1-char strings.
        if isinstance(ch, str) and len(ch) == 1 and (ord(ch) < 32 or ord(ch) == 127):
            return ord(ch)
        return ch

    def get_key_input(self, window: Optional["curses.window"] = None) -> int | str:
        """Read a single key or key sequence from the terminal.

        Returns:
            int | str:
            - curses key code (int) for special and control keys,
            - the character (str) for printable input,
            - "alt-<char>" for Alt/Meta chords,
            - 27 for a lone ESC,
            - curses.ERR when no key arrived before the input timeout,
            - -1 for unexpected exceptions.
        """
        target = window or self.stdscr

        try:
            try:
                key = self._normalize_key(target.get_wch())
            except curses.error:
                return curses.ERR

            if key != 27:
                KEY_LOGGER.debug("key %r", key)
                return key

            seq = ""
            target.nodelay(True)
            try:
                while True:
                    try:
                        nx = target.get_wch()
                    except curses.error:
                        break
                    seq += nx if isinstance(nx, str) else f"<{nx}>"
            finally:
                target.nodelay(False)
                target.timeout(INPUT_TIMEOUT_MS)

            if not seq:
                KEY_LOGGER.debug("key ESC")
                return 27

            if seq[0] == "\x1b":
                seq = seq[1:]

            if len(seq) == 1 and seq.isprintable():
                KEY_LOGGER.debug("alt chord %r", seq)
                return f"alt-{seq.lower()}"

            mapped = self.ESCAPE_SEQUENCE_MAP.get(seq)
            if not mapped:
                cleaned = "".join(re.findall(r"[\[O0-9;~A-Za-z]", seq))
                mapped = self.ESCAPE_SEQUENCE_MAP.get(cleaned)

            if mapped:
                code = self._decode_keystring(mapped)
                KEY_LOGGER.debug("escape sequence %r -> %r -> %r", seq, mapped, code)
                return code

            logging.warning("get_key_input: unknown escape sequence: ESC + %r", seq)
            return 27

        except Exception:
            logging.exception("get_key_input: unexpected error")
            return -1

    def lookup(self, key_spec: str | int) -> Optional[str]:
        """Finds the action name bound to a key specification.

        Args:
            key_spec: The key string (e.g., "ctrl+s") or integer code.

        Returns:
            The action name (e.g., "save_file") or None if unbound.
        """
        try:
            decoded_key = self._decode_keystring(key_spec)
        except ValueError:
            return None

        for action_name, key_list in self.keybindings.items():
            if decoded_key in key_list:
                return action_name
        return None
