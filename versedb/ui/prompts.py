# versedb/ui/prompts.py
from __future__ import annotations

from typing import List, Optional, Sequence


class UserPrompt:
    """
    The two interactive questions a run may ask.
    Subclasses implement `choose_option` and `choose_directory`.
    """

    def choose_option(self, title: str, options: Sequence[str]) -> int:
        raise NotImplementedError(
            f"{self.__class__.__name__}.choose_option() not implemented"
        )

    def choose_directory(self, title: str) -> Optional[str]:
        raise NotImplementedError(
            f"{self.__class__.__name__}.choose_directory() not implemented"
        )


class TerminalPrompt(UserPrompt):
    """curses menu for choices, native dialog for directories."""

    def choose_option(self, title: str, options: Sequence[str]) -> int:
        from versedb.ui.selector import select_option

        return select_option(title, options)

    def choose_directory(self, title: str) -> Optional[str]:
        from versedb.ui.folder_dialog import ask_directory

        return ask_directory(title)


class ScriptedPrompt(UserPrompt):
    """Answers from preset values, in order. Used by non-interactive CLI flags and tests."""

    def __init__(self, choices: Optional[Sequence[int]] = None, directory: Optional[str] = None):
        self._choices: List[int] = list(choices or [])
        self.directory = directory
        self.asked: List[str] = []

    def choose_option(self, title: str, options: Sequence[str]) -> int:
        self.asked.append(title)
        if not self._choices:
            raise RuntimeError(f"No scripted answer left for prompt: {title}")
        choice = self._choices.pop(0)
        if not 0 <= choice < len(options):
            raise ValueError(f"Scripted choice {choice} out of range for {len(options)} options")
        return choice

    def choose_directory(self, title: str) -> Optional[str]:
        self.asked.append(title)
        return self.directory
