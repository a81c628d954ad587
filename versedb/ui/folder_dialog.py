# versedb/ui/folder_dialog.py
from __future__ import annotations

from typing import Optional


def ask_directory(title: str) -> Optional[str]:
    """Open the native folder picker. Returns None when the dialog is cancelled."""
    import tkinter
    from tkinter import filedialog

    root = tkinter.Tk()
    root.withdraw()
    root.attributes("-topmost", True)
    try:
        chosen = filedialog.askdirectory(title=title, mustexist=True, parent=root)
    finally:
        root.destroy()

    return chosen or None
