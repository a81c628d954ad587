from .prompts import UserPrompt, TerminalPrompt, ScriptedPrompt

__all__ = ["UserPrompt", "TerminalPrompt", "ScriptedPrompt"]
