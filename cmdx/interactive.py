"""
Interactive translation session.

Every line typed is translated with ``translate_full`` and printed.  A
handful of words are handled by the session itself:

  swap          exchange source and target OS
  from <os>     change the source OS
  to <os>       change the target OS
  help          show this list
  exit, quit    leave
"""

import logging

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory
from prompt_toolkit.lexers import PygmentsLexer
from prompt_toolkit.styles import Style as PTStyle
from prompt_toolkit.styles import merge_styles
from prompt_toolkit.styles.pygments import style_from_pygments_cls

from cmdx.config import Config
from cmdx.errors import InvalidOs, TranslateError
from cmdx.highlighting import PROMPT_STYLE, CmdxStyle, ShellLexer, highlight
from cmdx.platforms import Os
from cmdx.translator import translate_full

logger = logging.getLogger(__name__)

HELP_TEXT = """Commands:
  swap          Swap source and target OS
  from <os>     Set the source OS
  to <os>       Set the target OS
  help          Show this help
  exit, quit    Leave the session
Anything else is translated."""


class TranslatorShell:
    """A REPL that translates each line between two operating systems."""

    def __init__(self, config: Config, from_os: Os, to_os: Os):
        self.config = config
        self.from_os = from_os
        self.to_os = to_os
        self.running = True

    def _create_prompt_session(self) -> PromptSession:
        """Build a PromptSession with syntax highlighting."""
        style = merge_styles([
            style_from_pygments_cls(CmdxStyle),
            PTStyle.from_dict(PROMPT_STYLE),
        ])
        return PromptSession(
            lexer=PygmentsLexer(ShellLexer),
            style=style,
            history=InMemoryHistory(),
        )

    def _prompt_message(self):
        return [
            ("class:prompt-name", "cmdx"),
            ("", " "),
            ("class:prompt-os", self.from_os.value),
            ("class:prompt-sep", ">"),
            ("class:prompt-os", self.to_os.value),
            ("", " "),
            ("class:prompt-arrow", "> "),
        ]

    def _set_os(self, which: str, name: str):
        try:
            value = Os.parse(name)
        except InvalidOs as e:
            print(f"[Error] {e}")
            return
        setattr(self, which, value)
        print(f"{'Source' if which == 'from_os' else 'Target'} OS: {value}")

    def handle_input(self, user_input: str):
        """Run a built-in command or translate *user_input*."""
        words = user_input.split()
        keyword = words[0].lower()

        if keyword in ("exit", "quit"):
            self.running = False
            return
        if keyword == "help":
            print(HELP_TEXT)
            return
        if keyword == "swap" and len(words) == 1:
            self.from_os, self.to_os = self.to_os, self.from_os
            print(f"Now translating {self.from_os} -> {self.to_os}")
            return
        if keyword in ("from", "to") and len(words) == 2:
            self._set_os("from_os" if keyword == "from" else "to_os", words[1])
            return

        try:
            result = translate_full(user_input, self.from_os, self.to_os)
        except TranslateError as e:
            print(f"[Error] {e}")
            return

        output = result.translated
        if self.config.get("highlight", True):
            output = highlight(output)
        print(output)
        if self.config.get("show_warnings", True):
            for warning in result.warnings:
                print(f"  [!] {warning}")

    def run(self):
        """Main session loop."""
        print(f"cmdx interactive: {self.from_os} -> {self.to_os} (type 'help' for commands)")
        session = self._create_prompt_session()

        while self.running:
            try:
                user_input = session.prompt(self._prompt_message()).strip()
                if not user_input:
                    continue
                self.handle_input(user_input)
            except KeyboardInterrupt:
                print("\nGoodbye!")
                break
            except EOFError:
                print("\nGoodbye!")
                break
