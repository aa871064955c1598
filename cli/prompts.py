"""Interactive prompts backed by rich.prompt"""

from typing import Optional, Sequence

from rich.console import Console
from rich.prompt import Confirm, Prompt


class RichPrompter:
    """Asks the operator for passwords, MFA codes and factor choices"""

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console()

    def prompt_secret(self, label: str) -> str:
        """Masked input; repeats until a non-empty value is entered"""
        while True:
            value = Prompt.ask(label, password=True, console=self.console)
            if value:
                return value
            self.console.print(f"[red]{label} must not be empty[/red]")

    def prompt_choice(self, label: str, choices: Sequence[str]) -> int:
        """Numbered single choice

        Returns:
            Zero-based index of the selected entry
        """
        if not choices:
            raise ValueError("No choices to select from")

        self.console.print(f"[bold]{label}[/bold]")
        for number, choice in enumerate(choices, start=1):
            self.console.print(f" {number}. {choice}")

        numbers = [str(number) for number in range(1, len(choices) + 1)]
        answer = Prompt.ask("Choice", choices=numbers, default="1", console=self.console)
        return int(answer) - 1

    def prompt_confirm(self, label: str) -> bool:
        return Confirm.ask(label, default=False, console=self.console)
