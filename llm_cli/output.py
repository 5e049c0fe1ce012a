"""Console output."""

import sys
from typing import Iterable, Optional, TextIO

from .models import ComparisonResult

RESET = "\033[0m"
BOLD = "\033[1m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
CYAN = "\033[36m"
GREY = "\033[90m"


class OutputFormatter:
    def __init__(self, color: bool = True, stream: Optional[TextIO] = None, err_stream: Optional[TextIO] = None):
        self.stream = stream or sys.stdout
        self.err_stream = err_stream or sys.stderr
        self.color = color and hasattr(self.stream, "isatty") and self.stream.isatty()

    def style(self, text: str, *codes: str) -> str:
        if not self.color or not codes:
            return text
        return "".join(codes) + text + RESET

    def print_response(self, text: str) -> None:
        print(text, file=self.stream)

    def print_error(self, error: str) -> None:
        print(f"{self.style('Error:', RED, BOLD)} {error}", file=self.err_stream)

    def print_success(self, message: str) -> None:
        print(f"{self.style('✓', GREEN)} {message}", file=self.stream)

    def print_info(self, message: str) -> None:
        print(f"{self.style('→', BLUE)} {message}", file=self.stream)

    def print_warning(self, message: str) -> None:
        print(self.style(message, YELLOW), file=self.stream)

    def print_comparison(self, results: Iterable[ComparisonResult]) -> None:
        for result in results:
            header = f"--- MODEL: {result.model} ({result.elapsed:.2f}s) ---"
            print("", file=self.stream)
            print(self.style(header, GREEN, BOLD), file=self.stream)
            if result.error is not None:
                print(self.style(f"Error ({result.error.kind}): {result.error}", RED), file=self.stream)
            else:
                print(result.text, file=self.stream)
            print(self.style("-" * 50, GREY), file=self.stream)
