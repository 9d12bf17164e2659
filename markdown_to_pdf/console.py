"""
Colored console output shared by the converter and the command line.

MIT License - Copyright (c) 2025 Markdown to PDF Converter
"""

from colorama import init, Fore, Style

# Initialize colorama for cross-platform colored output
init(autoreset=True)


class ColorLogger:
    """Mixin providing the [DEBUG]/[INFO]/[WARNING]/[ERROR]/[OK] log lines.

    Classes using it set ``self.verbose``; debug lines are only printed when
    it is true.
    """

    verbose = False

    def _log_debug(self, message: str) -> None:
        """Log debug message with color (only if verbose mode is enabled)."""
        if self.verbose:
            print(f"{Fore.CYAN}[DEBUG]{Style.RESET_ALL} {message}")

    def _log_info(self, message: str) -> None:
        """Log info message with color."""
        print(f"{Fore.GREEN}[INFO]{Style.RESET_ALL} {message}")

    def _log_warning(self, message: str) -> None:
        """Log warning message with color."""
        print(f"{Fore.YELLOW}[WARNING]{Style.RESET_ALL} {message}")

    def _log_error(self, message: str) -> None:
        """Log error message with color."""
        print(f"{Fore.RED}[ERROR]{Style.RESET_ALL} {message}")

    def _log_success(self, message: str) -> None:
        """Log success message with color."""
        print(f"{Fore.GREEN}[OK]{Style.RESET_ALL} {message}")
