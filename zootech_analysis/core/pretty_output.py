"""
Terminal rendering for the zootech commands.

Every command prints through PrettyOutput so that analysis tables,
cross-validation findings and reference comparisons share one look.
"""

import shutil

from colorama import Fore, Style


class PrettyOutput:
    """Static helpers writing coloured lines to stdout."""

    PRIMARY = Fore.CYAN
    SUCCESS = Fore.GREEN
    WARNING = Fore.YELLOW
    ERROR = Fore.RED
    INFO = Fore.BLUE
    HEADER = Fore.WHITE + Style.BRIGHT
    DIM = Style.DIM
    RESET = Style.RESET_ALL

    CHECK = "✓"
    CROSS = "✗"
    ARROW = "→"
    DOT = "•"
    WARN = "⚠"
    INFO_SYMBOL = "ℹ"

    # ValidationStatus / OverallStatus value -> color
    STATUS_COLORS = {
        "excellent": Fore.GREEN,
        "good": Fore.CYAN,
        "acceptable": Fore.YELLOW,
        "below_minimum": Fore.RED,
        "above_maximum": Fore.RED,
        "attention": Fore.RED,
        "no_reference": Style.DIM,
        "no_data": Style.DIM,
    }

    @staticmethod
    def _width(width=None):
        if width is not None:
            return width
        columns = shutil.get_terminal_size(fallback=(80, 24)).columns
        return min(columns, 80) if columns > 0 else 80

    @staticmethod
    def _mark(symbol, color, message, indent):
        print(f"{' ' * indent}{color}{symbol}{PrettyOutput.RESET} {message}")

    @staticmethod
    def header(text, width=None):
        """Boxed title printed once at the top of a command's output."""
        width = PrettyOutput._width(width)
        left = max((width - len(text)) // 2, 0)
        right = max(width - len(text) - left, 0)

        print(f"\n{PrettyOutput.PRIMARY}╔{'═' * width}╗")
        print(f"║{' ' * left}{text}{' ' * right}║")
        print(f"╚{'═' * width}╝{PrettyOutput.RESET}\n")

    @staticmethod
    def section(text, width=None):
        rule = "─" * PrettyOutput._width(width)
        print(f"\n{PrettyOutput.HEADER}{rule}\n{PrettyOutput.ARROW} {text}\n{rule}{PrettyOutput.RESET}\n")

    @staticmethod
    def subsection(text):
        print(f"\n{PrettyOutput.HEADER}{text}:{PrettyOutput.RESET}")

    @staticmethod
    def success(message, indent=0):
        PrettyOutput._mark(PrettyOutput.CHECK, PrettyOutput.SUCCESS, message, indent)

    @staticmethod
    def error(message, indent=0):
        PrettyOutput._mark(PrettyOutput.CROSS, PrettyOutput.ERROR, message, indent)

    @staticmethod
    def warning(message, indent=0):
        PrettyOutput._mark(PrettyOutput.WARN, PrettyOutput.WARNING, message, indent)

    @staticmethod
    def info(message, indent=0):
        PrettyOutput._mark(PrettyOutput.INFO_SYMBOL, PrettyOutput.INFO, message, indent)

    @staticmethod
    def item(message, indent=0):
        PrettyOutput._mark(PrettyOutput.DOT, PrettyOutput.DIM, message, indent)

    @staticmethod
    def key_value(key, value, indent=0):
        print(f"{' ' * indent}{PrettyOutput.DIM}{key}:{PrettyOutput.RESET} {value}")

    @staticmethod
    def colored_status(status_value):
        """Reference status wrapped in its color codes."""
        color = PrettyOutput.STATUS_COLORS.get(status_value, "")
        return f"{color}{status_value}{PrettyOutput.RESET}"

    @staticmethod
    def summary_box(title, items, width=60):
        """
        Boxed list of counters, e.g. the comparison summary.

        Args:
            title: Title centred on the first line
            items: (label, value, color) tuples
            width: Outer width of the box
        """
        inner = width - 2
        border = PrettyOutput.PRIMARY
        reset = PrettyOutput.RESET

        print(f"\n{border}┌{'─' * inner}┐{reset}")
        print(f"{border}│{reset}{PrettyOutput.HEADER}{title.center(inner)}{reset}{border}│{reset}")
        print(f"{border}├{'─' * inner}┤{reset}")

        for label, value, color in items:
            text = str(value)
            gap = max(inner - len(label) - len(text) - 5, 1)
            print(
                f"{border}│{reset}  {PrettyOutput.DIM}{label}:{reset}{' ' * gap}"
                f"{color}{text}{reset}  {border}│{reset}"
            )

        print(f"{border}└{'─' * inner}┘{reset}\n")

    @staticmethod
    def validation_result(passed, errors=0, warnings=0):
        """One-line PASSED / WARNINGS / FAILED verdict of a cross-validation run."""
        if errors > 0:
            verdict = f"{PrettyOutput.ERROR}{PrettyOutput.CROSS} FAILED{PrettyOutput.RESET}"
        elif passed and warnings == 0:
            verdict = f"{PrettyOutput.SUCCESS}{PrettyOutput.CHECK} PASSED{PrettyOutput.RESET}"
        else:
            verdict = f"{PrettyOutput.WARNING}{PrettyOutput.WARN} WARNINGS{PrettyOutput.RESET}"

        counts = []
        if errors:
            counts.append(f"{PrettyOutput.ERROR}{errors} erros{PrettyOutput.RESET}")
        if warnings:
            counts.append(f"{PrettyOutput.WARNING}{warnings} avisos{PrettyOutput.RESET}")

        print("\n" + "  │  ".join([verdict] + counts))

    @staticmethod
    def compact_table(headers, rows):
        """Left-aligned table sized to its widest cell per column."""
        rows = [[str(cell) for cell in row] for row in rows]
        widths = [
            max([len(str(title))] + [len(row[i]) for row in rows])
            for i, title in enumerate(headers)
        ]

        def render(cells):
            return "  ".join(cell.ljust(widths[i]) for i, cell in enumerate(cells))

        title_line = render([str(title) for title in headers])
        print(f"  {PrettyOutput.HEADER}{title_line}{PrettyOutput.RESET}")
        print(f"  {PrettyOutput.DIM}{'─' * len(title_line)}{PrettyOutput.RESET}")
        for row in rows:
            print(f"  {render(row)}")
