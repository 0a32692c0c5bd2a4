# src/numnerd/display.py
from __future__ import annotations

from colorama import Fore, Style

from numnerd.facts import FactCollection
from numnerd.markup import render, render_text
from numnerd.registry import Index, enabled_labels
from numnerd.utility import get_terminal_width, strip_ansi


def render_html(facts: FactCollection) -> dict[str, list]:
    """
    Render every fact to an HTML fragment:
      {"basic": [html, ...], "forms": [(label_html, html), ...]}
    """
    return {
        "basic": [render(f.text) for f in facts.basic],
        "forms": [(render(f.label or ""), render(f.text)) for f in facts.forms],
    }


def print_facts(facts: FactCollection, om, *, color: bool = True) -> None:
    """
    Terminal rendering:
      • the number as a bright yellow heading
      • basic facts as '  - ...' bullets
      • forms as 'Label ..... value' rows, values in bright green
      • a red footer naming analyzers that failed
    """
    if not color:
        _om = om

        class _Plain:
            def write(self, text: str) -> None:
                _om.write(strip_ansi(text))

        om = _Plain()

    om.write(f"{Fore.YELLOW}{Style.BRIGHT}{facts.n}{Style.RESET_ALL}")

    if facts.basic:
        om.write(f"{Style.BRIGHT}{Fore.CYAN}Facts{Style.RESET_ALL}")
        for f in facts.basic:
            om.write(f"{Fore.WHITE}  - {render_text(f.text, color=color)}{Style.RESET_ALL}")

    if facts.forms:
        om.write(f"{Style.BRIGHT}{Fore.CYAN}Forms{Style.RESET_ALL}")
        width = max(len(f.label or "") for f in facts.forms) + 4
        for f in facts.forms:
            label = render_text(f.label or "", color=False)
            value = render_text(f.text, color=color)
            om.write(f"  {label} {'.' * (width - len(label))} {Fore.GREEN}{Style.BRIGHT}{value}{Style.RESET_ALL}")

    if facts.failures:
        om.write(
            f"\n{Fore.RED}{Style.BRIGHT}Failed analyzers: {len(facts.failures)}{Style.RESET_ALL} "
            f"{Style.DIM}(rerun with --debug for tracebacks){Style.RESET_ALL}"
        )
        for label, err in facts.failures:
            om.write(f"{Fore.WHITE}{Style.DIM}  - {label}: {err}{Style.RESET_ALL}")


def show_analyzer_list(index: Index, om) -> None:
    """List discovered analyzers; disabled ones (profile) are dimmed."""
    enabled = set(enabled_labels(index))
    width = get_terminal_width()
    om.write(f"{Style.BRIGHT}{Fore.CYAN}Analyzers ({len(index.funcs)}){Style.RESET_ALL}")
    for label in index.funcs:
        desc = index.descriptions.get(label, "")
        tok = index.label_to_token.get(label, "")
        line = f"  - {label} [{tok}]: {desc}"
        if label in index.limits:
            line += f" (n ≤ {index.limits[label]})"
        if len(line) > width:
            line = line[: width - 1] + "…"
        if label in enabled:
            om.write(f"{Fore.WHITE}{line}{Style.RESET_ALL}")
        else:
            om.write(f"{Style.DIM}{line} (disabled){Style.RESET_ALL}")
