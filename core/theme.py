"""Catppuccin Mocha color theme for Redline."""

from rich.theme import Theme

# Catppuccin Mocha palette (subset used by Redline)
MOCHA = {
    "rosewater": "#f5e0dc",
    "flamingo": "#f2cdcd",
    "pink": "#f5c2e7",
    "mauve": "#cba6f7",
    "red": "#f38ba8",
    "maroon": "#eba0ac",
    "peach": "#fab387",
    "yellow": "#f9e2af",
    "green": "#a6e3a1",
    "teal": "#94e2d5",
    "sky": "#89dceb",
    "sapphire": "#74c7ec",
    "blue": "#89b4fa",
    "lavender": "#b4befe",
    "text": "#cdd6f4",
    "subtext0": "#a6adc8",
    "overlay1": "#7f849c",
    "overlay0": "#6c7086",
    "surface2": "#585b70",
}

REDLINE_THEME = Theme({
    # Console messages
    "success": f"bold {MOCHA['green']}",
    "failure": MOCHA["red"],
    "error": MOCHA["peach"],
    "warn": MOCHA["yellow"],
    "info": MOCHA["sky"],
    "dim": MOCHA["overlay0"],
    "heading": f"bold {MOCHA['lavender']}",
    "label": MOCHA["sapphire"],
    "value": MOCHA["text"],
    "hit": f"bold {MOCHA['green']}",
    "hit.cred": MOCHA["teal"],

    # Per-target outcome
    "status.completed": MOCHA["text"],
    "status.no_auth": f"bold {MOCHA['maroon']}",
    "status.ambiguous": MOCHA["yellow"],
    "status.exhausted": f"bold {MOCHA['green']}",
    "status.stopped": MOCHA["sky"],
    "status.unreachable": MOCHA["red"],
    "status.error": MOCHA["peach"],

    # Table
    "table.header": f"bold {MOCHA['lavender']}",
    "table.mode": MOCHA["sapphire"],
    "table.target": MOCHA["text"],
    "table.user": MOCHA["flamingo"],
    "table.pass": MOCHA["rosewater"],
    "table.msg": MOCHA["subtext0"],

    # Progress bar
    "progress.description": MOCHA["blue"],
    "bar.complete": MOCHA["green"],
    "bar.finished": MOCHA["green"],
    "bar.pulse": MOCHA["mauve"],
})
