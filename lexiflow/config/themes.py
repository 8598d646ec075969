"""Color themes available in the settings sheet."""

DEFAULT_THEME = "Blue"

# Accent color plus gradient stops used by the card faces
THEME_CONFIG = {
    "Blue": {
        "accent": "#2979FF",
        "gradient_start": "#2979FF",
        "gradient_end": "#7C4DFF",
    },
    "Purple": {
        "accent": "#7C4DFF",
        "gradient_start": "#7C4DFF",
        "gradient_end": "#3D5AFE",
    },
    "Pink": {
        "accent": "#F50057",
        "gradient_start": "#F50057",
        "gradient_end": "#FF9100",
    },
    "Orange": {
        "accent": "#FF9100",
        "gradient_start": "#FF9100",
        "gradient_end": "#FF1744",
    },
    "Green": {
        "accent": "#00C853",
        "gradient_start": "#1DE9B6",
        "gradient_end": "#00C853",
    },
    "Teal": {
        "accent": "#00BFA5",
        "gradient_start": "#00E5FF",
        "gradient_end": "#00BFA5",
    },
    "Indigo": {
        "accent": "#3D5AFE",
        "gradient_start": "#3D5AFE",
        "gradient_end": "#7C4DFF",
    },
}


def get_theme(name: str) -> dict:
    """Palette entry for ``name``, falling back to the default theme."""
    return THEME_CONFIG.get(name, THEME_CONFIG[DEFAULT_THEME])
