"""Path constants for Mythforge settings."""

from pathlib import Path

# mythforge/settings -> mythforge -> project root
SETTINGS_FILE = Path(__file__).parent.parent.parent / "settings.json"

__all__ = ["SETTINGS_FILE"]
