"""
Caption quality profiles for the caption fixer package.
"""
from typing import Dict, Any, Optional
from dataclasses import dataclass, asdict, fields
import json
from pathlib import Path
import os

from rich.console import Console

from .exceptions import ProfileError

console = Console()

SPEAKER_TURN_RULES = ("sentence_end", "continuation")

@dataclass
class FixSettings:
    """Thresholds and behaviour switches for the fixing passes"""
    max_line_chars: int = 32
    max_lines: int = 3
    max_duration_ms: int = 7000
    short_caption_ms: int = 1200
    min_duration_ms: int = 1000
    min_gap_ms: int = 40
    # Split passes divide payload text and recompute split times
    redistribute_text: bool = False
    # "sentence_end": dash after a line ending with "."
    # "continuation": dash after a line not ending with "."
    speaker_turn_rule: str = "sentence_end"
    trim_previous_line: bool = False

    def __post_init__(self):
        if self.speaker_turn_rule not in SPEAKER_TURN_RULES:
            raise ProfileError(
                f"Unknown speaker turn rule '{self.speaker_turn_rule}', "
                f"expected one of {', '.join(SPEAKER_TURN_RULES)}"
            )
        if self.max_line_chars < 1 or self.max_lines < 1:
            raise ProfileError("max_line_chars and max_lines must be positive")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

# Default profiles
DEFAULT_PROFILES = {
    "default": {
        **FixSettings().to_dict(),
        "description": "Captioning rules: 32 chars, 3 lines, 1-7 s, 40 ms gap"
    },
    "strict-broadcast": {
        **FixSettings(max_lines=2, min_gap_ms=80, redistribute_text=True).to_dict(),
        "description": "Two-line broadcast captions with redistributed split text"
    },
    "relaxed": {
        **FixSettings(max_line_chars=42, max_duration_ms=10000, min_duration_ms=700).to_dict(),
        "description": "Longer lines and cues for lecture or technical content"
    },
}

def get_user_profiles_path() -> Path:
    """Location of the user profile store; nothing is created on disk"""
    if os.name == "nt":  # Windows
        config_dir = Path(os.environ.get("APPDATA", "")) / "CaptionFixer"
    else:  # Unix-like
        config_dir = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")) / "caption-fixer"

    return config_dir / "profiles.json"

def get_profile(name: str) -> Optional[Dict[str, Any]]:
    """Get a caption quality profile by name

    Args:
        name: Profile name

    Returns:
        Profile settings dict or None if not found
    """
    # Try user profiles first
    user_profiles = load_user_profiles()
    if name in user_profiles:
        return user_profiles[name]

    if name in DEFAULT_PROFILES:
        return DEFAULT_PROFILES[name]

    console.print(f"[yellow]Profile '{name}' not found. Using default settings.[/yellow]")
    return None

def list_profiles() -> Dict[str, Dict[str, Any]]:
    """List all available profiles (defaults and user-defined)

    Returns:
        Dict of profile name -> settings
    """
    profiles = DEFAULT_PROFILES.copy()

    # User profiles override defaults with the same name
    profiles.update(load_user_profiles())

    return profiles

def load_user_profiles() -> Dict[str, Dict[str, Any]]:
    """Load user-defined profiles from config file

    Returns:
        Dict of user profiles
    """
    profiles_path = get_user_profiles_path()

    if not profiles_path.exists():
        return {}

    try:
        return json.loads(profiles_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"[yellow]Error loading user profiles: {e}[/yellow]")
        return {}

def _store_user_profiles(profiles: Dict[str, Dict[str, Any]], action: str) -> bool:
    profiles_path = get_user_profiles_path()
    try:
        profiles_path.parent.mkdir(parents=True, exist_ok=True)
        profiles_path.write_text(json.dumps(profiles, indent=2), encoding="utf-8")
    except OSError as e:
        console.print(f"[red]Error {action} profile: {e}[/red]")
        return False
    return True

def settings_from_profile(profile: Optional[Dict[str, Any]], **overrides: Any) -> FixSettings:
    """Build FixSettings from a profile dict plus explicit overrides

    Args:
        profile: Profile settings, as returned by get_profile (may be None)
        **overrides: Field values that win over the profile; None is skipped

    Returns:
        Validated settings

    Raises:
        ProfileError: If the profile holds unknown keys or invalid values
    """
    known = {f.name for f in fields(FixSettings)}
    values = {k: v for k, v in (profile or {}).items() if k != "description"}

    unknown = set(values) - known
    if unknown:
        raise ProfileError(f"Unknown profile settings: {', '.join(sorted(unknown))}")

    values.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return FixSettings(**values)
    except TypeError as e:
        raise ProfileError(str(e)) from e

def save_user_profile(
    name: str,
    settings: Dict[str, Any],
    overwrite: bool = False
) -> bool:
    """Save a user-defined profile

    Args:
        name: Profile name
        settings: Profile settings
        overwrite: Whether to overwrite existing profile

    Returns:
        True if saved successfully, False otherwise
    """
    # Reject settings that would not load back
    settings_from_profile(settings)

    profiles = load_user_profiles()

    if name in profiles and not overwrite:
        console.print(f"[yellow]Profile '{name}' already exists. Use overwrite=True to replace.[/yellow]")
        return False

    profiles[name] = settings
    return _store_user_profiles(profiles, "saving")

def delete_user_profile(name: str) -> bool:
    """Delete a user-defined profile

    Args:
        name: Profile name

    Returns:
        True if deleted successfully, False otherwise
    """
    # Cannot delete default profiles
    if name in DEFAULT_PROFILES:
        console.print(f"[yellow]Cannot delete default profile '{name}'.[/yellow]")
        return False

    profiles = load_user_profiles()

    if name not in profiles:
        console.print(f"[yellow]Profile '{name}' not found.[/yellow]")
        return False

    del profiles[name]
    return _store_user_profiles(profiles, "deleting")
