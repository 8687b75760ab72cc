"""Global configuration for form binding.

Applications call ``set_form_config()`` once at start-up; library code reads
the active instance through ``get_form_config()``.
"""

from typing import Optional
from dataclasses import dataclass


@dataclass
class FormBindConfig:
    """Process-wide form binding behaviour.

    Attributes:
        default_update_on: Update strategy ("change", "blur" or "submit") for
            root controls that set none
        auto_drain_microtasks: Let the microtask queue schedule its own drain
            on the running asyncio loop or the Qt event loop
        status_property_prefix: Prefix of the dynamic properties written by
            ControlStatusBinder (``form_valid``, ``form_touched``...)
        email_pattern: Regex replacing the built-in email pattern
    """

    default_update_on: str = "change"
    auto_drain_microtasks: bool = True
    status_property_prefix: str = "form_"
    email_pattern: Optional[str] = None


# Global config instance (set by application)
_form_config: Optional[FormBindConfig] = None


def set_form_config(config: Optional[FormBindConfig]) -> None:
    """Set the global form binding configuration.

    Args:
        config: FormBindConfig instance, or None to restore defaults
    """
    global _form_config
    _form_config = config


def get_form_config() -> FormBindConfig:
    """Get the current form binding configuration.

    Returns:
        Current FormBindConfig or default if not set
    """
    if _form_config is None:
        return FormBindConfig()
    return _form_config
