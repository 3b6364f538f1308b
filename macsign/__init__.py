"""macsign - code-sign macOS apps, packages and disk images from the keychain.

Lists signing identities from the keychain and drives ``codesign`` against a
chosen bundle, installer package or disk image.
"""

__version__ = "0.1.0"
__author__ = "macsign Contributors"

from macsign.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
