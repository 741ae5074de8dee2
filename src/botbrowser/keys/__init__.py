"""Key code resolution for botbrowser.

Maps the numeric key codes sent by controllers onto browser key names.
"""

from botbrowser.keys.codes import MAX_KEY_CODE, OEM_KEYS, SPECIAL_KEYS, resolve_key

__all__ = ["MAX_KEY_CODE", "OEM_KEYS", "SPECIAL_KEYS", "resolve_key"]
