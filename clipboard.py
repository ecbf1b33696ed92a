"""
Clipboard access for ClipTrail
Wraps the system clipboard and records what passes through it
"""
import sys

import pyperclip

from encryption import EncryptionManager
from storage import HistoryCache


class Clipboard:
    """System clipboard with an attached history cache"""

    def __init__(self, history_path, use_history=True, init_history=True,
                 follow_symlinks=False, encryption=None):
        self.use_history = use_history
        self.history = HistoryCache(
            history_path,
            init_cache=use_history and init_history,
            follow_symlinks=follow_symlinks,
            encryption=encryption,
        )

    def _remember(self, data):
        if self.use_history:
            return self.history.push(data)
        return False

    def set(self, *data):
        """
        Replace the clipboard contents

        Args:
            data: Any number of str or bytes parts, joined in order

        Returns:
            True if the content reached the native clipboard or the history
        """
        payload = b''.join(
            bytes(part) if isinstance(part, (bytes, bytearray)) else str(part).encode('utf-8')
            for part in data
        )
        text = payload.decode('utf-8', errors='replace')

        copied = True
        try:
            pyperclip.copy(text)
        except pyperclip.PyperclipException as e:
            copied = False
            if not self.use_history:
                print(f"Error setting clipboard: {e}", file=sys.stderr)

        stored = self._remember(payload)
        return copied or stored

    def get(self):
        """Get the clipboard text, falling back to the newest history entry"""
        try:
            return pyperclip.paste() or ''
        except pyperclip.PyperclipException:
            if not self.use_history:
                return ''
            latest = self.history.latest()
            if latest is None:
                return ''
            return latest.decode('utf-8', errors='replace')

    def clear(self):
        """Empty the clipboard"""
        try:
            pyperclip.copy('')
        except pyperclip.PyperclipException:
            self._remember('')

    def cache(self):
        """Store the current clipboard contents in the history"""
        if not self.use_history:
            return False
        return self.history.push(self.get())

    def recall(self, index, cache_first=False):
        """
        Restore a history entry to the clipboard

        Args:
            index: Age index of the entry (0 is the most recent)
            cache_first: Store the current clipboard before overwriting it

        Returns:
            True if the entry existed and was restored
        """
        entry = self.history.get(index)
        if entry is None:
            return False

        content = entry.read()
        if cache_first:
            self.cache()
        return self.set(content)

    @classmethod
    def from_config(cls, config):
        """Create a clipboard and its history from a Config"""
        encryption = None
        if config.get('encryption_enabled'):
            encryption = EncryptionManager(salt_path=config.get_salt_path())

        return cls(
            config.get_path('history_path'),
            use_history=config.get('enable_history', True),
            follow_symlinks=config.get('follow_symlinks', False),
            encryption=encryption,
        )
