"""
Storage module for ClipTrail
Keeps the on-disk clipboard history and its in-memory index
"""
import os
import shutil
import sys
from datetime import datetime
from pathlib import Path

from identifiers import IdentifierAllocator, identifier_to_value
from preview import format_preview


def _to_timestamp(value):
    if isinstance(value, datetime):
        return value.timestamp()
    return float(value)


class HistoryEntry:
    """Represents a single clipboard history entry backed by one file"""

    def __init__(self, path, cipher=None):
        self.path = Path(path)
        self.cipher = cipher

    @property
    def name(self):
        return self.path.name

    def __eq__(self, other):
        if not isinstance(other, HistoryEntry):
            return NotImplemented
        return self.path == other.path

    def __hash__(self):
        return hash(self.path)

    def __repr__(self):
        return f"HistoryEntry({str(self.path)!r})"

    def exists(self):
        """Check whether the backing file is present"""
        return self.path.is_file()

    def last_modified(self):
        """Get the modification time of the backing file (raises OSError if gone)"""
        return os.stat(self.path).st_mtime

    def get_display_time(self):
        """Get formatted modification time for display"""
        dt = datetime.fromtimestamp(self.last_modified())
        return dt.strftime('%Y-%m-%d %H:%M:%S')

    def read(self):
        """
        Read the entry content

        Returns:
            Content as bytes

        Raises:
            OSError: If the file cannot be read
            ValueError: If the entry is sealed and cannot be decrypted
        """
        with open(self.path, 'rb') as f:
            data = f.read()

        if self.cipher:
            return self.cipher.decrypt(data)
        return data

    def write(self, *data):
        """
        Replace the entry content

        Args:
            data: Any number of str or bytes parts, written back to back

        Returns:
            True on success, False if the file could not be written
        """
        payload = b''.join(
            part.encode('utf-8') if isinstance(part, str) else bytes(part)
            for part in data
        )
        if self.cipher:
            payload = self.cipher.encrypt(payload)

        try:
            with open(self.path, 'wb') as f:
                f.write(payload)
            return True
        except OSError as e:
            print(f"Error writing history entry '{self.path}': {e}", file=sys.stderr)
            return False

    def clear(self):
        """Truncate the entry to zero length"""
        try:
            with open(self.path, 'wb'):
                pass
        except OSError as e:
            print(f"Error clearing history entry '{self.path}': {e}", file=sys.stderr)

    def preview(self, max_width=None, max_lines=None, ellipsis=True):
        """Get a bounded preview of the entry content"""
        return format_preview(self.read(), max_width, max_lines, ellipsis)


class HistoryCache:
    """Manages the clipboard history directory"""

    def __init__(self, path, init_cache=True, follow_symlinks=False, encryption=None):
        self._path = Path(path)
        self.follow_symlinks = follow_symlinks
        self.encryption = encryption

        if init_cache:
            self._path.mkdir(parents=True, exist_ok=True)
            self._entries = self._scan_all()
        else:
            self._entries = []

        self._allocator = IdentifierAllocator.from_names(e.name for e in self._entries)

    @property
    def path(self):
        """Location of the history directory"""
        return self._path

    @staticmethod
    def _mtime(entry):
        try:
            return entry.last_modified()
        except OSError:
            return float('-inf')

    @classmethod
    def _sort_key(cls, entry):
        # equal mtimes: the higher identifier is the newer entry
        value = identifier_to_value(entry.name)
        return cls._mtime(entry), -1 if value is None else value

    def _sort(self):
        self._entries.sort(key=self._sort_key, reverse=True)

    def _accept(self, path):
        if path.is_symlink() and not self.follow_symlinks:
            return False
        return path.is_file()

    def _scan_all(self):
        """Recursively collect every regular file below the directory"""
        entries = []
        for root, dirs, files in os.walk(self._path, followlinks=self.follow_symlinks):
            for filename in files:
                filepath = Path(root) / filename
                if self._accept(filepath):
                    entries.append(HistoryEntry(filepath, self.encryption))

        entries.sort(key=self._sort_key, reverse=True)
        return entries

    def refresh(self):
        """Pick up new files from the top-level directory and re-sort"""
        if self._path.is_dir():
            known = {entry.path for entry in self._entries}
            for filepath in self._path.iterdir():
                if filepath not in known and self._accept(filepath):
                    self._entries.append(HistoryEntry(filepath, self.encryption))
        self._sort()

    def push(self, *data):
        """
        Store a new history entry

        Args:
            data: Content parts (str or bytes)

        Returns:
            True if the entry was written, False otherwise
        """
        self._path.mkdir(parents=True, exist_ok=True)

        entry = HistoryEntry(self._path / self._allocator.next(), self.encryption)
        if entry.write(*data):
            self._entries.insert(0, entry)
            return True
        return False

    def get_by_index(self, age_index):
        """Get entry by age (0 is the most recent)"""
        if isinstance(age_index, bool) or not isinstance(age_index, int):
            return None
        if 0 <= age_index < len(self._entries):
            return self._entries[age_index]
        return None

    def get_by_name(self, name):
        """Get the first entry with the given filename"""
        for entry in self._entries:
            if entry.name == name:
                return entry
        return None

    def get_by_time(self, timestamp):
        """Get the first entry modified at exactly the given time"""
        timestamp = _to_timestamp(timestamp)
        for entry in self._entries:
            if self._mtime(entry) == timestamp:
                return entry
        return None

    def get(self, key):
        """Get an entry by age index (int), filename (str) or timestamp (float/datetime)"""
        if isinstance(key, bool):
            return None
        if isinstance(key, int):
            return self.get_by_index(key)
        if isinstance(key, str):
            return self.get_by_name(key)
        if isinstance(key, (float, datetime)):
            return self.get_by_time(key)
        return None

    def latest(self):
        """Get the content of the most recent entry"""
        if self._entries:
            return self._entries[0].read()
        return None

    def size(self):
        return len(self._entries)

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))

    def __reversed__(self):
        return reversed(list(self._entries))

    def search(self, query):
        """Search history for entries containing query"""
        results = []
        query_lower = query.lower()

        for i, entry in enumerate(self._entries):
            try:
                content = entry.read().decode('utf-8', errors='replace')
            except (OSError, ValueError) as e:
                print(f"Error reading history entry '{entry.path}': {e}", file=sys.stderr)
                continue
            if query_lower in content.lower():
                results.append((i, entry))

        return results

    def delete_all(self):
        """
        Delete every history file, including the directory itself

        Returns:
            Number of filesystem objects removed

        Raises:
            OSError: If the directory could not be removed
        """
        self._entries.clear()
        if not self._path.exists():
            return 0

        count = 1
        for _, dirs, files in os.walk(self._path):
            count += len(dirs) + len(files)

        shutil.rmtree(self._path)
        return count

    def delete_older_than(self, threshold):
        """
        Delete every entry modified before threshold

        Args:
            threshold: Epoch seconds or datetime

        Returns:
            Number of entries removed
        """
        threshold = _to_timestamp(threshold)
        self.refresh()

        for i, entry in enumerate(self._entries):
            if self._mtime(entry) < threshold:
                # sorted newest first, so everything from here on is older
                removed = set()
                try:
                    for old in self._entries[i:]:
                        try:
                            os.remove(old.path)
                        except FileNotFoundError:
                            pass
                        removed.add(old)
                finally:
                    self._entries = [e for e in self._entries if e not in removed]
                return len(removed)

        return 0
