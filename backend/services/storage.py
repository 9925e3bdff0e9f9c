"""
Key/value document storage for the mock backend.

Values are serialized JSON strings, one per collection key. MemoryStorage
lives for the life of the process; FileStorage keeps one <key>.json file per
collection in a directory so data survives restarts.
"""
import os
import re


class Storage:
    """Minimal string store, modeled on the browser's localStorage"""

    def get_item(self, key):
        raise NotImplementedError

    def set_item(self, key, value):
        raise NotImplementedError

    def remove_item(self, key):
        raise NotImplementedError

    def keys(self):
        raise NotImplementedError

    def clear(self):
        for key in list(self.keys()):
            self.remove_item(key)


class MemoryStorage(Storage):

    def __init__(self):
        self._items = {}

    def get_item(self, key):
        return self._items.get(key)

    def set_item(self, key, value):
        self._items[key] = str(value)

    def remove_item(self, key):
        self._items.pop(key, None)

    def keys(self):
        return list(self._items.keys())


class FileStorage(Storage):

    KEY_PATTERN = re.compile(r'^[A-Za-z0-9_.-]+$')

    def __init__(self, directory):
        self.directory = directory
        os.makedirs(directory, exist_ok=True)

    def _path(self, key):
        if not self.KEY_PATTERN.match(key):
            raise ValueError(f'Invalid storage key: {key!r}')
        return os.path.join(self.directory, f'{key}.json')

    def get_item(self, key):
        path = self._path(key)
        if not os.path.exists(path):
            return None
        with open(path, 'r', encoding='utf-8') as fh:
            return fh.read()

    def set_item(self, key, value):
        path = self._path(key)
        tmp_path = path + '.tmp'
        with open(tmp_path, 'w', encoding='utf-8') as fh:
            fh.write(str(value))
        # Whole-document replace; a reader never sees a half-written file
        os.replace(tmp_path, path)

    def remove_item(self, key):
        path = self._path(key)
        if os.path.exists(path):
            os.remove(path)

    def keys(self):
        return sorted(
            name[:-len('.json')]
            for name in os.listdir(self.directory)
            if name.endswith('.json')
        )
