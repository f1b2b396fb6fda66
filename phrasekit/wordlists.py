#!/usr/bin/env python3
"""
Word Lists
==========
Loads candidate words from plain text files (one word per line).

The bundled lists are the BIP-39 word lists shipped with the ``mnemonic``
package; a source given as a bare file name (``english.txt``) is looked up
there. Any other path is read as-is.

Usage:
    from phrasekit.wordlists import FilesystemWordlist

    wordlist = FilesystemWordlist()
    wordlist.add_wordlist('/usr/share/dict/words', 'system')
    words = wordlist.get_words_as_list()
"""

import logging
import os
import threading
from pathlib import Path
from typing import Dict, List, Optional, Protocol, Tuple, Union, runtime_checkable

import mnemonic

from .errors import InsufficientDictionaryError

logger = logging.getLogger(__name__)

BUNDLED_WORDLIST_DIR = Path(mnemonic.__file__).resolve().parent / 'wordlist'
DEFAULT_WORDLIST = 'english.txt'
DEFAULT_IDENTIFIER = 'default'


@runtime_checkable
class WordlistProvider(Protocol):
    """Supplies a de-duplicated, ordered list of candidate words."""

    def get_words_as_list(self) -> List[str]:
        ...

    def add_wordlist(self, path: Union[str, Path], identifier: str):
        ...

    def remove_wordlist(self, identifier: str):
        ...


def available_languages() -> List[str]:
    """Names of the bundled word lists (e.g. 'english', 'spanish')."""
    return sorted(mnemonic.Mnemonic.list_languages())


def resolve_wordlist_path(path: Union[str, Path]) -> Path:
    """Resolve a bare file name to the bundled word-list directory."""
    path = str(path)
    if os.sep not in path and (os.altsep is None or os.altsep not in path):
        return BUNDLED_WORDLIST_DIR / path
    return Path(os.path.expanduser(path))


class FilesystemWordlist:
    """
    Word list backed by one or more files.

    Words from all sources are merged in the order the sources were added,
    blank lines are skipped and duplicates collapse to their first
    occurrence. The merged list is cached on the instance until a source
    is added or removed.
    """

    def __init__(self,
                 wordlist: Optional[Tuple[Union[str, Path], str]] = None,
                 encoding: str = 'utf-8'):
        """
        Args:
            wordlist: Optional (path, identifier) pair. Defaults to the
                bundled English list under the identifier 'default'.
            encoding: Text encoding of the word-list files
        """
        self.encoding = encoding
        self._wordlists: Dict[str, Path] = {}
        self._words: Optional[List[str]] = None
        self._lock = threading.Lock()

        if wordlist is None:
            path, identifier = DEFAULT_WORDLIST, DEFAULT_IDENTIFIER
        else:
            path, identifier = wordlist
        self.add_wordlist(path, identifier)

    @property
    def sources(self) -> Dict[str, Path]:
        """Registered sources, identifier -> path."""
        return dict(self._wordlists)

    @property
    def is_cached(self) -> bool:
        return self._words is not None

    def get_words_as_list(self) -> List[str]:
        """
        Return all unique words from all readable sources.

        Raises:
            InsufficientDictionaryError: If no words could be read
        """
        with self._lock:
            if self._words is None:
                words = self._load()
                if not words:
                    raise InsufficientDictionaryError("No wordlists available")
                self._words = words
            return list(self._words)

    def add_wordlist(self, path: Union[str, Path], identifier: str) -> 'FilesystemWordlist':
        """Register ``path`` under ``identifier``, replacing any previous path."""
        with self._lock:
            self._wordlists[identifier] = resolve_wordlist_path(path)
            self._words = None
        return self

    def remove_wordlist(self, identifier: str) -> 'FilesystemWordlist':
        with self._lock:
            self._wordlists.pop(identifier, None)
            self._words = None
        return self

    def invalidate(self) -> None:
        """Drop the cached words so the files are read again."""
        with self._lock:
            self._words = None

    def _load(self) -> List[str]:
        merged: Dict[str, None] = {}
        for identifier, path in self._wordlists.items():
            lines = self._read_data(identifier, path)
            for line in lines:
                if line:
                    merged.setdefault(line, None)
        logger.debug(f"Loaded {len(merged)} unique words from {len(self._wordlists)} source(s)")
        return list(merged)

    def _read_data(self, identifier: str, path: Path) -> List[str]:
        if not path.is_file():
            logger.warning(f"Wordlist '{identifier}' not found: {path}")
            return []
        try:
            text = path.read_text(encoding=self.encoding)
            # one word per line; universal newlines already map \r\n and \r to \n
            return text.split('\n')
        except (OSError, UnicodeDecodeError) as e:
            logger.warning(f"Wordlist '{identifier}' could not be read: {e}")
            return []


__all__ = [
    'WordlistProvider',
    'FilesystemWordlist',
    'available_languages',
    'resolve_wordlist_path',
    'BUNDLED_WORDLIST_DIR',
    'DEFAULT_WORDLIST',
]
