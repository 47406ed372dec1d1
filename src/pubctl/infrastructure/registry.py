"""Registry — the set of documents owned by one publish cycle.

INVARIANT: identifiers are unique. A collision is a build-time error
(:class:`~pubctl.domain.errors.DuplicateIdentifierError`), never resolved by
overwriting.

A registry is created empty at the start of a cycle, filled during the
registering phase, then frozen. The next cycle builds a new registry; an
existing one is never reset or reused.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, ValuesView
from typing import TYPE_CHECKING

from pubctl.domain.errors import DuplicateIdentifierError, NotFoundError, RegistryFrozenError

if TYPE_CHECKING:
    from pubctl.domain.document import Document

logger = logging.getLogger(__name__)


class Registry:
    """Insertion-ordered documents keyed by identifier."""

    def __init__(self) -> None:
        self._documents: dict[str, Document] = {}
        self._frozen = False

    def add(self, document: Document) -> None:
        """Insert a validated document.

        Raises:
            DuplicateIdentifierError: If the identifier is already registered.
            RegistryFrozenError: If the registry has been frozen.
        """
        if self._frozen:
            msg = f"Registry is frozen; cannot add {document.identifier!r}"
            raise RegistryFrozenError(msg, path=document.source_path)
        existing = self._documents.get(document.identifier)
        if existing is not None:
            raise DuplicateIdentifierError(
                document.identifier,
                path=document.source_path,
                existing_path=existing.source_path,
            )
        self._documents[document.identifier] = document
        logger.debug("Registered document %s", document.identifier)

    def get(self, identifier: str) -> Document:
        """Return the document registered under *identifier*.

        Raises:
            NotFoundError: If nothing is registered under *identifier*.
        """
        try:
            return self._documents[identifier]
        except KeyError:
            raise NotFoundError(identifier) from None

    def all(self) -> ValuesView[Document]:
        """Lazy, finite, restartable view of documents in insertion order."""
        return self._documents.values()

    def identifiers(self) -> list[str]:
        return list(self._documents)

    def freeze(self) -> None:
        """Stop accepting documents for the rest of the cycle."""
        self._frozen = True

    @property
    def is_frozen(self) -> bool:
        return self._frozen

    def __contains__(self, identifier: object) -> bool:
        return identifier in self._documents

    def __len__(self) -> int:
        return len(self._documents)

    def __iter__(self) -> Iterator[Document]:
        return iter(self._documents.values())
