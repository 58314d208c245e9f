"""Abstract base class for export formats."""

from abc import ABC, abstractmethod

from tgformat.formatting.ir import Container


class Exporter(ABC):
    """Abstract base class for document exporters.

    Each exporter turns a read-only document tree into a string. Exporters
    never mutate the tree they are given.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Short format name used on the command line (e.g. 'html')."""
        ...

    @property
    @abstractmethod
    def action(self) -> str:
        """Name of the UI action that triggers this export, for status messages."""
        ...

    @property
    @abstractmethod
    def extension(self) -> str:
        """File extension for exported files (e.g. '.html')."""
        ...

    @abstractmethod
    def export(self, root: Container) -> str:
        """Serialize the children of root.

        Args:
            root: Document (or any container) to serialize

        Returns:
            The exported text
        """
        ...
