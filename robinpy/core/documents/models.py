"""Account document models."""
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union


@dataclass(frozen=True)
class DocumentDescriptor:
    """
    A downloadable account document (statement, tax form, ...).

    Attributes:
        id: Document id
        type: Category, used as the sub-directory name
        download_url: Absolute URL of the PDF
    """
    id: str
    type: str
    download_url: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'DocumentDescriptor':
        """
        Build from a /documents/ entry.

        Raises:
            KeyError: If id, type or download_url is missing
        """
        return cls(
            id=str(data['id']),
            type=str(data['type']),
            download_url=data['download_url'],
        )

    def target_path(self, folder: Union[str, Path]) -> Path:
        """Where the document is stored: ``<folder>/<type>/<id>.pdf``."""
        return Path(folder) / self.type / f"{self.id}.pdf"
