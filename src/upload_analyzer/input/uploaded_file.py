import os
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UploadedFile:
    """
    Opaque upload handle: a name, optional declared media type and the bytes.
    The analyzer does not care how the bytes arrived.
    """
    name: str
    content: bytes
    content_type: Optional[str] = None

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        _, ext = os.path.splitext(self.name or "")
        return ext.lower().lstrip(".")

    def read(self) -> bytes:
        return self.content

    @classmethod
    def from_path(cls, file_path: str, content_type: Optional[str] = None) -> "UploadedFile":
        with open(file_path, "rb") as f:
            content = f.read()
        return cls(
            name=os.path.basename(file_path),
            content=content,
            content_type=content_type,
        )
