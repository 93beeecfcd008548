"""
Upload Handling

Multipart uploads are read into UploadedFile values at the router edge so
services never touch FastAPI's UploadFile.
"""

from dataclasses import dataclass

import pydantic
from fastapi import UploadFile

from hr_portal.core.errors import ValidationError

PDF_CONTENT_TYPE = "application/pdf"


@dataclass
class UploadedFile:
    filename: str
    content_type: str | None
    data: bytes

    @property
    def is_pdf(self) -> bool:
        if self.content_type == PDF_CONTENT_TYPE:
            return True
        # Some clients send PDFs as octet-stream; fall back to the extension
        return self.content_type in (None, "", "application/octet-stream") and (
            self.filename.lower().endswith(".pdf")
        )

    @property
    def extension(self) -> str:
        if "." not in self.filename:
            return "pdf"
        return self.filename.rsplit(".", 1)[-1].lower() or "pdf"


async def read_upload(file: UploadFile | None) -> UploadedFile | None:
    """Read an optional multipart file. Empty or missing parts become None."""
    if file is None or not file.filename:
        return None
    data = await file.read()
    await file.close()
    return UploadedFile(filename=file.filename, content_type=file.content_type, data=data)


def validate_form(schema: type[pydantic.BaseModel], **fields):
    """Build ``schema`` from collected multipart fields, reporting failures as 400s."""
    try:
        return schema(**fields)
    except pydantic.ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise ValidationError(f"{location}: {first.get('msg')}") from e
