"""
Certificate storage for the quiz service.
Generated PDFs live in a single directory keyed by the sanitized user name.
"""
import os
import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from generate_certificate import generate_certificate, format_percent
from utils import certificate_filename

CERTIFICATE_SUFFIX = '_certificate.pdf'


@dataclass(frozen=True)
class Certificate:
    name: str
    percent: str
    path: Path

    @property
    def filename(self) -> str:
        return self.path.name


class CertificateStore:
    """Directory of rendered certificates, one file per name."""

    def __init__(self, directory, template_path: Optional[Path] = None):
        self.directory = Path(directory)
        self.template_path = Path(template_path) if template_path else None

    def ensure(self) -> Path:
        """Create the store directory if absent. Safe to call repeatedly."""
        self.directory.mkdir(parents=True, exist_ok=True)
        return self.directory

    def path_for(self, name: str) -> Path:
        return self.directory / certificate_filename(name, CERTIFICATE_SUFFIX)

    def issue(self, name: str, percent) -> Certificate:
        """Render a certificate for `name` and write it, replacing any previous file."""
        path = self.path_for(name)
        pdf_bytes = generate_certificate(name, percent, template_path=self.template_path)
        self._write_atomic(path, pdf_bytes)
        logging.info('[CERTIFICATE] Wrote %s (%d bytes)', path.name, len(pdf_bytes))
        return Certificate(name=name, percent=format_percent(percent), path=path)

    def _write_atomic(self, path: Path, data: bytes) -> None:
        # Readers see either the old file or the new one, never a partial write
        self.ensure()
        fd, tmp_name = tempfile.mkstemp(dir=str(self.directory), prefix='.', suffix='.part')
        try:
            with os.fdopen(fd, 'wb') as fh:
                fh.write(data)
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except FileNotFoundError:
                pass
            raise
