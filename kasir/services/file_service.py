"""
결제 증빙 파일 저장 서비스
"""
import os
import re
import secrets
import time
from pathlib import Path
from typing import Optional

from fastapi import UploadFile
import structlog

from kasir.core.exceptions import UploadError

logger = structlog.get_logger()

CHUNK_SIZE = 64 * 1024
_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]+")


def _safe_filename(filename: Optional[str]) -> str:
    name = _UNSAFE_CHARS.sub("_", Path(filename or "").name).strip("._")
    return name or "upload"


class FileStorage:
    """업로드 파일을 디스크에 저장하고 공개 경로(참조)를 돌려준다"""

    def __init__(self, upload_dir: str, url_prefix: str = "/uploads"):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = "/" + url_prefix.strip("/")

    def ensure_dir(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    def generate_name(self, original_name: Optional[str]) -> str:
        """타임스탬프 + 난수 + 원본 파일명으로 고유한 이름 생성"""
        return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}-{_safe_filename(original_name)}"

    def path_for(self, ref: str) -> Path:
        """참조 경로를 실제 파일 경로로 변환"""
        return self.upload_dir / Path(ref).name

    def exists(self, ref: str) -> bool:
        return self.path_for(ref).is_file()

    async def save(self, upload: UploadFile) -> str:
        """업로드 파일 저장 후 참조 경로 반환"""
        self.ensure_dir()
        filename = self.generate_name(upload.filename)
        target = self.upload_dir / filename

        created = False
        try:
            # "x" 모드라서 같은 이름이 이미 있으면 덮어쓰지 않고 실패한다
            with open(target, "xb") as out:
                created = True
                while True:
                    chunk = await upload.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    out.write(chunk)
        except OSError as e:
            logger.error("Failed to write uploaded file", filename=filename, error=str(e))
            if created:
                self._remove(target)
            raise UploadError("Failed to store uploaded file", cause=str(e)) from e

        ref = f"{self.url_prefix}/{filename}"
        logger.info("Uploaded file stored", file_ref=ref, size=target.stat().st_size)
        return ref

    def delete(self, ref: str) -> bool:
        """고아 파일 삭제 (실패해도 예외를 올리지 않음)"""
        return self._remove(self.path_for(ref))

    def _remove(self, path: Path) -> bool:
        try:
            os.remove(path)
            logger.info("Removed orphaned upload", path=str(path))
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.error("Failed to delete uploaded file", path=str(path), error=str(e))
            return False
