"""
S3 사진 스토리지 서비스
"""
import boto3
from botocore.exceptions import BotoCoreError, ClientError
from fastapi import HTTPException, status
from app.core.config import settings
import logging
import mimetypes
import os
import time
from typing import Optional
from functools import lru_cache
from urllib.parse import quote, unquote, urlparse

logger = logging.getLogger(__name__)

# 파일 앞부분 바이트로 판별하는 이미지 시그니처
_IMAGE_SIGNATURES = (
    (b"\xff\xd8\xff", "image/jpeg"),
    (b"\x89PNG\r\n\x1a\n", "image/png"),
    (b"GIF87a", "image/gif"),
    (b"GIF89a", "image/gif"),
)


@lru_cache()
def get_s3_client():
    """S3 클라이언트 싱글톤 (LRU Cache 사용)"""
    s3_config = {
        'service_name': 's3',
        'region_name': settings.S3_REGION,
    }

    # AWS 자격 증명이 있으면 사용
    if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
        s3_config['aws_access_key_id'] = settings.AWS_ACCESS_KEY_ID
        s3_config['aws_secret_access_key'] = settings.AWS_SECRET_ACCESS_KEY

    # MinIO 등 로컬 S3 호환 서비스 사용 시
    if settings.S3_ENDPOINT_URL:
        s3_config['endpoint_url'] = settings.S3_ENDPOINT_URL

    return boto3.client(**s3_config)


def generate_photo_key(original_filename: str, prefix: str = "") -> str:
    """
    원본 파일명으로 S3 키 생성

    확장자를 떼어낸 파일명 뒤에 밀리초 타임스탬프를 붙이고 확장자를 다시 붙인다.
    (예: 'first-step.jpg' -> 'first-step-1718000000000.jpg')
    같은 밀리초 안의 동일 파일명 충돌은 방지하지 않는다.
    """
    filename = os.path.basename(original_filename or "") or "photo"
    stem, extension = os.path.splitext(filename)
    return f"{prefix}{stem or 'photo'}-{int(time.time() * 1000)}{extension}"


def detect_content_type(content: bytes, filename: str) -> str:
    """
    Content-Type 판별 (클라이언트가 보낸 값은 사용하지 않음)

    파일 시그니처 → 확장자 순서로 판단하고, 둘 다 실패하면 application/octet-stream
    """
    for signature, content_type in _IMAGE_SIGNATURES:
        if content.startswith(signature):
            return content_type
    if content[:4] == b"RIFF" and content[8:12] == b"WEBP":
        return "image/webp"
    if content[4:8] == b"ftyp" and content[8:12] in (b"heic", b"heix", b"mif1", b"msf1"):
        return "image/heic"

    guessed, _ = mimetypes.guess_type(filename or "")
    return guessed or "application/octet-stream"


class PhotoStorage:
    """성장 기록 사진 업로드/삭제/공개 URL 발급"""

    def __init__(
        self,
        client=None,
        bucket_name: Optional[str] = None,
        region: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        public_base_url: Optional[str] = None,
        key_prefix: Optional[str] = None,
        max_size: Optional[int] = None,
    ):
        self._client = client
        self.bucket_name = bucket_name or settings.S3_BUCKET_NAME
        self.region = region or settings.S3_REGION
        self.endpoint_url = endpoint_url if endpoint_url is not None else settings.S3_ENDPOINT_URL
        self.public_base_url = public_base_url if public_base_url is not None else settings.S3_PUBLIC_BASE_URL
        self.key_prefix = key_prefix if key_prefix is not None else settings.S3_PHOTO_PREFIX
        self.max_size = max_size or settings.MAX_PHOTO_SIZE

    @property
    def client(self):
        if self._client is None:
            self._client = get_s3_client()
        return self._client

    def build_public_url(self, key: str) -> str:
        """S3 키로 공개 URL 생성"""
        quoted_key = quote(key)
        if self.public_base_url:
            return f"{self.public_base_url.rstrip('/')}/{quoted_key}"
        if self.endpoint_url:
            # MinIO 등은 path-style URL
            return f"{self.endpoint_url.rstrip('/')}/{self.bucket_name}/{quoted_key}"
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{quoted_key}"

    def parse_key(self, url: str) -> str:
        """
        공개 URL의 경로에서 S3 키 추출

        Args:
            url: 업로드 시 발급한 URL (virtual-hosted / path-style / 공개 베이스 URL)

        Returns:
            S3 객체 키
        """
        if self.public_base_url and url.startswith(self.public_base_url.rstrip('/') + '/'):
            path = url[len(self.public_base_url.rstrip('/')) + 1:]
        else:
            path = urlparse(url).path.lstrip('/')
            # path-style URL이면 버킷 이름 제거
            if path.startswith(f"{self.bucket_name}/"):
                path = path[len(self.bucket_name) + 1:]

        key = unquote(path.split('?', 1)[0])
        if not key:
            raise ValueError(f"URL에서 S3 키를 찾을 수 없습니다: {url}")
        return key

    def upload(self, content: bytes, original_filename: str) -> str:
        """
        S3에 사진 업로드

        Args:
            content: 파일 내용 (bytes)
            original_filename: 클라이언트가 보낸 원본 파일명

        Returns:
            업로드된 사진의 공개 URL
        """
        if len(content) > self.max_size:
            raise HTTPException(
                status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
                detail=f"Photo exceeds the maximum size of {self.max_size // (1024 * 1024)}MB",
            )

        key = generate_photo_key(original_filename, self.key_prefix)
        content_type = detect_content_type(content, original_filename)

        try:
            self.client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=content,
                ContentType=content_type,
            )
        except (ClientError, BotoCoreError) as e:
            logger.error(f"버킷 이름: {self.bucket_name}")
            logger.error(f"S3 업로드 실패: {str(e)}")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Internal server error while uploading photo",
            )

        url = self.build_public_url(key)
        logger.info(f"S3 업로드 완료: {url} ({content_type}, {len(content)} bytes)")
        return url

    def delete(self, url: str) -> None:
        """
        S3에서 사진 삭제 (best-effort)

        객체가 이미 없거나 삭제에 실패해도 예외를 올리지 않는다.
        레코드의 photo NULL 처리가 기준이다.
        """
        if not url:
            logger.warning("사진 URL이 비어있어 삭제를 건너뜁니다.")
            return

        try:
            key = self.parse_key(url)
            self.client.delete_object(Bucket=self.bucket_name, Key=key)
            logger.info(f"S3 파일 삭제 완료: {url}")
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code')
            if error_code in ('NoSuchKey', '404'):
                logger.warning(f"S3 파일이 이미 존재하지 않습니다: {url}")
            else:
                logger.error(f"S3 파일 삭제 실패: {str(e)}, URL: {url}")
        except (BotoCoreError, ValueError) as e:
            logger.error(f"S3 파일 삭제 중 예외 발생: {str(e)}, URL: {url}")


@lru_cache()
def get_photo_storage() -> PhotoStorage:
    """PhotoStorage 싱글톤 의존성"""
    return PhotoStorage()
