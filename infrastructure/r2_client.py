import hashlib
import hmac
import datetime
import requests
from typing import Optional
from urllib.parse import quote, urlsplit
import logging

from core.config import R2_ENDPOINT, R2_BUCKET_NAME, R2_REGION, R2_SECRET_ACCESS_KEY, R2_ACCESS_KEY_ID, R2_PUBLIC_URL

logger = logging.getLogger(__name__)

class R2Client:
    """Cliente S3-compatible para Cloudflare R2 (firma AWS SigV4, estilo path)"""

    def __init__(
        self,
        endpoint: Optional[str] = None,
        bucket: Optional[str] = None,
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        public_url: Optional[str] = None,
        region: Optional[str] = None,
    ):
        self.endpoint = (endpoint or R2_ENDPOINT or "").rstrip("/")
        self.bucket = bucket or R2_BUCKET_NAME
        self.access_key = access_key or R2_ACCESS_KEY_ID
        self.secret_key = secret_key or R2_SECRET_ACCESS_KEY
        self.public_url = (public_url or R2_PUBLIC_URL or "").rstrip("/")
        self.region = region or R2_REGION
        self.service = "s3"
        self.request_type = "aws4_request"

    def is_configured(self) -> bool:
        return all([self.endpoint, self.bucket, self.access_key, self.secret_key])

    @property
    def host(self) -> str:
        return urlsplit(self.endpoint).netloc

    def _sign(self, key: bytes, msg: str) -> bytes:
        """Firma un mensaje con la clave proporcionada"""
        return hmac.new(key, msg.encode("utf-8"), hashlib.sha256).digest()

    def _get_signing_key(self, date_stamp: str) -> bytes:
        """Genera la clave de firma en 4 pasos"""
        k_date = self._sign(f"AWS4{self.secret_key}".encode(), date_stamp)
        k_region = self._sign(k_date, self.region)
        k_service = self._sign(k_region, self.service)
        return self._sign(k_service, self.request_type)

    def _create_canonical_request(self, method: str, path: str, headers: dict, content_hash: str) -> str:
        """Crea la solicitud canónica para la firma"""
        sorted_headers = sorted(headers.items(), key=lambda x: x[0].lower())

        canonical_headers = "\n".join([f"{k.lower()}:{str(v).strip()}" for k, v in sorted_headers])
        signed_headers = ";".join([k.lower() for k, v in sorted_headers])

        return "\n".join([
            method,
            path,
            "",  # query string vacío
            canonical_headers,
            "",
            signed_headers,
            content_hash
        ])

    def _generate_signature(self, canonical_request: str, date_stamp: str, amz_date: str, signing_key: bytes) -> str:
        """Genera la firma final"""
        credential_scope = f"{date_stamp}/{self.region}/{self.service}/{self.request_type}"
        string_to_sign = "\n".join([
            "AWS4-HMAC-SHA256",
            amz_date,
            credential_scope,
            hashlib.sha256(canonical_request.encode()).hexdigest()
        ])
        return hmac.new(signing_key, string_to_sign.encode(), hashlib.sha256).hexdigest()

    def sign_headers(self, method: str, object_key: str, headers: dict, content_hash: str, now: datetime.datetime = None) -> dict:
        """Devuelve los headers con x-amz-date y Authorization añadidos"""
        now = now or datetime.datetime.now(datetime.timezone.utc)
        amz_date = now.strftime("%Y%m%dT%H%M%SZ")
        date_stamp = now.strftime("%Y%m%d")

        headers = dict(headers)
        headers["Host"] = self.host
        headers["x-amz-content-sha256"] = content_hash
        headers["x-amz-date"] = amz_date

        canonical_request = self._create_canonical_request(
            method=method,
            path=self.object_path(object_key),
            headers=headers,
            content_hash=content_hash
        )

        signing_key = self._get_signing_key(date_stamp)
        signature = self._generate_signature(
            canonical_request=canonical_request,
            date_stamp=date_stamp,
            amz_date=amz_date,
            signing_key=signing_key
        )

        credential_scope = f"{date_stamp}/{self.region}/{self.service}/{self.request_type}"
        signed_headers = ";".join(sorted([k.lower() for k in headers.keys()]))

        headers["Authorization"] = (
            f"AWS4-HMAC-SHA256 "
            f"Credential={self.access_key}/{credential_scope}, "
            f"SignedHeaders={signed_headers}, "
            f"Signature={signature}"
        )
        return headers

    def object_path(self, object_key: str) -> str:
        return f"/{self.bucket}/{quote(object_key.lstrip('/'))}"

    def public_url_for(self, object_key: str) -> str:
        return f"{self.public_url}/{object_key.lstrip('/')}"

    def upload_file(self, file_content: bytes, object_key: str, content_type: str = "image/jpeg", metadata: dict = None) -> str:
        """Sube un archivo a R2 y devuelve su URL pública"""
        try:
            content_hash = hashlib.sha256(file_content).hexdigest()

            headers = {"Content-Type": content_type or "image/jpeg"}
            for name, value in (metadata or {}).items():
                headers[f"x-amz-meta-{name.lower()}"] = str(value)

            headers = self.sign_headers("PUT", object_key, headers, content_hash)

            response = requests.put(
                f"{self.endpoint}{self.object_path(object_key)}",
                headers=headers,
                data=file_content,
                timeout=30
            )

            if not response.ok:
                logger.error(f"Error en R2: {response.status_code} - {response.text}")
                raise RuntimeError(f"R2 error: {response.text}")

            return self.public_url_for(object_key)

        except requests.exceptions.RequestException as e:
            logger.error(f"Error de conexión: {str(e)}")
            raise RuntimeError("Error de conexión con Cloudflare R2")

    def delete_file(self, object_key: str) -> bool:
        """Elimina un archivo de R2 por su clave

        Args:
            object_key: Clave del objeto a eliminar

        Returns:
            bool: True si se eliminó correctamente, False en caso contrario

        Raises:
            RuntimeError: Si ocurre un error al conectar con R2
        """
        try:
            empty_hash = hashlib.sha256(b"").hexdigest()
            headers = self.sign_headers("DELETE", object_key, {}, empty_hash)

            response = requests.delete(
                f"{self.endpoint}{self.object_path(object_key)}",
                headers=headers,
                timeout=30
            )

            if not response.ok:
                logger.error(f"Error al eliminar archivo: {response.status_code} - {response.text}")
                return False

            return True

        except requests.exceptions.RequestException as e:
            logger.error(f"Error de conexión al eliminar archivo: {str(e)}")
            raise RuntimeError("Error de conexión con Cloudflare R2")
