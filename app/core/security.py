import hashlib
import hmac
import logging
from typing import Mapping

logger = logging.getLogger(__name__)

# Encabezado -> (prefijo, algoritmo); se prefiere sha256 cuando vienen ambos
SIGNATURE_HEADERS = (
    ("x-hub-signature-256", "sha256=", hashlib.sha256),
    ("x-hub-signature", "sha1=", hashlib.sha1),
)


def verify_signature(headers: Mapping[str, str], body: bytes, app_secret: str) -> bool:
    """
    Verifica la firma HMAC del cuerpo crudo de una entrega del webhook.

    Args:
        headers: Encabezados de la petición (las claves se comparan en minúsculas)
        body: Cuerpo crudo, antes de parsear el JSON
        app_secret: Secreto de la app de Messenger

    Returns:
        bool: True si alguna firma presente coincide
    """
    lowered = {key.lower(): value for key, value in headers.items()}

    for header, prefix, digestmod in SIGNATURE_HEADERS:
        signature = lowered.get(header)
        if signature is None:
            continue
        if not signature.startswith(prefix):
            logger.warning(f"[SECURITY] Firma con formato inválido en {header}")
            return False

        expected = hmac.new(app_secret.encode(), body, digestmod).hexdigest()
        return hmac.compare_digest(signature[len(prefix):], expected)

    logger.warning("[SECURITY] Entrega sin firma")
    return False
