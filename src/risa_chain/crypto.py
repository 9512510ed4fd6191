"""RSA operations backed by the cryptography library."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal, Protocol

from anyio import to_thread
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding, rsa

from risa_chain.codecs import validate_base64
from risa_chain.models.chain_step import RsaAlgorithm

logger = logging.getLogger(__name__)

DEFAULT_ALGORITHM: RsaAlgorithm = "RSA-OAEP"
RSA_ALGORITHMS: tuple[RsaAlgorithm, ...] = ("RSA-OAEP", "RSA-PKCS1")
RSA_KEY_SIZES: tuple[int, ...] = (1024, 2048, 4096)

DecryptFailureKind = Literal["decode", "key_mismatch", "algorithm_mismatch", "generic"]

DECRYPT_HINTS: dict[str, str] = {
    "decode": "The ciphertext or the decrypted bytes could not be decoded; the data may be corrupted.",
    "key_mismatch": "Check that the private key belongs to the public key used for encryption.",
    "algorithm_mismatch": "Check that the key pair and padding (RSA-OAEP or RSA-PKCS1) match the encryption side.",
    "generic": "Check the key, the algorithm and the ciphertext.",
}

# Ordered: first match wins.
_DECRYPT_ERROR_PATTERNS: tuple[tuple[str, DecryptFailureKind], ...] = (
    ("base64", "decode"),
    ("incorrect padding", "decode"),
    ("codec can't decode", "decode"),
    ("ciphertext length", "key_mismatch"),
    ("key size", "key_mismatch"),
    ("could not deserialize", "key_mismatch"),
    ("decryption failed", "algorithm_mismatch"),
)


class DecryptionError(ValueError):
    def __init__(self, kind: DecryptFailureKind, detail: str) -> None:
        self.kind: DecryptFailureKind = kind
        self.detail = detail
        label = kind.replace("_", " ")
        super().__init__(f"RSA decryption failed ({label}): {detail}. {DECRYPT_HINTS[kind]}")


def classify_decrypt_error(exc: BaseException) -> DecryptFailureKind:
    message = str(exc).lower()
    for pattern, kind in _DECRYPT_ERROR_PATTERNS:
        if pattern in message:
            return kind
    return "generic"


@dataclass(frozen=True)
class EncryptionResult:
    ciphertext: str  # Base64
    key_size: int


@dataclass(frozen=True)
class RsaKeyPair:
    public_key: str
    private_key: str
    key_size: int
    created: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class CryptoProvider(Protocol):
    supported_algorithms: frozenset[str]

    async def encrypt(self, plaintext: str, public_key_pem: str, algorithm: RsaAlgorithm) -> EncryptionResult: ...

    async def decrypt(self, ciphertext: str, private_key_pem: str, algorithm: RsaAlgorithm) -> str: ...

    async def generate_key_pair(self, bits: int) -> RsaKeyPair: ...


def padding_for(algorithm: RsaAlgorithm) -> padding.AsymmetricPadding:
    if algorithm == "RSA-PKCS1":
        return padding.PKCS1v15()
    # OAEP with SHA-1 digest and MGF1-SHA-1.
    return padding.OAEP(mgf=padding.MGF1(algorithm=hashes.SHA1()), algorithm=hashes.SHA1(), label=None)


def load_public_key(pem: str) -> rsa.RSAPublicKey:
    try:
        key = serialization.load_pem_public_key(pem.encode("utf-8"))
    except (ValueError, UnsupportedAlgorithm) as exc:
        raise ValueError(f"Invalid public key PEM: {exc}") from exc
    if not isinstance(key, rsa.RSAPublicKey):
        raise ValueError("Public key is not an RSA key.")
    return key


def load_private_key(pem: str) -> rsa.RSAPrivateKey:
    try:
        key = serialization.load_pem_private_key(pem.encode("utf-8"), password=None)
    except (ValueError, TypeError, UnsupportedAlgorithm) as exc:
        raise DecryptionError("key_mismatch", f"private key could not be loaded ({exc})") from exc
    if not isinstance(key, rsa.RSAPrivateKey):
        raise DecryptionError("key_mismatch", "private key is not an RSA key")
    return key


class CryptographyProvider:
    """CryptoProvider running cryptography calls in a worker thread."""

    supported_algorithms: frozenset[str] = frozenset(RSA_ALGORITHMS)

    async def encrypt(self, plaintext: str, public_key_pem: str, algorithm: RsaAlgorithm) -> EncryptionResult:
        return await to_thread.run_sync(self._encrypt_sync, plaintext, public_key_pem, algorithm)

    async def decrypt(self, ciphertext: str, private_key_pem: str, algorithm: RsaAlgorithm) -> str:
        cleaned = validate_base64(ciphertext)
        return await to_thread.run_sync(self._decrypt_sync, cleaned, private_key_pem, algorithm)

    async def generate_key_pair(self, bits: int) -> RsaKeyPair:
        return await to_thread.run_sync(self._generate_key_pair_sync, bits)

    def _encrypt_sync(self, plaintext: str, public_key_pem: str, algorithm: RsaAlgorithm) -> EncryptionResult:
        public_key = load_public_key(public_key_pem)
        try:
            ciphertext = public_key.encrypt(plaintext.encode("utf-8"), padding_for(algorithm))
        except ValueError as exc:
            raise ValueError(
                f"RSA encryption failed: {exc} ({public_key.key_size}-bit key, {algorithm})"
            ) from exc
        return EncryptionResult(
            ciphertext=base64.b64encode(ciphertext).decode("ascii"),
            key_size=public_key.key_size,
        )

    def _decrypt_sync(self, ciphertext: str, private_key_pem: str, algorithm: RsaAlgorithm) -> str:
        private_key = load_private_key(private_key_pem)
        try:
            plaintext = private_key.decrypt(base64.b64decode(ciphertext), padding_for(algorithm))
            return plaintext.decode("utf-8")
        except ValueError as exc:
            raise DecryptionError(classify_decrypt_error(exc), str(exc) or type(exc).__name__) from exc

    def _generate_key_pair_sync(self, bits: int) -> RsaKeyPair:
        if bits not in RSA_KEY_SIZES:
            raise ValueError(f"Unsupported RSA key size {bits}; expected one of {list(RSA_KEY_SIZES)}.")
        private_key = rsa.generate_private_key(public_exponent=65537, key_size=bits)
        public_pem = private_key.public_key().public_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        )
        private_pem = private_key.private_bytes(
            encoding=serialization.Encoding.PEM,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        )
        logger.debug("Generated %d-bit RSA key pair", bits)
        return RsaKeyPair(
            public_key=public_pem.decode("ascii"),
            private_key=private_pem.decode("ascii"),
            key_size=bits,
        )
