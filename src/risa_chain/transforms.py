"""Step transforms and the registry mapping step types to them."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping, TypeAlias

from risa_chain.codecs import (
    base64_decode,
    base64_encode,
    url_decode,
    url_encode,
    validate_base64,
)
from risa_chain.crypto import DEFAULT_ALGORITHM, CryptoProvider
from risa_chain.http_templates import build_url, extract_json_path, parse_url
from risa_chain.keys import KeyResolver
from risa_chain.models.chain_step import (
    HttpBuildParams,
    HttpParseParams,
    NoParams,
    ParamMapping,
    RsaAlgorithm,
    RsaParams,
)
from risa_chain.models.module_info import ModuleInfo
from risa_chain.models.saved_key import SavedKey

logger = logging.getLogger(__name__)


@dataclass
class StepContext:
    keys: KeyResolver
    crypto: CryptoProvider
    warnings: list[str] = field(default_factory=list)

    def warn(self, message: str) -> None:
        logger.warning(message)
        self.warnings.append(message)


Transform: TypeAlias = Callable[[str, Any, StepContext], Awaitable[str]]


async def url_encode_step(text: str, params: NoParams, context: StepContext) -> str:
    return url_encode(text)


async def url_decode_step(text: str, params: NoParams, context: StepContext) -> str:
    return url_decode(text)


async def base64_encode_step(text: str, params: NoParams, context: StepContext) -> str:
    return base64_encode(text)


async def base64_decode_step(text: str, params: NoParams, context: StepContext) -> str:
    return base64_decode(text)


def select_algorithm(params: RsaParams, key: SavedKey, context: StepContext) -> RsaAlgorithm:
    algorithm: RsaAlgorithm = params.algorithm or key.preferred_algorithm or DEFAULT_ALGORITHM
    if algorithm not in context.crypto.supported_algorithms:
        context.warn(
            f"{algorithm} is not supported by the crypto provider; {DEFAULT_ALGORITHM} was used instead."
        )
        return DEFAULT_ALGORITHM
    return algorithm


async def rsa_encrypt_step(text: str, params: RsaParams, context: StepContext) -> str:
    key = context.keys.resolve(params.key_id, operation="RSA encryption")
    algorithm = select_algorithm(params, key, context)
    result = await context.crypto.encrypt(text, key.public_key, algorithm)
    return result.ciphertext


async def rsa_decrypt_step(text: str, params: RsaParams, context: StepContext) -> str:
    key = context.keys.resolve(params.key_id, operation="RSA decryption")
    ciphertext = validate_base64(text)
    algorithm = select_algorithm(params, key, context)
    return await context.crypto.decrypt(ciphertext, key.private_key, algorithm)


async def http_parse_step(text: str, params: HttpParseParams, context: StepContext) -> str:
    try:
        parsed = parse_url(text, params.path_template, params.query_template)
    except ValueError as exc:
        raise ValueError(f"HTTP parsing failed: {exc}") from exc
    result = parsed.as_dict()

    if params.output_type == "field" and params.output_field:
        if params.output_field not in result:
            raise ValueError(
                f"Unknown output field {params.output_field!r}; expected one of {', '.join(result)}."
            )
        value = result[params.output_field]
        return value if isinstance(value, str) else json.dumps(value, ensure_ascii=False)

    if params.output_type == "param" and params.output_param:
        name = params.output_param
        if name in parsed.path_params:
            return parsed.path_params[name]
        if name in parsed.query_params:
            return parsed.query_params[name]
        raise LookupError(f"Parameter {name!r} was not found in the URL path or query.")

    return json.dumps(result, indent=2, ensure_ascii=False)


def resolve_mapping(name: str, mapping: ParamMapping, previous_output: str) -> str:
    if mapping.source == "fixed":
        return mapping.value
    if mapping.source == "field":
        try:
            document = json.loads(previous_output)
        except json.JSONDecodeError as exc:
            raise ValueError(
                f"Parameter {name!r} maps a JSON field but the previous output is not JSON."
            ) from exc
        return extract_json_path(document, mapping.value)
    return previous_output.strip()


async def http_build_step(text: str, params: HttpBuildParams, context: StepContext) -> str:
    base_url = params.base_url.strip() or text.strip()
    if not base_url:
        raise ValueError("HTTP build requires a base URL (baseUrl parameter or step input).")
    path_params = {name: resolve_mapping(name, mapping, text) for name, mapping in params.param_mappings.items()}
    query_params = {name: resolve_mapping(name, mapping, text) for name, mapping in params.query_mappings.items()}
    try:
        return build_url(base_url, params.path_template, path_params, query_params, params.query_template)
    except ValueError as exc:
        raise ValueError(f"HTTP build failed: {exc}") from exc


TRANSFORMS: Mapping[str, Transform] = MappingProxyType(
    {
        "url-encode": url_encode_step,
        "url-decode": url_decode_step,
        "base64-encode": base64_encode_step,
        "base64-decode": base64_decode_step,
        "rsa-encrypt": rsa_encrypt_step,
        "rsa-decrypt": rsa_decrypt_step,
        "http-parse": http_parse_step,
        "http-build": http_build_step,
    }
)

MODULES: Mapping[str, ModuleInfo] = MappingProxyType(
    {
        "url-encode": ModuleInfo(
            name="URL encode", description="Percent-encode text as a URI component.", category="encoding"
        ),
        "url-decode": ModuleInfo(
            name="URL decode", description="Decode percent-encoded text.", category="encoding"
        ),
        "base64-encode": ModuleInfo(
            name="Base64 encode", description="Encode UTF-8 text as Base64.", category="encoding"
        ),
        "base64-decode": ModuleInfo(
            name="Base64 decode", description="Decode Base64 into UTF-8 text.", category="encoding"
        ),
        "rsa-encrypt": ModuleInfo(
            name="RSA encrypt",
            description="Encrypt with a saved public key; outputs Base64.",
            category="crypto",
            required_params=["keyId"],
        ),
        "rsa-decrypt": ModuleInfo(
            name="RSA decrypt",
            description="Decrypt Base64 ciphertext with a saved private key.",
            category="crypto",
            required_params=["keyId"],
        ),
        "http-parse": ModuleInfo(
            name="HTTP parse",
            description="Extract URL components and path/query parameters.",
            category="http",
        ),
        "http-build": ModuleInfo(
            name="HTTP build",
            description="Build a URL from a path template and parameter mappings.",
            category="http",
        ),
    }
)


def get_transform(step_type: str, registry: Mapping[str, Transform] = TRANSFORMS) -> Transform:
    transform = registry.get(step_type)
    if transform is None:
        raise NotImplementedError(f"Unsupported step type: {step_type}")
    return transform


def available_modules() -> dict[str, ModuleInfo]:
    return dict(MODULES)
