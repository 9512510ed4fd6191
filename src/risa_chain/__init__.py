"""Public package exports."""

from risa_chain.chain_executor import ChainExecutor
from risa_chain.crypto import CryptographyProvider
from risa_chain.orchestrator import Orchestrator
from risa_chain.step_executor import StepExecutor
from risa_chain.url_analyzer import analyze_url
from risa_chain.validator import validate_chain

__all__ = [
    "ChainExecutor",
    "CryptographyProvider",
    "Orchestrator",
    "StepExecutor",
    "analyze_url",
    "validate_chain",
]
