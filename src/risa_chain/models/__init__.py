"""Model types for chains, keys and history."""

from risa_chain.models.app_settings import AppSettings
from risa_chain.models.chain_execution_result import ChainExecutionResult
from risa_chain.models.chain_step import ChainStep
from risa_chain.models.chain_step import EncodingStep
from risa_chain.models.chain_step import HttpBuildParams
from risa_chain.models.chain_step import HttpBuildStep
from risa_chain.models.chain_step import HttpParseParams
from risa_chain.models.chain_step import HttpParseStep
from risa_chain.models.chain_step import ParamMapping
from risa_chain.models.chain_step import RsaParams
from risa_chain.models.chain_step import RsaStep
from risa_chain.models.chain_step import STEP_TYPES
from risa_chain.models.chain_step import parse_steps
from risa_chain.models.chain_template import ChainTemplate
from risa_chain.models.history_item import HistoryFilter
from risa_chain.models.history_item import HistoryItem
from risa_chain.models.http_template import HttpTemplate
from risa_chain.models.module_info import ModuleInfo
from risa_chain.models.saved_key import SavedKey
from risa_chain.models.step_result import StepResult
from risa_chain.models.url_analysis import QueryParamSuggestion
from risa_chain.models.url_analysis import UrlAnalysis
from risa_chain.models.url_analysis import UrlSegment
from risa_chain.models.validation_result import ValidationResult

__all__ = [
    "AppSettings",
    "ChainExecutionResult",
    "ChainStep",
    "ChainTemplate",
    "EncodingStep",
    "HistoryFilter",
    "HistoryItem",
    "HttpBuildParams",
    "HttpBuildStep",
    "HttpParseParams",
    "HttpParseStep",
    "HttpTemplate",
    "ModuleInfo",
    "ParamMapping",
    "QueryParamSuggestion",
    "RsaParams",
    "RsaStep",
    "STEP_TYPES",
    "SavedKey",
    "StepResult",
    "UrlAnalysis",
    "UrlSegment",
    "ValidationResult",
    "parse_steps",
]
