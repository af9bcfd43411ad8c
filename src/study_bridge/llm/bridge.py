"""ProviderBridge -- central entry point for all capability LLM calls.

Paths, tried in order:
1. Managed gateway (structured output), when the gateway is requested.
2. Direct OpenAI-compatible provider + normalizer, otherwise.
3. One rescue call to a fixed direct provider when the gateway failed
   with a rate-limit-class error.

The original error is always re-raised when every path fails. There is
no retry loop: at most one rescue attempt per request.
"""

import structlog

from study_bridge.errors import (
    EmptyProviderOutputError,
    MissingPromptParametersError,
    attach_rescue_failure,
    is_rate_limited,
)
from study_bridge.llm.direct import DirectProviderClient
from study_bridge.llm.normalizer import ResponseNormalizer
from study_bridge.llm.registry import BridgeConfig
from study_bridge.llm.schemas import (
    GatewayCall,
    NormalizationTier,
    ProviderRequest,
    ProviderResponse,
)

logger = structlog.get_logger()


class ProviderBridge:
    """Routes one capability request through gateway, direct or rescue path.

    Args:
        config: Immutable registry (endpoints, gateway, rescue policy).
        direct_client: Client for OpenAI-compatible providers.
        normalizer: Reshapes free-text replies; defaults to the
            built-in capability adapters.
        rescue_on_empty_output: Treat an empty gateway output as
            rescue-eligible, like a rate-limit failure.
    """

    def __init__(
        self,
        config: BridgeConfig,
        direct_client: DirectProviderClient,
        normalizer: ResponseNormalizer | None = None,
        *,
        rescue_on_empty_output: bool = False,
    ) -> None:
        self._config = config
        self._direct = direct_client
        self._normalizer = normalizer or ResponseNormalizer()
        self._rescue_on_empty_output = rescue_on_empty_output

    @property
    def config(self) -> BridgeConfig:
        return self._config

    async def execute(
        self,
        gateway_call: GatewayCall,
        request: ProviderRequest,
    ) -> ProviderResponse:
        """Produce structured output for *request* or raise the original error.

        Raises:
            EmptyProviderOutputError: gateway returned no output.
            MissingPromptParametersError: direct provider without prompts.
            UnknownProviderError, MissingApiKeyError, ProviderHttpError:
                from the direct client.
        """
        gateway = self._config.gateway
        provider = request.preferred_provider or gateway.provider
        model = request.preferred_model or gateway.default_model

        try:
            if provider == gateway.provider:
                return await self._call_gateway(gateway_call, request, model)
            return await self._call_direct(request, provider, model)
        except Exception as exc:
            if not self._rescue_eligible(exc, request, provider):
                logger.warning(
                    "bridge_call_failed",
                    provider=provider,
                    model=model,
                    capability=request.capability,
                    error=str(exc),
                )
                raise

            try:
                return await self._rescue(request)
            except Exception as rescue_exc:
                attach_rescue_failure(exc, rescue_exc)
                logger.warning(
                    "bridge_rescue_failed",
                    provider=self._config.rescue.provider,
                    model=self._config.rescue.model,
                    capability=request.capability,
                    original_error=str(exc),
                    rescue_error=str(rescue_exc),
                )
            raise

    # -- internal: paths ------------------------------------------------

    async def _call_gateway(
        self,
        gateway_call: GatewayCall,
        request: ProviderRequest,
        model: str,
    ) -> ProviderResponse:
        model_id = self._config.gateway.namespaced(model)
        logger.debug(
            "bridge_gateway_call",
            model=model_id,
            capability=request.capability,
        )
        output = await gateway_call(request.capability_input, model=model_id)
        if output is None:
            raise EmptyProviderOutputError()
        return output

    async def _call_direct(
        self,
        request: ProviderRequest,
        provider: str,
        model: str,
    ) -> ProviderResponse:
        if not (request.system_prompt and request.user_prompt):
            raise MissingPromptParametersError(provider)

        logger.debug(
            "bridge_direct_call",
            provider=provider,
            model=model,
            capability=request.capability,
        )
        text = await self._direct.call_direct(
            provider, model, request.system_prompt, request.user_prompt
        )
        return self._normalizer.normalize(
            text, NormalizationTier.FULL, request.capability
        )

    async def _rescue(self, request: ProviderRequest) -> ProviderResponse:
        rescue = self._config.rescue
        # _rescue_eligible guarantees both prompts are present
        assert request.system_prompt and request.user_prompt

        logger.info(
            "bridge_rescue_attempt",
            provider=rescue.provider,
            model=rescue.model,
            capability=request.capability,
        )
        text = await self._direct.call_direct(
            rescue.provider, rescue.model, request.system_prompt, request.user_prompt
        )
        logger.info(
            "bridge_rescue_succeeded",
            provider=rescue.provider,
            capability=request.capability,
        )
        return self._normalizer.normalize(
            text, NormalizationTier.REDUCED, request.capability
        )

    # -- helpers --------------------------------------------------------

    def _rescue_eligible(
        self,
        exc: Exception,
        request: ProviderRequest,
        provider: str,
    ) -> bool:
        """Rescue only gateway requests that carry prompts and hit a limit."""
        if provider != self._config.gateway.provider or not request.has_prompts:
            return False
        if isinstance(exc, EmptyProviderOutputError):
            return self._rescue_on_empty_output
        return is_rate_limited(exc, self._config.rate_limit_markers)
