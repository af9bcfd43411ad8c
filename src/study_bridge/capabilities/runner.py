"""CapabilityRunner: executes a catalogue capability through the bridge."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, NamedTuple

import structlog
from pydantic import BaseModel, ValidationError

from study_bridge.capabilities.catalog import CAPABILITIES, CapabilityDefinition
from study_bridge.capabilities.models import CapabilityInput
from study_bridge.capabilities.prompt_loader import format_prompt, load_prompt
from study_bridge.errors import StructuredOutputError, UnknownCapabilityError
from study_bridge.llm.bridge import ProviderBridge
from study_bridge.llm.gateway import GeminiGateway
from study_bridge.llm.schemas import GatewayCall, ProviderRequest, ProviderResponse

logger = structlog.get_logger()


class PreparedPrompt(NamedTuple):
    """Rendered prompts for one capability call."""

    system_prompt: str
    user_prompt: str
    prompt_version: str


class CapabilityRunner:
    """Validates input, renders prompts and calls ProviderBridge.

    Steps:
        1. _prepare_prompts: load YAML template, format with input fields
        2. _gateway_call: closure handing the prompts to the gateway
        3. bridge.execute: gateway, direct provider or rescue
        4. _validate_output: coerce the result into the output model

    Args:
        bridge: ProviderBridge for all provider calls.
        gateway: Managed gateway used on the default path.
        capabilities: Catalogue to serve; defaults to CAPABILITIES.
    """

    def __init__(
        self,
        bridge: ProviderBridge,
        gateway: GeminiGateway,
        capabilities: Mapping[str, CapabilityDefinition] | None = None,
    ) -> None:
        self._bridge = bridge
        self._gateway = gateway
        self._capabilities = dict(CAPABILITIES if capabilities is None else capabilities)

    @property
    def names(self) -> list[str]:
        return sorted(self._capabilities)

    def get(self, name: str) -> CapabilityDefinition:
        """Raises UnknownCapabilityError if *name* is not registered."""
        try:
            return self._capabilities[name]
        except KeyError:
            raise UnknownCapabilityError(name) from None

    async def run(
        self,
        name: str,
        payload: Mapping[str, Any] | CapabilityInput,
    ) -> BaseModel:
        """Run capability *name* and return its validated output model.

        Raises:
            UnknownCapabilityError: no such capability.
            ValidationError: payload does not match the input model.
            StructuredOutputError: provider JSON does not fit the output model.
            BridgeError and provider SDK errors: re-raised from the bridge.
        """
        definition = self.get(name)
        data = (
            payload
            if isinstance(payload, definition.input_model)
            else definition.input_model.model_validate(payload)
        )

        prepared = self._prepare_prompts(definition, data)
        request = ProviderRequest(
            capability_input=data,
            preferred_provider=data.provider,
            preferred_model=data.model,
            system_prompt=prepared.system_prompt,
            user_prompt=prepared.user_prompt,
            capability=definition.name,
        )

        logger.info(
            "capability_run_started",
            capability=definition.name,
            provider=request.preferred_provider,
            model=request.preferred_model,
            prompt_version=prepared.prompt_version,
        )
        result = await self._bridge.execute(
            self._gateway_call(definition, prepared), request
        )
        output = self._validate_output(definition, result, request)
        logger.info("capability_run_done", capability=definition.name)
        return output

    def _prepare_prompts(
        self,
        definition: CapabilityDefinition,
        data: CapabilityInput,
    ) -> PreparedPrompt:
        prompt_data = load_prompt(definition.prompt_file)
        user_prompt = format_prompt(
            prompt_data.user_prompt_template, **definition.variables(data)
        )
        return PreparedPrompt(
            system_prompt=prompt_data.system_prompt,
            user_prompt=user_prompt,
            prompt_version=prompt_data.version,
        )

    def _gateway_call(
        self,
        definition: CapabilityDefinition,
        prepared: PreparedPrompt,
    ) -> GatewayCall:
        gateway = self._gateway

        async def call(
            capability_input: Any, *, model: str
        ) -> ProviderResponse | None:
            return await gateway.generate_structured(
                system_prompt=prepared.system_prompt,
                user_prompt=prepared.user_prompt,
                response_schema=definition.output_model,
                model=model,
            )

        return call

    @staticmethod
    def _validate_output(
        definition: CapabilityDefinition,
        result: ProviderResponse,
        request: ProviderRequest,
    ) -> BaseModel:
        try:
            return definition.output_model.model_validate(result)
        except ValidationError as exc:
            logger.error(
                "structured_output_parse_failed",
                capability=definition.name,
                provider=request.preferred_provider,
                schema=definition.output_model.__name__,
            )
            raise StructuredOutputError(
                provider=request.preferred_provider or "gateway",
                schema_name=definition.output_model.__name__,
                cause=exc,
            ) from exc
