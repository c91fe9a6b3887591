"""AI-driven selection among engine-provided candidates.

The LLM only ever chooses from the eligible set the engine computed.
Anything else it says (an unknown node, unparseable output, low
confidence, or no answer at all) falls back to the deterministic
strategy, and the decision records why.
"""

import asyncio
import json
import time
from pathlib import Path
from uuid import UUID

from pydantic import ValidationError

from navgraph.config.models import OrchestrationConfig
from navgraph.graph.models import GraphNode, StepPlan, UserContext
from navgraph.observability.logging import get_logger
from navgraph.observability.metrics import FALLBACKS, ORCHESTRATION_LATENCY
from navgraph.orchestration.fallback import FallbackStrategy
from navgraph.orchestration.models import (
    AIDecisionRequest,
    AIDecisionResponse,
    CandidateNode,
    DecisionSource,
    FallbackReason,
    OrchestrationDecision,
)
from navgraph.providers.llm import (
    LLMExecutor,
    LLMMessage,
    LLMProvider,
    LLMResponse,
    ProviderError,
    ProviderTimeoutError,
)

logger = get_logger(__name__)

_PROMPT_TEMPLATE_PATH = Path(__file__).parent / "prompts" / "select_node.txt"

_SYSTEM_PROMPT = (
    "You route users through an application. You never invent screens; "
    "you only pick from the list you are given."
)


class AIOrchestrationService:
    """Select the next node for a step plan."""

    def __init__(
        self,
        llm: LLMExecutor | LLMProvider | None,
        config: OrchestrationConfig | None = None,
        fallback: FallbackStrategy | None = None,
        prompt_template: str | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            llm: Executor or provider used for selection; None disables AI
            config: Orchestration settings
            fallback: Deterministic strategy used whenever AI is not trusted
            prompt_template: Override for prompts/select_node.txt
        """
        self._llm = llm
        self._config = config or OrchestrationConfig()
        self._fallback = fallback or FallbackStrategy()
        self._prompt_template = prompt_template or _PROMPT_TEMPLATE_PATH.read_text()

    @property
    def config(self) -> OrchestrationConfig:
        return self._config

    @property
    def fallback(self) -> FallbackStrategy:
        return self._fallback

    async def select(
        self,
        plan: StepPlan,
        context: UserContext,
        *,
        graph_id: str,
        current_node: GraphNode,
        history: list[str] | None = None,
        session_id: UUID | None = None,
    ) -> OrchestrationDecision:
        start = time.perf_counter()
        decision = await self._decide(
            plan,
            context,
            graph_id=graph_id,
            current_node=current_node,
            history=history or [],
            session_id=session_id,
        )
        elapsed = time.perf_counter() - start
        decision.latency_ms = elapsed * 1000
        ORCHESTRATION_LATENCY.labels(source=decision.source.value).observe(elapsed)

        if decision.fallback_reason is not None:
            FALLBACKS.labels(graph_id=graph_id, reason=decision.fallback_reason.value).inc()

        logger.info(
            "node_selected",
            graph_id=graph_id,
            from_node=plan.node_id,
            selected=decision.selected_node_id,
            source=decision.source.value,
            confidence=decision.confidence,
            candidate_count=len(decision.candidate_ids),
            fallback_reason=decision.fallback_reason.value if decision.fallback_reason else None,
        )
        return decision

    def build_request(
        self,
        plan: StepPlan,
        context: UserContext,
        *,
        graph_id: str,
        current_node: GraphNode,
        history: list[str],
        session_id: UUID | None = None,
    ) -> AIDecisionRequest:
        window = self._config.history_window
        return AIDecisionRequest(
            session_id=session_id,
            graph_id=graph_id,
            current_node_id=current_node.id,
            current_node_label=current_node.label,
            candidates=[CandidateNode.from_node(n) for n in plan.candidates],
            variables=context.variables,
            intents=context.intents,
            history=history[-window:] if window else [],
        )

    async def _decide(
        self,
        plan: StepPlan,
        context: UserContext,
        *,
        graph_id: str,
        current_node: GraphNode,
        history: list[str],
        session_id: UUID | None,
    ) -> OrchestrationDecision:
        if plan.forced is not None:
            branch = plan.forced
            return OrchestrationDecision(
                selected_node_id=branch.target_node_id,
                source=DecisionSource.BRANCH,
                reasoning=f"Branch {branch.branch_index} matched: {branch.branch.condition}",
                candidate_ids=[branch.target_node_id],
            )

        candidate_ids = plan.candidate_ids
        if not candidate_ids:
            reason = "Terminal node" if plan.is_terminal else "No eligible next node"
            return OrchestrationDecision(
                selected_node_id=None,
                source=DecisionSource.NONE,
                reasoning=reason,
            )

        if len(candidate_ids) == 1 and self._config.skip_single_candidate:
            return OrchestrationDecision(
                selected_node_id=candidate_ids[0],
                source=DecisionSource.SINGLE_CANDIDATE,
                reasoning="Only one eligible node",
                candidate_ids=candidate_ids,
            )

        if self._llm is None or not self._config.enabled:
            return self._fall_back(plan, context, FallbackReason.AI_DISABLED)

        request = self.build_request(
            plan,
            context,
            graph_id=graph_id,
            current_node=current_node,
            history=history,
            session_id=session_id,
        )

        try:
            llm_response = await self._generate(
                [
                    LLMMessage(role="system", content=_SYSTEM_PROMPT),
                    LLMMessage(role="user", content=self._format_prompt(request)),
                ]
            )
        except ProviderError as e:
            logger.warning("node_selection_provider_failed", graph_id=graph_id, error=str(e))
            return self._fall_back(plan, context, FallbackReason.PROVIDER_ERROR, detail=str(e))
        except Exception as e:
            logger.exception(
                "node_selection_unexpected_error",
                graph_id=graph_id,
                error=str(e),
                error_type=type(e).__name__,
            )
            return self._fall_back(
                plan,
                context,
                FallbackReason.PROVIDER_ERROR,
                detail=f"{type(e).__name__}: {e}",
            )

        try:
            answer = self.parse_response(llm_response.content)
        except ValueError as e:
            logger.warning(
                "node_selection_unparseable",
                graph_id=graph_id,
                content_preview=llm_response.content[:200],
            )
            return self._fall_back(plan, context, FallbackReason.PARSE_ERROR, detail=str(e))

        if answer.node_id not in candidate_ids:
            logger.warning(
                "node_selection_outside_candidates",
                graph_id=graph_id,
                proposed=answer.node_id,
                candidates=candidate_ids,
            )
            return self._fall_back(
                plan,
                context,
                FallbackReason.INVALID_NODE,
                detail=f"'{answer.node_id}' is not eligible",
                ai_response=answer,
            )

        if answer.confidence < self._config.min_confidence:
            return self._fall_back(
                plan,
                context,
                FallbackReason.LOW_CONFIDENCE,
                detail=f"{answer.confidence:.2f} < {self._config.min_confidence:.2f}",
                ai_response=answer,
            )

        return OrchestrationDecision(
            selected_node_id=answer.node_id,
            source=DecisionSource.AI,
            confidence=answer.confidence,
            reasoning=answer.reasoning,
            candidate_ids=candidate_ids,
            ai_response=answer,
            model=llm_response.model,
        )

    async def _generate(self, messages: list[LLMMessage]) -> LLMResponse:
        """Call the LLM; bare providers get the configured timeout.

        An LLMExecutor applies the timeout to each model in its chain itself.
        """
        assert self._llm is not None
        call = self._llm.generate(
            messages,
            max_tokens=self._config.max_tokens,
            temperature=self._config.temperature,
        )
        if isinstance(self._llm, LLMExecutor):
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self._config.timeout)
        except TimeoutError as e:
            raise ProviderTimeoutError(
                f"No answer within {self._config.timeout}s"
            ) from e

    def _fall_back(
        self,
        plan: StepPlan,
        context: UserContext,
        reason: FallbackReason,
        *,
        detail: str | None = None,
        ai_response: AIDecisionResponse | None = None,
    ) -> OrchestrationDecision:
        chosen = self._fallback.choose(plan.candidates, context)
        reasoning = f"Fallback ({reason.value})"
        if detail:
            reasoning = f"{reasoning}: {detail}"
        return OrchestrationDecision(
            selected_node_id=chosen.id if chosen else None,
            source=DecisionSource.FALLBACK if chosen else DecisionSource.NONE,
            reasoning=reasoning,
            candidate_ids=plan.candidate_ids,
            fallback_reason=reason,
            ai_response=ai_response,
        )

    def _format_prompt(self, request: AIDecisionRequest) -> str:
        candidates = "\n".join(
            f"- id: {c.id} | {c.label} ({c.type.value})"
            + (f" - {c.description}" if c.description else "")
            + (f" [intents: {', '.join(c.intent_tags)}]" if c.intent_tags else "")
            for c in request.candidates
        )
        intents = "\n".join(
            f"- {i.name}: {i.confidence:.2f} ({i.source.value})" for i in request.intents
        ) or "- none"
        return self._prompt_template.format(
            current_node_id=request.current_node_id,
            current_node_label=request.current_node_label,
            history=" -> ".join(request.history) or "none",
            intents=intents,
            variables=json.dumps(request.variables, default=str, sort_keys=True),
            candidates=candidates,
        )

    @staticmethod
    def parse_response(content: str) -> AIDecisionResponse:
        """Parse the LLM answer, tolerating markdown code fences.

        Raises:
            ValueError: If no valid decision object can be read
        """
        content = content.strip()
        if "```json" in content:
            start = content.find("```json") + 7
            end = content.find("```", start)
            if end > start:
                content = content[start:end].strip()
        elif "```" in content:
            start = content.find("```") + 3
            end = content.find("```", start)
            if end > start:
                content = content[start:end].strip()

        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Response is not JSON: {e}") from e
        if not isinstance(data, dict):
            raise ValueError("Response JSON is not an object")

        try:
            return AIDecisionResponse.model_validate(data)
        except (ValidationError, TypeError) as e:
            raise ValueError(f"Response does not match decision schema: {e}") from e
