"""
LangGraph pipeline for one trip generation.

    [plan_attractions] -> build_prompt -> call_model -> parse_response -> [enhance] -> END
                                              |               |
                                              +--> fallback <-+

The bracketed nodes only exist in the next-level variant. The model call is
the only node that awaits; it runs the blocking client in a worker thread.
Any failure in call_model or parse_response routes to the fallback node, so
the graph always ends with a trip in state.
"""

import asyncio
import logging
import random
from typing import Optional

from langgraph.graph import END, StateGraph

from app.graph.distribution import plan_attractions
from app.graph.enrichment import enhance_next_level_trip
from app.graph.fallback import build_fallback_trip
from app.graph.parser import Clock, log_malformed, parse_trip_response, utc_now
from app.graph.prompts import build_next_level_prompt, build_trip_prompt
from app.graph.state import GenerationState
from app.integrations.exceptions import MalformedResponseError
from app.integrations.llm_client import LLMClient

logger = logging.getLogger(__name__)


def _log(state: GenerationState, stage: str, message: str, **extra) -> list:
    return state.logs + [{"stage": stage, "message": message, **extra}]


def _route(state: GenerationState) -> str:
    return "fallback" if state.failure else "ok"


def build_graph(
    llm: LLMClient,
    *,
    variant: str = "classic",
    rng: Optional[random.Random] = None,
    clock: Clock = utc_now,
):
    model_name = getattr(llm, "model", None)
    next_level = variant == "next-level"

    def plan_node(state: GenerationState) -> dict:
        plan = plan_attractions(state.request.duration, state.request.pace)
        return {
            "attraction_plan": plan,
            "logs": _log(state, "Attraction Plan", f"{plan.total} attractions over {state.request.duration} days",
                         distribution=plan.distribution),
        }

    def prompt_node(state: GenerationState) -> dict:
        if next_level:
            prompt = build_next_level_prompt(state.request, state.attraction_plan, state.destination_record, rng)
        else:
            prompt = build_trip_prompt(state.request, state.destination_record, rng)
        matched = state.destination_record.name if state.destination_record else None
        return {
            "prompt": prompt,
            "logs": _log(state, "Prompt Built", f"{len(prompt)} chars", catalog_match=matched),
        }

    async def call_model_node(state: GenerationState) -> dict:
        logger.info(f"Requesting {variant} itinerary for {state.request.destination} from {model_name}")
        try:
            text = await asyncio.to_thread(llm.generate, state.prompt)
        except Exception as e:
            logger.warning(f"Model call failed for {state.request.destination}: {e}")
            return {
                "failure": f"model call failed: {e}",
                "logs": _log(state, "Model Call", "failed", error=str(e)),
            }
        logger.info("AI response received")
        return {"raw_text": text, "logs": _log(state, "Model Call", f"received {len(text)} chars")}

    def parse_node(state: GenerationState) -> dict:
        try:
            trip = parse_trip_response(state.raw_text, state.request, variant=variant, model=model_name, clock=clock)
        except MalformedResponseError as e:
            log_malformed(e)
            return {
                "failure": f"malformed response: {e}",
                "logs": _log(state, "Parse", "failed", error=str(e)),
            }
        except Exception as e:
            logger.exception(f"Unexpected error parsing reply for {state.request.destination}")
            return {
                "failure": f"malformed response: {e}",
                "logs": _log(state, "Parse", "failed", error=str(e)),
            }
        return {"trip": trip, "logs": _log(state, "Parse", f"parsed {len(trip.itinerary)} days")}

    def enhance_node(state: GenerationState) -> dict:
        trip = enhance_next_level_trip(state.trip, state.request, state.attraction_plan, clock=clock)
        return {"trip": trip, "logs": _log(state, "Enhance", trip.trip_analysis.pace_rating)}

    def fallback_node(state: GenerationState) -> dict:
        trip = build_fallback_trip(
            state.request,
            state.destination_record,
            state.attraction_plan,
            variant=variant,
            reason=state.failure or "generation failed",
            clock=clock,
        )
        return {"trip": trip, "logs": _log(state, "Fallback", state.failure or "generation failed")}

    g = StateGraph(GenerationState)

    if next_level:
        g.add_node("plan_attractions", plan_node)
    g.add_node("build_prompt", prompt_node)
    g.add_node("call_model", call_model_node)
    g.add_node("parse_response", parse_node)
    g.add_node("fallback", fallback_node)
    if next_level:
        g.add_node("enhance", enhance_node)

    if next_level:
        g.set_entry_point("plan_attractions")
        g.add_edge("plan_attractions", "build_prompt")
    else:
        g.set_entry_point("build_prompt")
    g.add_edge("build_prompt", "call_model")
    g.add_conditional_edges("call_model", _route, {"fallback": "fallback", "ok": "parse_response"})
    g.add_conditional_edges(
        "parse_response", _route, {"fallback": "fallback", "ok": "enhance" if next_level else END}
    )
    if next_level:
        g.add_edge("enhance", END)
    g.add_edge("fallback", END)

    return g.compile()
