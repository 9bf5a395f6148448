"""LangGraph-based orchestration strategy for stream execution."""

from typing import NotRequired, TypedDict, cast

from langgraph.graph import END, START, StateGraph

from chat_stream.model_resolver import ResolvedModel
from chat_stream.prompt_assembler import AssembledPrompt
from chat_stream.routing import RoutedMessages
from chat_stream.transport import StreamHandle

from .base import StreamContext, StreamOrchestrator
from .pipeline import StreamPipeline


class StreamGraphState(TypedDict):
    context: StreamContext
    routed: NotRequired[RoutedMessages]
    resolved: NotRequired[ResolvedModel]
    prompt: NotRequired[AssembledPrompt]
    handle: NotRequired[StreamHandle]


class LangGraphStreamOrchestrator(StreamOrchestrator):
    def __init__(self, pipeline: StreamPipeline) -> None:
        self._pipeline = pipeline
        graph = StateGraph(StreamGraphState)
        graph.add_node("route_messages", self._route_messages)
        graph.add_node("resolve_model", self._resolve_model)
        graph.add_node("assemble_prompt", self._assemble_prompt)
        graph.add_node("dispatch", self._dispatch)
        graph.add_edge(START, "route_messages")
        graph.add_edge("route_messages", "resolve_model")
        graph.add_edge("resolve_model", "assemble_prompt")
        graph.add_edge("assemble_prompt", "dispatch")
        graph.add_edge("dispatch", END)
        self._graph = graph.compile()

    def _route_messages(self, state: StreamGraphState) -> dict[str, RoutedMessages]:
        return {"routed": self._pipeline.route(state["context"])}

    async def _resolve_model(self, state: StreamGraphState) -> dict[str, ResolvedModel]:
        return {"resolved": await self._pipeline.resolve(state["context"], state["routed"])}

    def _assemble_prompt(self, state: StreamGraphState) -> dict[str, AssembledPrompt]:
        return {"prompt": self._pipeline.assemble(state["context"], state["routed"])}

    async def _dispatch(self, state: StreamGraphState) -> dict[str, StreamHandle]:
        handle = await self._pipeline.dispatch(
            state["context"], state["resolved"], state["prompt"]
        )
        return {"handle": handle}

    async def run(self, context: StreamContext) -> StreamHandle:
        initial_state: StreamGraphState = {"context": context}
        result = cast("StreamGraphState", await self._graph.ainvoke(initial_state))
        handle = result.get("handle")
        if handle is None:
            raise RuntimeError("LangGraph execution did not return a stream handle")
        return handle
