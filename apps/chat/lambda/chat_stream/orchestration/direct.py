"""Direct sequential stream orchestration."""

from chat_stream.orchestration.base import StreamContext, StreamOrchestrator
from chat_stream.orchestration.pipeline import StreamPipeline
from chat_stream.transport import StreamHandle


class DirectStreamOrchestrator(StreamOrchestrator):
    def __init__(self, pipeline: StreamPipeline) -> None:
        self._pipeline = pipeline

    async def run(self, context: StreamContext) -> StreamHandle:
        routed = self._pipeline.route(context)
        resolved = await self._pipeline.resolve(context, routed)
        prompt = self._pipeline.assemble(context, routed)
        return await self._pipeline.dispatch(context, resolved, prompt)
