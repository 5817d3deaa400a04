import pytest
from sfc_loader.config import TranspilerConfig
from sfc_loader.context import TranspileContext
from sfc_loader.loaders import HttpContentLoader, RoutingContentLoader


class TestTranspileContext:
	def test_scope_allocator_uses_config_prefix(self):
		context = TranspileContext(config=TranspilerConfig(scope_prefix="s-"))
		assert context.scope_allocator.allocate().startswith("s-")

	@pytest.mark.asyncio
	async def test_aclose_releases_http_client(self):
		http = HttpContentLoader()
		context = TranspileContext(loader=RoutingContentLoader({"https": http}))
		client = http.client
		await context.aclose()
		assert client.is_closed
		assert http._client is None

	@pytest.mark.asyncio
	async def test_aclose_without_closable_loader(self, context: TranspileContext):
		await context.aclose()

	@pytest.mark.asyncio
	async def test_default_loader_can_be_closed_unused(self):
		context = TranspileContext()
		assert isinstance(context.loader, RoutingContentLoader)
		await context.aclose()
		for loader in context.loader.routes.values():
			if isinstance(loader, HttpContentLoader):
				assert loader._client is None
