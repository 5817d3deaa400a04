import logging
from pathlib import Path

import httpx
import pytest
from sfc_loader.errors import ContentLoadError
from sfc_loader.loaders import (
	FileContentLoader,
	HttpContentLoader,
	MemoryContentLoader,
	RoutingContentLoader,
	load_content,
	resolve_locator,
)


class TestResolveLocator:
	"""Canonical identities for relative and absolute references."""

	def test_relative_to_custom_scheme(self):
		assert resolve_locator("./b.vue", "memory:///a.vue") == "memory:///b.vue"

	def test_parent_directory(self):
		base = "https://example.com/app/components/a.vue"
		assert resolve_locator("../c.vue", base) == "https://example.com/app/c.vue"

	def test_root_relative(self):
		base = "https://example.com/app/a.vue"
		assert resolve_locator("/lib/x.vue", base) == "https://example.com/lib/x.vue"

	def test_protocol_relative(self):
		base = "https://example.com/app/a.vue"
		assert resolve_locator("//cdn.test/x.vue", base) == "https://cdn.test/x.vue"

	def test_absolute_url_is_normalized(self):
		assert (
			resolve_locator("HTTPS://Example.com/a/./b/../c.vue")
			== "https://example.com/a/c.vue"
		)

	def test_absolute_url_ignores_base(self):
		assert (
			resolve_locator("https://other.test/x.vue", "memory:///a.vue")
			== "https://other.test/x.vue"
		)

	@pytest.mark.parametrize(
		"locator",
		["blob:sfc/abc", "data:text/javascript;base64,YQ==", "urn:sfc:a/../b"],
	)
	def test_opaque_urls_are_unchanged(self, locator: str):
		assert resolve_locator(locator) == locator

	def test_query_is_kept(self):
		assert (
			resolve_locator("./b.vue?v=2", "https://h.test/a.vue")
			== "https://h.test/b.vue?v=2"
		)

	def test_spellings_share_one_identity(self):
		base = "memory:///src/app/a.vue"
		assert resolve_locator("./x/../b.vue", base) == resolve_locator("b.vue", base)
		assert resolve_locator("../app/b.vue", base) == "memory:///src/app/b.vue"

	def test_filesystem_paths(self, tmp_path: Path):
		base = str(tmp_path / "components" / "a.vue")
		assert resolve_locator("./b.vue", base) == str(tmp_path / "components" / "b.vue")
		assert resolve_locator("../c.vue", base) == str(tmp_path / "c.vue")

	def test_relative_path_without_base_is_made_absolute(self):
		assert Path(resolve_locator("a.vue")).is_absolute()


class TestMemoryContentLoader:
	@pytest.mark.asyncio
	async def test_counts_fetches(self):
		loader = MemoryContentLoader({"memory:///a.vue": "A"})
		assert await loader.load("memory:///a.vue") == "A"
		assert await loader.load("memory:///a.vue") == "A"
		assert loader.fetches["memory:///a.vue"] == 2

	@pytest.mark.asyncio
	async def test_missing(self):
		loader = MemoryContentLoader()
		with pytest.raises(ContentLoadError, match="not found"):
			await loader.load("memory:///missing.vue")


class TestFileContentLoader:
	@pytest.mark.asyncio
	async def test_reads_paths_and_file_urls(self, tmp_path: Path):
		path = tmp_path / "a.vue"
		path.write_text("<script>export default {}</script>", encoding="utf-8")
		loader = FileContentLoader()
		assert await loader.load(str(path)) == "<script>export default {}</script>"
		assert await loader.load(path.as_uri()) == "<script>export default {}</script>"

	@pytest.mark.asyncio
	async def test_missing_file(self, tmp_path: Path):
		with pytest.raises(ContentLoadError):
			await FileContentLoader().load(str(tmp_path / "missing.vue"))


class TestHttpContentLoader:
	@staticmethod
	def _client() -> httpx.AsyncClient:
		def handler(request: httpx.Request) -> httpx.Response:
			if request.url.path == "/a.vue":
				return httpx.Response(200, text="<script>export default {}</script>")
			return httpx.Response(404, text="nope")

		return httpx.AsyncClient(transport=httpx.MockTransport(handler))

	@pytest.mark.asyncio
	async def test_fetches_text(self):
		loader = HttpContentLoader(client=self._client())
		try:
			text = await loader.load("https://example.test/a.vue")
		finally:
			await loader.aclose()
		assert text == "<script>export default {}</script>"

	@pytest.mark.asyncio
	async def test_http_errors_become_load_errors(self):
		loader = HttpContentLoader(client=self._client())
		try:
			with pytest.raises(ContentLoadError, match="missing.vue"):
				await loader.load("https://example.test/missing.vue")
		finally:
			await loader.aclose()


class TestRoutingContentLoader:
	@pytest.mark.asyncio
	async def test_dispatches_on_scheme(self):
		memory = MemoryContentLoader({"memory:///a.vue": "A"})
		loader = RoutingContentLoader({"MEMORY": memory})
		assert await loader.load("memory:///a.vue") == "A"

	@pytest.mark.asyncio
	async def test_paths_use_file_route(self, tmp_path: Path):
		path = tmp_path / "x.vue"
		path.write_text("X", encoding="utf-8")
		loader = RoutingContentLoader({"file": FileContentLoader()})
		assert await loader.load(str(path)) == "X"

	@pytest.mark.asyncio
	async def test_aclose_closes_shared_loaders_once(self):
		client = httpx.AsyncClient(
			transport=httpx.MockTransport(lambda request: httpx.Response(200))
		)
		http = HttpContentLoader(client=client)
		closed: list[str] = []
		original = http.aclose

		async def tracking_aclose() -> None:
			closed.append("http")
			await original()

		http.aclose = tracking_aclose  # pyright: ignore[reportAttributeAccessIssue]
		loader = RoutingContentLoader(
			{"http": http, "https": http, "memory": MemoryContentLoader()}
		)
		await loader.aclose()
		assert closed == ["http"]
		assert client.is_closed

	@pytest.mark.asyncio
	async def test_unknown_scheme(self):
		loader = RoutingContentLoader({})
		with pytest.raises(ContentLoadError, match="no loader for scheme 'ftp'"):
			await loader.load("ftp://host/a.vue")


class TestLoadContentPolicy:
	@pytest.mark.asyncio
	async def test_degrade_logs_and_returns_empty(self, caplog: pytest.LogCaptureFixture):
		loader = MemoryContentLoader()
		with caplog.at_level(logging.WARNING, logger="sfc_loader.loaders"):
			text = await load_content(loader, "memory:///gone.css", "degrade")
		assert text == ""
		assert "memory:///gone.css" in caplog.text

	@pytest.mark.asyncio
	async def test_fail_raises(self):
		loader = MemoryContentLoader()
		with pytest.raises(ContentLoadError):
			await load_content(loader, "memory:///gone.css", "fail")

	@pytest.mark.asyncio
	async def test_unexpected_errors_follow_the_policy(self):
		class Broken:
			async def load(self, locator: str) -> str:
				raise RuntimeError("boom")

		assert await load_content(Broken(), "x", "degrade") == ""
		with pytest.raises(ContentLoadError, match="boom"):
			await load_content(Broken(), "x", "fail")
