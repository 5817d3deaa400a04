import pytest
from sfc_loader.errors import ParseError
from sfc_loader.sections import parse_attributes, parse_sfc, parse_sfc_name

BASIC = """
<template>
  <div class="greeting">{{ message }}</div>
</template>

<script>
export default { data() { return { message: "hi" } } }
</script>

<style scoped>
.greeting { color: red }
</style>
"""


class TestParseSfc:
	"""Splitting a document into sections."""

	def test_extracts_each_section_kind(self):
		sections = parse_sfc(BASIC)
		assert len(sections.templates) == 1
		assert len(sections.scripts) == 1
		assert len(sections.styles) == 1
		assert '<div class="greeting">' in sections.templates[0].content
		assert sections.scripts[0].content.strip().startswith("export default")
		assert sections.styles[0].scoped is True

	def test_preserves_document_order(self):
		source = (
			"<style>.a{}</style><script>export default {}</script>"
			+ "<style>.b{}</style><style>.c{}</style>"
		)
		sections = parse_sfc(source)
		assert [s.content for s in sections.styles] == [".a{}", ".b{}", ".c{}"]

	def test_keeps_outer_markup(self):
		sections = parse_sfc('<script lang="js">export default {}</script>')
		assert sections.scripts[0].outer == '<script lang="js">export default {}</script>'
		assert sections.scripts[0].offset == 0

	def test_nested_templates_stay_in_outer_section(self):
		source = (
			'<template><ul><template v-for="i in items"><li>{{ i }}</li></template>'
			+ "</ul></template><script>export default {}</script>"
		)
		sections = parse_sfc(source)
		assert len(sections.templates) == 1
		assert sections.templates[0].content == (
			'<ul><template v-for="i in items"><li>{{ i }}</li></template></ul>'
		)

	def test_template_tags_in_comments_are_not_counted(self):
		source = (
			"<template><div><!-- <template> --></div><!-- </template> --></template>"
			+ "<script>export default {}</script>"
		)
		sections = parse_sfc(source)
		assert sections.templates[0].content == (
			"<div><!-- <template> --></div><!-- </template> -->"
		)
		assert len(sections.scripts) == 1

	def test_missing_sections_are_empty(self):
		sections = parse_sfc("<script>export default {}</script>")
		assert sections.templates == ()
		assert sections.styles == ()

	def test_no_sections_at_all(self):
		sections = parse_sfc("just text")
		assert list(sections) == []

	def test_top_level_comments_are_skipped(self):
		source = "<!-- <script>old()</script> --><script>export default {}</script>"
		sections = parse_sfc(source)
		assert [s.content for s in sections.scripts] == ["export default {}"]

	def test_tags_are_case_insensitive(self):
		sections = parse_sfc("<SCRIPT>export default {}</SCRIPT>")
		assert sections.scripts[0].tag == "script"
		assert sections.scripts[0].content == "export default {}"

	def test_self_closing_section(self):
		sections = parse_sfc('<script src="./logic.js" />')
		assert sections.scripts[0].content == ""
		assert sections.scripts[0].src == "./logic.js"

	def test_script_body_is_raw_text(self):
		source = '<script>const html = "<template>x</template>"; export default {}</script>'
		sections = parse_sfc(source)
		assert sections.templates == ()
		assert "<template>x</template>" in sections.scripts[0].content

	def test_unterminated_section_raises(self):
		with pytest.raises(ParseError, match="Unterminated <style>"):
			parse_sfc("<style>.a {}", identity="memory:///a.vue")

	def test_section_properties(self):
		sections = parse_sfc("<style scoped lang=\"scss\" src='./theme.css'></style>")
		style = sections.styles[0]
		assert style.scoped is True
		assert style.lang == "scss"
		assert style.src == "./theme.css"


class TestParseAttributes:
	def test_quoting_styles_and_flags(self):
		attributes = parse_attributes(' scoped lang="ts" src=\'a.js\' data-x=1')
		assert dict(attributes) == {
			"scoped": "",
			"lang": "ts",
			"src": "a.js",
			"data-x": "1",
		}

	def test_names_are_lowercased_and_first_wins(self):
		attributes = parse_attributes(' LANG="ts" lang="js"')
		assert dict(attributes) == {"lang": "ts"}

	def test_values_are_unescaped(self):
		attributes = parse_attributes(' title="a &amp; b"')
		assert attributes["title"] == "a & b"


class TestParseSfcName:
	@pytest.mark.parametrize(
		"locator,expected",
		[
			("https://example.com/components/My-Button.vue", "my-button"),
			("./todo_item.vue", "todo_item"),
			("memory:///root.vue", "root"),
			("card", "card"),
			("./1st.vue", None),
			("./index.html", None),
			("https://example.com/", None),
			(None, None),
		],
	)
	def test_names(self, locator: str | None, expected: str | None):
		assert parse_sfc_name(locator) == expected

	def test_custom_extension(self):
		assert parse_sfc_name("/widgets/Panel.sfc", extension=".sfc") == "panel"
		assert parse_sfc_name("/widgets/Panel.vue", extension=".sfc") is None
