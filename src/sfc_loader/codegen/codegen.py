import hashlib
import json
import logging
import re

from sfc_loader.codegen.templates.module import MODULE_TEMPLATE
from sfc_loader.config import TranspilerConfig
from sfc_loader.errors import DefaultExportError, GenerationError
from sfc_loader.scanner import mask_code

logger = logging.getLogger(__name__)

_DEFAULT_EXPORT = re.compile(r"(?<![\w$.])export\s+default(?![\w$])")
_JS_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")


def binding_name(identity: str) -> str:
	"""Stable local name for the component object of `identity`."""
	digest = hashlib.sha1(identity.encode("utf-8")).hexdigest()
	return f"sfc_{digest[:12]}"


def js_string(text: str) -> str:
	"""Encode `text` as a JS string literal that cannot be terminated early.

	JSON escaping covers quotes, backslashes, line terminators and
	non-ASCII; `</` is broken up so the literal is also safe inline in HTML.
	"""
	return json.dumps(text).replace("</", "<\\/")


def find_default_exports(script: str) -> list[tuple[int, int]]:
	"""Spans of every `export default` marker outside comments and literals."""
	masked = mask_code(script)
	return [match.span() for match in _DEFAULT_EXPORT.finditer(masked)]


def _check_identifier(value: str, what: str) -> None:
	if not _JS_IDENTIFIER.match(value):
		raise GenerationError(f"Invalid {what} {value!r}: not a JS identifier")


def generate(
	script: str,
	template: str,
	scope_id: str | None,
	css: str,
	*,
	binding: str = "sfc_component",
	config: TranspilerConfig | None = None,
	identity: str | None = None,
) -> str:
	"""Build the final module text of a component.

	The single `export default` marker becomes a local `const` binding; the
	template, scope id and style injection are attached to that binding,
	which is then re-exported as the module default.
	"""
	config = config or TranspilerConfig()
	_check_identifier(binding, "binding name")
	_check_identifier(config.template_property, "template property")
	_check_identifier(config.scope_property, "scope property")
	_check_identifier(config.create_hook, "creation hook")
	_check_identifier(config.destroy_hook, "destruction hook")

	spans = find_default_exports(script)
	if len(spans) != 1:
		raise DefaultExportError(len(spans), identity=identity)
	start, end = spans[0]

	code = MODULE_TEMPLATE.render(
		script_head=script[:start],
		script_tail=script[end:].lstrip(),
		binding=binding,
		template_property=config.template_property,
		template_literal=js_string(template),
		scope_property=config.scope_property,
		scope_literal=js_string(scope_id) if scope_id is not None else None,
		css_literal=js_string(css) if css.strip() else None,
		create_hook=config.create_hook,
		destroy_hook=config.destroy_hook,
	)
	logger.debug("Generated module %s (%d chars)", binding, len(code))
	return code


__all__ = [
	"binding_name",
	"find_default_exports",
	"generate",
	"js_string",
]
