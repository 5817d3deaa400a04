from sfc_loader.codegen.codegen import (
	binding_name,
	find_default_exports,
	generate,
	js_string,
)

__all__ = ["binding_name", "find_default_exports", "generate", "js_string"]
