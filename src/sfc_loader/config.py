import os
from dataclasses import dataclass, replace
from typing import Literal, get_args

LoadErrorPolicy = Literal["degrade", "fail"]

ENV_SFC_LOADER_EXTENSION = "SFC_LOADER_EXTENSION"
ENV_SFC_LOADER_SCOPE_PREFIX = "SFC_LOADER_SCOPE_PREFIX"
ENV_SFC_LOADER_ON_LOAD_ERROR = "SFC_LOADER_ON_LOAD_ERROR"


@dataclass(frozen=True)
class TranspilerConfig:
	"""
	Configuration for component transpilation.

	Attributes:
	    extension (str): File extension that marks an import as a component.
	    scope_prefix (str): Prefix of allocated scope ids.
	    on_load_error (str): 'degrade' (log and use empty content) or 'fail'.
	"""

	extension: str = ".vue"
	"""File extension that marks an import as a component import."""

	scope_prefix: str = "data-v-"
	"""Prefix of scope ids, also used as the attribute selector name."""

	on_load_error: LoadErrorPolicy = "degrade"
	"""What to do when content cannot be fetched: 'degrade' keeps going with
	empty content (after logging a warning), 'fail' raises ContentLoadError."""

	create_hook: str = "beforeCreate"
	"""Lifecycle hook that inserts the component's style element."""

	destroy_hook: str = "destroyed"
	"""Lifecycle hook that removes the component's style element."""

	template_property: str = "template"
	scope_property: str = "_scopeId"

	root_identity: str = "memory:///root.vue"
	"""Identity given to sources passed to `transpile` without one."""

	def __post_init__(self) -> None:
		if self.on_load_error not in get_args(LoadErrorPolicy):
			raise ValueError(
				f"Invalid on_load_error {self.on_load_error!r}, "
				+ f"expected one of {get_args(LoadErrorPolicy)}"
			)
		if not self.extension.startswith("."):
			raise ValueError(f"Extension must start with '.', got {self.extension!r}")

	@classmethod
	def from_env(cls, **overrides: object) -> "TranspilerConfig":
		"""Build a config from `SFC_LOADER_*` environment variables.

		Explicit keyword overrides take precedence over the environment.
		"""
		config = cls()
		values: dict[str, object] = {}
		extension = os.environ.get(ENV_SFC_LOADER_EXTENSION)
		if extension:
			values["extension"] = extension
		prefix = os.environ.get(ENV_SFC_LOADER_SCOPE_PREFIX)
		if prefix:
			values["scope_prefix"] = prefix
		policy = os.environ.get(ENV_SFC_LOADER_ON_LOAD_ERROR)
		if policy:
			values["on_load_error"] = policy.strip().lower()
		values.update(overrides)
		return replace(config, **values)  # pyright: ignore[reportArgumentType]


__all__ = [
	"ENV_SFC_LOADER_EXTENSION",
	"ENV_SFC_LOADER_ON_LOAD_ERROR",
	"ENV_SFC_LOADER_SCOPE_PREFIX",
	"LoadErrorPolicy",
	"TranspilerConfig",
]
