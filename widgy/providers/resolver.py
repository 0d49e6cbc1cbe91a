"""Builds render contexts for widget configs."""

import logging

from widgy.bindings import required_sources
from widgy.render import RenderContext
from widgy.schema import WidgetConfig

from .lib import DataProviderRegistry

logger = logging.getLogger(__name__)


class DataResolver:
    """Resolves the binding values a config needs.

    Args:
        registry: Providers to fetch from. Defaults to
            `DataProviderRegistry.make_default()`.
    """

    def __init__(self, registry: DataProviderRegistry | None = None):
        self.registry = registry or DataProviderRegistry.make_default()

    async def resolve_bindings(self, config: WidgetConfig) -> dict[str, str]:
        """Fetch the sources `config` references, then fill in fallbacks.

        A `DataBinding.fallback` is used only for a key no provider produced.
        """
        values = await self.registry.resolve_bindings(required_sources(config))

        for binding in (config.data_bindings or {}).values():
            if binding.fallback is not None and binding.key not in values:
                logger.debug(f"Using fallback for {binding.key}")
                values[binding.key] = binding.fallback
        return values

    async def make_context(
        self, config: WidgetConfig, is_widget_extension: bool = False
    ) -> RenderContext:
        values = await self.resolve_bindings(config)
        return RenderContext(binding_values=values, is_widget_extension=is_widget_extension)


__all__ = ["DataResolver"]
