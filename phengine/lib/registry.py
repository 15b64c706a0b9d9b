"""
Plugin and transform registry.

Maps module names to plugins and transform names to transforms. Each engine
owns one registry; bindings are registered up front and only read while
documents are processed.

Features:
- Registration with duplicate-name rejection
- Lookup errors that list what is registered
- Protocol enforcement on registration
"""

from typing import Iterable
from phengine.lib.errors import PluginNotFound, RegistrationError, TransformNotFound
from phengine.lib.log import LOG
from phengine.models.dataModel import PlaceholderPlugin, Transform


class PluginRegistry:
    def __init__(self) -> None:
        """Initialize empty plugin and transform tables."""
        self._plugins: dict[str, PlaceholderPlugin] = {}
        self._transforms: dict[str, Transform] = {}

    def register_plugin(self, plugin: PlaceholderPlugin) -> None:
        """Register a plugin under its name.

        Args:
            plugin: Plugin instance

        Raises:
            TypeError: If the object does not implement the plugin protocol
            RegistrationError: If the name is already registered
        """
        if not isinstance(plugin, PlaceholderPlugin):
            raise TypeError(f"{plugin!r} does not implement PlaceholderPlugin")
        if plugin.name in self._plugins:
            raise RegistrationError(f"Plugin '{plugin.name}' is already registered")
        self._plugins[plugin.name] = plugin
        LOG(f"Registered plugin '{plugin.name}'")

    def register_plugins(self, plugins: Iterable[PlaceholderPlugin]) -> None:
        for plugin in plugins:
            self.register_plugin(plugin)

    def get_plugin(self, name: str) -> PlaceholderPlugin:
        """Return the plugin registered under name.

        Raises:
            PluginNotFound: Listing the registered plugin names
        """
        if name not in self._plugins:
            raise PluginNotFound(name, self.plugin_names())
        return self._plugins[name]

    def has_plugin(self, name: str) -> bool:
        return name in self._plugins

    def plugin_names(self) -> list[str]:
        return list(self._plugins)

    def register_transform(self, transform: Transform) -> None:
        """Register a transform under its name.

        Args:
            transform: Transform instance

        Raises:
            TypeError: If the object does not implement the transform protocol
            RegistrationError: If the name is already registered
        """
        if not isinstance(transform, Transform):
            raise TypeError(f"{transform!r} does not implement Transform")
        if transform.name in self._transforms:
            raise RegistrationError(
                f"Transform '{transform.name}' is already registered"
            )
        self._transforms[transform.name] = transform
        LOG(f"Registered transform '{transform.name}'")

    def register_transforms(self, transforms: Iterable[Transform]) -> None:
        for transform in transforms:
            self.register_transform(transform)

    def get_transform(self, name: str) -> Transform:
        """Return the transform registered under name.

        Raises:
            TransformNotFound: Listing the registered transform names
        """
        if name not in self._transforms:
            raise TransformNotFound(name, self.transform_names())
        return self._transforms[name]

    def has_transform(self, name: str) -> bool:
        return name in self._transforms

    def transform_names(self) -> list[str]:
        return list(self._transforms)

    def clear(self) -> None:
        """Remove all plugins and transforms."""
        self._plugins.clear()
        self._transforms.clear()
