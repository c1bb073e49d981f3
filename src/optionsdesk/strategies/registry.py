"""Strategy registry with decorator-based registration and auto-discovery."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import re
from typing import Any

from optionsdesk.core.exceptions import StrategyNotFoundError
from optionsdesk.strategies.base import StrategyDefinition

logger = logging.getLogger(__name__)


def normalize_name(name: str) -> str:
    """'Bull Put Spread', 'bull_put_spread' and 'bull-put-spread' share a key."""
    return re.sub(r"[^a-z]", "", name.lower())


class StrategyRegistry:
    """Singleton registry for strategy definitions."""

    _instance: StrategyRegistry | None = None
    _strategies: dict[str, type[StrategyDefinition]]
    _discovered: bool

    def __new__(cls) -> StrategyRegistry:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._strategies = {}
            cls._instance._discovered = False
        return cls._instance

    @classmethod
    def register(cls, strategy_cls: type[StrategyDefinition]) -> type[StrategyDefinition]:
        """Decorator to register a strategy definition.

        Usage:
            @StrategyRegistry.register
            class MyStrategy(StrategyDefinition):
                strategy_name = "My Strategy"
                ...
        """
        instance = cls()
        name = strategy_cls.strategy_name
        if not name:
            raise ValueError(
                f"Strategy {strategy_cls.__name__} must define 'strategy_name'"
            )
        key = normalize_name(name)
        if key in instance._strategies:
            logger.warning(f"Overwriting existing strategy: {name}")
        instance._strategies[key] = strategy_cls
        logger.debug(f"Registered strategy: {name}")
        return strategy_cls

    def get(self, name: str) -> type[StrategyDefinition] | None:
        return self._strategies.get(normalize_name(name))

    def get_strategy(self, name: str) -> type[StrategyDefinition]:
        cls = self.get(name)
        if cls is None:
            available = ", ".join(self.names)
            raise StrategyNotFoundError(
                f"Strategy '{name}' not found. Available: {available}"
            )
        return cls

    def list_strategies(self) -> list[dict[str, Any]]:
        return [cls.get_metadata() for cls in self._strategies.values()]

    def definitions(self) -> list[type[StrategyDefinition]]:
        return list(self._strategies.values())

    @property
    def names(self) -> list[str]:
        return sorted(cls.strategy_name for cls in self._strategies.values())

    def discover(self) -> None:
        """Auto-discover strategies in optionsdesk.strategies subpackages."""
        import optionsdesk.strategies as pkg

        for _importer, modname, _ispkg in pkgutil.walk_packages(
            pkg.__path__, prefix="optionsdesk.strategies."
        ):
            try:
                module = importlib.import_module(modname)
            except ImportError as e:
                logger.warning(f"Failed to import {modname}: {e}")
                continue
            # modules imported before a reset() will not run their decorators again
            for obj in vars(module).values():
                if (
                    isinstance(obj, type)
                    and issubclass(obj, StrategyDefinition)
                    and obj.__module__ == modname
                    and obj.strategy_name
                    and normalize_name(obj.strategy_name) not in self._strategies
                ):
                    self.register(obj)
        self._discovered = True

    def ensure_discovered(self) -> StrategyRegistry:
        if not self._discovered:
            self.discover()
        return self

    def snapshot(self) -> dict[str, type[StrategyDefinition]]:
        return dict(self._strategies)

    def restore(self, strategies: dict[str, type[StrategyDefinition]]) -> None:
        self._strategies = dict(strategies)

    @classmethod
    def reset(cls) -> None:
        """Reset the registry (mainly for testing)."""
        if cls._instance is not None:
            cls._instance._strategies = {}
            cls._instance._discovered = False


def get_registry() -> StrategyRegistry:
    """Registry with the built-in strategies loaded."""
    return StrategyRegistry().ensure_discovered()
