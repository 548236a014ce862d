"""
Server-side state management.

Holds the process-wide services the routes depend on: the message store,
the pricing table and the factory building a model backend per request.
Active abort signals are tracked in core/state.py.
"""

from typing import Callable

from agent.tools.search import SearchTools
from agent.wrapper import create_wrapper
from config import get_config
from core.messages import ChatAgent
from core.persistence import InMemoryPersistence, PersistenceGateway
from core.pricing import PricingTable

# (model_id, api_key, search_tools, custom_instructions) -> ChatAgent
AgentFactory = Callable[[str, str, SearchTools | None, str | None], ChatAgent]


# =============================================================================
# Persistence
# =============================================================================

_persistence: PersistenceGateway = InMemoryPersistence()


def set_persistence(persistence: PersistenceGateway) -> None:
    """Replace the message store."""
    global _persistence
    _persistence = persistence


def get_persistence() -> PersistenceGateway:
    """Get the current message store."""
    return _persistence


# =============================================================================
# Pricing
# =============================================================================

_pricing: PricingTable | None = None


def set_pricing(pricing: PricingTable) -> None:
    """Set the pricing table. Called at startup once prices are loaded."""
    global _pricing
    _pricing = pricing


def get_pricing() -> PricingTable:
    """Get the pricing table, built from configuration alone if none was set."""
    global _pricing
    if _pricing is None:
        _pricing = PricingTable.from_config(get_config().pricing)
    return _pricing


# =============================================================================
# Agent Factory
# =============================================================================


def _default_agent_factory(
    model_id: str,
    api_key: str,
    search_tools: SearchTools | None,
    custom_instructions: str | None,
) -> ChatAgent:
    return create_wrapper(
        model_id=model_id,
        api_key=api_key,
        search_tools=search_tools,
        custom_instructions=custom_instructions,
    )


_agent_factory: AgentFactory = _default_agent_factory


def set_agent_factory(factory: AgentFactory | None) -> None:
    """Set the agent factory. None restores the OpenRouter default."""
    global _agent_factory
    _agent_factory = factory or _default_agent_factory


def get_agent_factory() -> AgentFactory:
    """Get the current agent factory."""
    return _agent_factory
