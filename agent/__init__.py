"""
Pydantic AI Agent module.
Exports the agent factory and the streaming wrapper.
"""
from .agent import ToolDeps, build_system_prompt, create_agent, get_model_settings
from .tools import SearchTools
from .wrapper import AgentWrapper, build_history, create_wrapper, translate_event

__all__ = [
    # Agent creation
    "create_agent",
    "build_system_prompt",
    "get_model_settings",
    "ToolDeps",
    # Wrappers
    "AgentWrapper",
    "create_wrapper",
    "build_history",
    "translate_event",
    # Tools
    "SearchTools",
]
