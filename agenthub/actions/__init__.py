from agenthub.actions.agents import update_agent_action
from agenthub.actions.integrations import get_integrations_status_action, disconnect_integration_action
from agenthub.actions.knowledge import add_knowledge_action, remove_knowledge_action

__all__ = [
    "update_agent_action",
    "get_integrations_status_action",
    "disconnect_integration_action",
    "add_knowledge_action",
    "remove_knowledge_action",
]
