from cigrader.application.orchestrator import GradingOrchestrator
from cigrader.application.webhook_gateway import WebhookGateway

__all__ = [
    "GradingOrchestrator",
    "WebhookGateway",
]
