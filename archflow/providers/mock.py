"""Offline adapter with canned answers, used when no API key is configured."""

import asyncio
from typing import Optional, Sequence

from ..config import ProviderSettings
from ..models import DesignArtifact, Graph, Message, Role
from .base import ProviderAdapter

SCRIPTED_REPLIES = [
    "Great choice, that's an exciting project! **What scale do you expect?** "
    "Hundreds, thousands or millions of users?",
    "Got it, that tells me a lot about the infrastructure. **What are the core features?** "
    "For example user accounts, payments, real-time notifications or file uploads.",
    "Nice feature set! **What kind of data** will you store? Think user profiles, "
    "transactions, media files and so on.",
    "Makes sense. **Do you need any third-party integrations?** Payment providers, "
    "email delivery, analytics or external APIs?",
    "Perfect! Last question: **any technical preferences or constraints?** Specific "
    "databases, cloud providers or languages?",
    "Awesome, I think I have a good picture now.\n\n"
    "**Here's what I understood:**\n"
    "- You're building a scalable application\n"
    "- With auth, data storage and integrations\n"
    "- It needs to be reliable and performant\n\n"
    "**Ready to generate your system design?**",
]

SAMPLE_MERMAID = """graph TD
    Client[Client / Browser] -->|HTTPS| LB[Load Balancer]
    LB --> Web1[Web Server 1]
    LB --> Web2[Web Server 2]
    Web1 --> DB[(Primary Database)]
    Web2 --> DB
    Web1 -.-> Cache[(Redis Cache)]"""


def _node(node_id, kind, x, y, label, description, tech):
    return {
        "id": node_id,
        "type": kind,
        "position": {"x": x, "y": y},
        "data": {"label": label, "description": description, "tech": tech},
    }


SAMPLE_GRAPH = {
    "nodes": [
        _node("client", "clientNode", 250, 0, "Client / Browser",
              "User interface running in the browser.", "React, Mobile App"),
        _node("lb", "loadBalancerNode", 250, 150, "Load Balancer",
              "Spreads incoming traffic across the web servers.", "NGINX, AWS ALB"),
        _node("web-server-1", "serverNode", 100, 300, "Web Server 1",
              "Runs application logic and serves requests.", "Node.js, Express"),
        _node("web-server-2", "serverNode", 400, 300, "Web Server 2",
              "Second server for horizontal scaling.", "Node.js, Express"),
        _node("db-primary", "databaseNode", 250, 450, "Primary Database",
              "Persistent storage, takes all writes.", "PostgreSQL"),
        _node("cache", "cacheNode", 50, 450, "Redis Cache",
              "Hot data cache in front of the database.", "Redis"),
    ],
    "edges": [
        {"id": "e1", "source": "client", "target": "lb", "animated": True, "label": "HTTPS"},
        {"id": "e2", "source": "lb", "target": "web-server-1", "animated": True},
        {"id": "e3", "source": "lb", "target": "web-server-2", "animated": True},
        {"id": "e4", "source": "web-server-1", "target": "db-primary", "animated": True},
        {"id": "e5", "source": "web-server-2", "target": "db-primary", "animated": True},
        {"id": "e6", "source": "web-server-1", "target": "cache", "animated": False},
    ],
}

SAMPLE_DESIGN = {
    "summary": (
        "A scalable microservice architecture with a CDN, load balancing, an API "
        "gateway, several backend services, caching and a message queue."
    ),
    "mermaidCode": """graph TD
    Client[Web/Mobile Client] -->|HTTPS| CDN[CDN]
    CDN --> LB[Load Balancer]
    LB --> Gateway[API Gateway]
    Gateway --> Auth[Auth Service]
    Gateway --> Users[User Service]
    Gateway --> Core[Core Service]
    Gateway --> Notifications[Notification Service]
    Auth --> Redis[(Redis Cache)]
    Users --> UserDB[(User Database)]
    Core --> MainDB[(Primary Database)]
    Core --> Redis
    Notifications --> Queue[Message Queue]
    Queue --> EmailWorker[Email Worker]""",
    "flowData": {
        "nodes": [
            _node("client", "clientNode", 400, 0, "Web/Mobile Client",
                  "Frontend application for users", "React, React Native"),
            _node("cdn", "cacheNode", 400, 80, "CDN",
                  "Delivers static assets", "CloudFront"),
            _node("lb", "loadBalancerNode", 400, 160, "Load Balancer",
                  "Distributes traffic across gateway instances", "NGINX, AWS ALB"),
            _node("gateway", "serverNode", 400, 250, "API Gateway",
                  "Single entry point, routing and rate limiting", "Kong"),
            _node("auth", "serverNode", 150, 350, "Auth Service",
                  "Authentication and authorization", "Node.js, JWT"),
            _node("users", "serverNode", 350, 350, "User Service",
                  "User profiles and account data", "Node.js, Express"),
            _node("core", "serverNode", 550, 350, "Core Service",
                  "Main business logic", "Python, FastAPI"),
            _node("notifications", "serverNode", 750, 350, "Notification Service",
                  "Push and email notifications", "Node.js"),
            _node("redis", "cacheNode", 150, 470, "Redis Cache",
                  "Sessions and hot data", "Redis"),
            _node("userdb", "databaseNode", 350, 470, "User Database",
                  "User records", "PostgreSQL"),
            _node("maindb", "databaseNode", 550, 470, "Primary Database",
                  "Main application data", "PostgreSQL"),
            _node("queue", "serverNode", 750, 470, "Message Queue",
                  "Asynchronous job processing", "RabbitMQ"),
            _node("emailworker", "serverNode", 750, 560, "Email Worker",
                  "Sends queued email", "Node.js, SendGrid"),
        ],
        "edges": [
            {"id": "e1", "source": "client", "target": "cdn"},
            {"id": "e2", "source": "cdn", "target": "lb"},
            {"id": "e3", "source": "lb", "target": "gateway"},
            {"id": "e4", "source": "gateway", "target": "auth"},
            {"id": "e5", "source": "gateway", "target": "users"},
            {"id": "e6", "source": "gateway", "target": "core"},
            {"id": "e7", "source": "gateway", "target": "notifications"},
            {"id": "e8", "source": "auth", "target": "redis"},
            {"id": "e9", "source": "users", "target": "userdb"},
            {"id": "e10", "source": "core", "target": "maindb"},
            {"id": "e11", "source": "core", "target": "redis", "animated": False},
            {"id": "e12", "source": "notifications", "target": "queue"},
            {"id": "e13", "source": "queue", "target": "emailworker"},
        ],
    },
}


class MockAdapter(ProviderAdapter):
    """Scripted interview, fixed sample design and fixed sample import.

    ``latency`` adds an artificial delay to every call so callers can
    exercise their pending and cancellation paths without a network.
    """

    name = "mock"

    def __init__(self, settings: Optional[ProviderSettings] = None, latency: float = 0.0):
        self.settings = settings
        self.latency = latency

    async def _wait(self):
        if self.latency > 0:
            await asyncio.sleep(self.latency)

    async def converse(self, history: Sequence[Message], new_user_message: str) -> Message:
        await self._wait()
        exchange = len(history) // 2
        reply = SCRIPTED_REPLIES[min(exchange, len(SCRIPTED_REPLIES) - 1)]
        return Message(role=Role.ASSISTANT, content=reply)

    async def synthesize_design(self, history: Sequence[Message]) -> DesignArtifact:
        await self._wait()
        return DesignArtifact.model_validate(SAMPLE_DESIGN)

    async def describe_image(self, image: bytes, mime_type: str) -> str:
        await self._wait()
        return SAMPLE_MERMAID

    async def convert_description_to_graph(self, diagram_text: str) -> Graph:
        await self._wait()
        return Graph.model_validate(SAMPLE_GRAPH)
