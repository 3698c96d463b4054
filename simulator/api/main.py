"""
FastAPI application with assembled routers.

Builds the scenario engine in the application lifespan (database, registry,
OpenAPI scenarios, dispatchers per transport, broker gateway) and mounts
the admin API and HTTP transports.

Dependencies: fastapi, uvicorn, python-dotenv, simulator.core, simulator.boundary, simulator.configs
System role: API entry point with router assembly and server launch
"""

import logging
from contextlib import asynccontextmanager

import uvicorn
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from simulator import __version__
from simulator.application.adapters import DatabaseExecutionRecorder
from simulator.boundary.db import create_tables, get_async_engine, get_async_session_factory
from simulator.boundary.messaging import JmsGateway
from simulator.configs import Settings, get_settings
from simulator.core.dictionary import XmlDataDictionary
from simulator.core.dispatcher import ScenarioDispatcher
from simulator.core.endpoint import RecordingOutboundChannel
from simulator.core.executor import ScenarioExecutor
from simulator.core.fallback import (
    HttpCodeEndpointAdapter,
    SoapFaultEndpointAdapter,
    TimeoutEndpointAdapter,
)
from simulator.core.mapping import build_mapper
from simulator.core.openapi import OpenApiScenarioGenerator
from simulator.core.registry import ScenarioRegistry, default_registry, load_scenario_modules
from simulator.core.templates import TemplateLoader
from simulator.core.validation import MessageValidator
from simulator.observability import configure_logging
from simulator.observability.middleware import CorrelationMiddleware, RequestLoggingMiddleware

from .routers import (
    executions_router,
    health_router,
    rest_router,
    scenarios_router,
    ws_router,
)

logger = logging.getLogger(__name__)


def build_dispatchers(
    settings: Settings,
    registry: ScenarioRegistry,
    executor: ScenarioExecutor,
    outbound,
) -> dict[str, ScenarioDispatcher]:
    """
    Create one dispatcher per transport plus the launcher for starters.

    Args:
        settings: Application settings
        registry: Registered scenarios
        executor: Shared step interpreter
        outbound: Channel for send steps addressed to a destination

    Returns:
        dict[str, ScenarioDispatcher]: Dispatchers keyed rest, ws, jms and launcher
    """
    sim = settings.simulator
    common = {
        "registry": registry,
        "executor": executor,
        "default_scenario": sim.default_scenario,
        "default_timeout_ms": sim.default_timeout,
        "outbound": outbound,
    }
    rest, ws, jms = settings.rest, settings.ws, settings.jms
    return {
        "rest": ScenarioDispatcher(
            mapper=build_mapper(
                rest.mapping_strategy,
                registry,
                header=rest.mapping_header,
                query_param=rest.mapping_query_param,
            ),
            fallback=HttpCodeEndpointAdapter(rest.fallback_status_code),
            name="rest",
            **common,
        ),
        "ws": ScenarioDispatcher(
            mapper=build_mapper(
                ws.mapping_strategy,
                registry,
                header=ws.mapping_header,
                xpath_expression=ws.xpath_expression,
                namespaces=ws.namespaces,
            ),
            fallback=SoapFaultEndpointAdapter(),
            name="ws",
            **common,
        ),
        "jms": ScenarioDispatcher(
            mapper=build_mapper(jms.mapping_strategy, registry, header=jms.mapping_header),
            fallback=TimeoutEndpointAdapter(),
            name="jms",
            **common,
        ),
        "launcher": ScenarioDispatcher(
            mapper=build_mapper("request-mapping", registry),
            fallback=TimeoutEndpointAdapter(),
            name="launcher",
            **common,
        ),
    }


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Startup builds the scenario engine; shutdown stops the broker gateway,
    cancels running executions and disposes the database engine.
    """
    settings: Settings = app.state.settings
    registry: ScenarioRegistry = app.state.registry
    sim = settings.simulator

    # Startup
    configure_logging(settings.log_level)
    sim.log_configuration()

    engine = get_async_engine(settings.database)
    await create_tables(engine)
    session_factory = get_async_session_factory(engine)
    app.state.engine = engine
    app.state.session_factory = session_factory

    load_scenario_modules(sim.scenario_modules)
    if settings.rest.openapi_spec:
        OpenApiScenarioGenerator.from_file(settings.rest.openapi_spec).generate(registry)
    logger.info("Registered %d scenarios: %s", len(registry), ", ".join(registry.names()))
    logger.info("Enabled transports: %s", ", ".join(settings.enabled_transports) or "none")

    executor = ScenarioExecutor(
        registry,
        validator=MessageValidator(),
        templates=TemplateLoader(sim.template_path),
        inbound_dictionary=XmlDataDictionary.from_file(sim.inbound_xml_dictionary),
        outbound_dictionary=XmlDataDictionary.from_file(sim.outbound_xml_dictionary),
        recorder=DatabaseExecutionRecorder(session_factory),
        default_timeout_ms=sim.default_timeout,
        template_validation=sim.template_validation,
    )

    gateway = None
    if settings.transport_enabled("jms"):
        gateway = JmsGateway(
            settings.jms,
            exception_delay_ms=sim.exception_delay,
            reply_timeout_ms=sim.default_timeout,
        )
        outbound = gateway
    else:
        outbound = RecordingOutboundChannel()

    dispatchers = build_dispatchers(settings, registry, executor, outbound)
    app.state.executor = executor
    app.state.outbound = outbound
    app.state.dispatchers = dispatchers
    app.state.gateway = gateway

    if gateway is not None:
        gateway.dispatcher = dispatchers["jms"]
        gateway.start()

    yield

    # Shutdown
    if gateway is not None:
        gateway.stop()
    for dispatcher in dispatchers.values():
        await dispatcher.shutdown()
    await engine.dispose()
    logger.info("Simulator stopped")


def create_app(
    settings: Settings | None = None,
    registry: ScenarioRegistry | None = None,
) -> FastAPI:
    """
    Create and configure FastAPI application with routers.

    Args:
        settings: Settings to use; environment settings when None
        registry: Scenario registry; the decorator registry when None

    Returns:
        FastAPI: Configured application instance
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Service Simulator",
        description="Scenario based simulator for REST, SOAP and messaging interfaces",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.registry = registry if registry is not None else default_registry

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    # Admin API
    app.include_router(health_router, prefix="/api")
    app.include_router(scenarios_router, prefix="/api")
    app.include_router(executions_router, prefix="/api")

    # HTTP transports
    if settings.transport_enabled("rest"):
        app.include_router(rest_router, prefix=settings.rest.url_mapping.rstrip("/"))
    if settings.transport_enabled("ws"):
        app.include_router(ws_router, prefix=settings.ws.servlet_mapping.rstrip("/"))

    return app


if __name__ == "__main__":
    load_dotenv()
    uvicorn.run(
        "simulator.api.main:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
    )
