"""Core configuration for the workflow engine."""

import logging
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from agent_workflow.logging import configure_logging


class StoreConfig(BaseSettings):
    """Configuration for workflow state persistence."""

    backend: Literal["memory", "filesystem", "redis"] = Field(
        default="memory",
        description="Store strategy used to persist workflow states",
    )
    storage_path: Path = Field(
        default=Path(".workflow_state"),
        description="Directory used by the filesystem store",
    )

    # Redis settings
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )
    ttl: int = Field(
        default=3600,
        gt=0,
        description="Seconds after which a persisted state expires (Redis only)",
    )
    prefix: str = Field(
        default="workflow:",
        description="Key prefix for persisted states (Redis only)",
    )
    lock_timeout: int = Field(
        default=10,
        gt=0,
        description="Seconds a save lock is held before it expires (Redis only)",
    )

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_STORE_",
        env_file=".env",
        extra="ignore",
    )


class ExecutorConfig(BaseSettings):
    """Execution bounds applied to each execute/resume call."""

    max_iterations: int = Field(
        default=100,
        gt=0,
        description="Maximum number of transitions applied per call",
    )
    max_execution_time: float = Field(
        default=300.0,
        gt=0,
        description="Wall-clock budget per call, in seconds",
    )

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_EXECUTOR_",
        env_file=".env",
        extra="ignore",
    )


class AgentConfig(BaseSettings):
    """Configuration for the agent handed to workflow actions."""

    provider: Literal["mock", "openai"] = Field(
        default="mock",
        description="Agent implementation to use",
    )
    mock_response: str = Field(
        default="ok",
        description="Default reply of the mock agent",
    )

    # OpenAI settings
    openai_api_key: str | None = Field(
        default=None,
        description="OpenAI API key",
    )
    openai_model: str = Field(
        default="gpt-4o-mini",
        description="OpenAI model to use",
    )
    openai_temperature: float = Field(
        default=0.7,
        ge=0.0,
        le=2.0,
        description="Temperature for OpenAI model",
    )

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_AGENT_",
        env_file=".env",
        extra="ignore",
    )


class WorkflowConfig(BaseSettings):
    """Main configuration for the workflow engine."""

    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode",
    )

    store: StoreConfig = Field(
        default_factory=StoreConfig,
        description="Store configuration",
    )
    executor: ExecutorConfig = Field(
        default_factory=ExecutorConfig,
        description="Executor configuration",
    )
    agent: AgentConfig = Field(
        default_factory=AgentConfig,
        description="Agent configuration",
    )

    model_config = SettingsConfigDict(
        env_prefix="WORKFLOW_",
        env_file=".env",
        extra="ignore",
    )

    def setup_logging(self) -> None:
        """Configure logging based on settings."""
        configure_logging(self.log_level)

        if self.debug:
            logging.getLogger("agent_workflow").setLevel(logging.DEBUG)
