"""Factory for creating workflow stores."""

import logging

from agent_workflow.core.config import StoreConfig
from agent_workflow.store.base import WorkflowStore
from agent_workflow.store.filesystem import FilesystemWorkflowStore
from agent_workflow.store.memory import InMemoryWorkflowStore
from agent_workflow.store.redis_store import RedisWorkflowStore
from agent_workflow.workflow.errors import ConfigurationError

logger = logging.getLogger(__name__)


class WorkflowStoreFactory:
    """Factory for creating workflow store instances."""

    @staticmethod
    def create(config: StoreConfig) -> WorkflowStore:
        """Create a workflow store based on configuration.

        Args:
            config: Store configuration specifying the backend.

        Returns:
            Configured workflow store instance.

        Raises:
            ConfigurationError: If the backend is not supported.
        """
        logger.info(f"Creating workflow store: {config.backend}")

        if config.backend == "memory":
            return InMemoryWorkflowStore()
        elif config.backend == "filesystem":
            store = FilesystemWorkflowStore(config.storage_path)
            store.setup()
            return store
        elif config.backend == "redis":
            return RedisWorkflowStore.from_url(
                config.redis_url,
                ttl=config.ttl,
                prefix=config.prefix,
                lock_timeout=config.lock_timeout,
            )
        else:
            raise ConfigurationError(f"Unsupported workflow store backend: {config.backend}")
