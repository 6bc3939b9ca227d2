"""
Configuration management for the memory backends and application settings.
"""

import os
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from dotenv import load_dotenv

load_dotenv()

# Per-environment ceilings for a single graph ingestion payload
MAX_DATA_SIZE_BY_ENVIRONMENT = {
    'development': 5000,
    'production': 15000,
    'test': 1000,
}
DEFAULT_MAX_DATA_SIZE = 10000


@dataclass
class ZepConfig:
    """Configuration for the Zep Cloud graph memory service."""
    api_key: str
    base_url: Optional[str]


@dataclass
class Mem0Config:
    """Configuration for the Mem0 hosted memory service."""
    api_key: str


@dataclass
class MemoryConfig:
    """Configuration for memory orchestration."""
    max_data_size_characters: int


@dataclass
class ToolUserConfig:
    """Identity the tool server acts on behalf of."""
    user_id: str
    workspace_id: str
    email: str
    first_name: Optional[str]
    last_name: Optional[str]
    history_limit: int


@dataclass
class MCPConfig:
    """Configuration for MCP interface."""
    transport: str
    host: str
    port: int


@dataclass
class MemoryFeatures:
    """Feature flags derived from which backends are configured."""
    enable_zep_memory: bool
    enable_mem0_memory: bool
    enable_memory_search: bool
    enable_memory_storage: bool
    enable_memory_context: bool


@dataclass
class AppConfig:
    """Main application configuration."""
    environment: str
    log_level: str
    zep: ZepConfig
    mem0: Mem0Config
    memory: MemoryConfig
    tool_user: ToolUserConfig
    mcp: MCPConfig
    features: MemoryFeatures = field(init=False)

    def __post_init__(self):
        zep_enabled = bool(self.zep.api_key)
        self.features = MemoryFeatures(enable_zep_memory=zep_enabled,
                                       enable_mem0_memory=bool(self.mem0.api_key),
                                       enable_memory_search=zep_enabled,
                                       enable_memory_storage=zep_enabled,
                                       enable_memory_context=zep_enabled)


def max_data_size_for(environment: str) -> int:
    """Return the ingestion size ceiling for a deployment environment."""
    return MAX_DATA_SIZE_BY_ENVIRONMENT.get(environment, DEFAULT_MAX_DATA_SIZE)


def load_config() -> AppConfig:
    """Load configuration from environment variables with defaults."""
    environment = os.getenv('ENVIRONMENT', '')

    zep_config = ZepConfig(api_key=os.getenv('ZEP_API_KEY', ''), base_url=os.getenv('ZEP_API_URL') or None)

    mem0_config = Mem0Config(api_key=os.getenv('MEM0_API_KEY', ''))

    max_data_size = os.getenv('MEMORY_MAX_DATA_SIZE')
    memory_config = MemoryConfig(
        max_data_size_characters=int(max_data_size) if max_data_size else max_data_size_for(environment))

    tool_user_config = ToolUserConfig(user_id=os.getenv('MEMORY_USER_ID', ''),
                                      workspace_id=os.getenv('MEMORY_WORKSPACE_ID', ''),
                                      email=os.getenv('MEMORY_USER_EMAIL', ''),
                                      first_name=os.getenv('MEMORY_USER_FIRST_NAME') or None,
                                      last_name=os.getenv('MEMORY_USER_LAST_NAME') or None,
                                      history_limit=int(os.getenv('MEMORY_HISTORY_LIMIT', '20')))

    mcp_config = MCPConfig(transport=os.getenv('MCP_TRANSPORT', 'sse'),
                           host=os.getenv('MCP_HOST', '127.0.0.1'),
                           port=int(os.getenv('MCP_PORT', '8000')))

    return AppConfig(environment=environment,
                     log_level=os.getenv('LOG_LEVEL', 'INFO'),
                     zep=zep_config,
                     mem0=mem0_config,
                     memory=memory_config,
                     tool_user=tool_user_config,
                     mcp=mcp_config)


def is_memory_enabled(app_config: Optional[AppConfig] = None) -> bool:
    """Whether at least one memory backend has credentials."""
    app_config = app_config or config
    return bool(app_config.zep.api_key or app_config.mem0.api_key)


def validate_config(app_config: Optional[AppConfig] = None) -> Tuple[bool, List[str]]:
    """Check the memory configuration.

    Returns:
        Tuple of (is_valid, errors). A missing Mem0 key is reported but marked optional.
    """
    app_config = app_config or config
    errors = []

    if not app_config.zep.api_key:
        errors.append('ZEP_API_KEY is not configured')

    if not app_config.mem0.api_key:
        errors.append('MEM0_API_KEY is not configured (optional)')

    return len(errors) == 0, errors


# Global configuration instance
config = load_config()
