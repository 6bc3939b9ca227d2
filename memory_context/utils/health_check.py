"""
Health check utilities for the application.
"""

from dataclasses import asdict
from typing import Any, Dict, Optional

from .config import config, is_memory_enabled, validate_config
from .logging_config import get_logger
from .timestamp_utils import utc_isoformat
from .zep_client import ZepClient

logger = get_logger(__name__)

SERVICE_NAME = 'memory-context'
SERVICE_VERSION = '1.0.0'


async def check_health(client: Optional[ZepClient] = None) -> bool:
    """Check the health of all system components.

    Returns:
        True if all components are healthy, False otherwise
    """
    try:
        health_status = await get_health_status(client)

        all_healthy = all(status.get('healthy', False) for status in health_status['components'].values())

        if all_healthy:
            logger.info('All system components are healthy')
        else:
            logger.warning('Some system components are unhealthy')

        return all_healthy

    except Exception as e:
        logger.error(f'Health check failed: {e}')
        return False


async def get_health_status(client: Optional[ZepClient] = None) -> Dict[str, Any]:
    """Get detailed health status of all components.

    Args:
        client: Zep client to probe; one is built from config when omitted

    Returns:
        Dictionary with the overall memory flag, timestamp and per-component status
    """
    components = {}

    if config.features.enable_zep_memory or client is not None:
        try:
            client = client or ZepClient(config.zep)
            components['zep'] = {'healthy': await client.health_check(), 'service': 'Zep Cloud'}
        except Exception as e:
            components['zep'] = {'healthy': False, 'service': 'Zep Cloud', 'error': str(e)}
    else:
        components['zep'] = {'healthy': False, 'service': 'Zep Cloud', 'error': 'ZEP_API_KEY is not configured'}

    return {'memory_enabled': is_memory_enabled(config), 'timestamp': utc_isoformat(), 'components': components}


async def get_system_info(client: Optional[ZepClient] = None) -> Dict[str, Any]:
    """Get system information and configuration.

    Returns:
        Dictionary with system information
    """
    is_valid, errors = validate_config(config)
    return {
        'service_name': SERVICE_NAME,
        'version': SERVICE_VERSION,
        'configuration': {
            'environment': config.environment,
            'status': 'configured' if is_valid else 'misconfigured',
            'errors': errors,
            'max_data_size_characters': config.memory.max_data_size_characters,
        },
        'features': asdict(config.features),
        'health_status': await get_health_status(client)
    }
